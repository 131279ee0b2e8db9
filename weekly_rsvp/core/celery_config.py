from celery import Celery
from celery.schedules import crontab

from weekly_rsvp.core.config import settings
from weekly_rsvp.core.redis_config import get_redis_url


def make_celery(app_name: str = "weekly_rsvp") -> Celery:
    redis_url = get_redis_url()
    celery = Celery(app_name, broker=redis_url, backend=redis_url, include=["weekly_rsvp.tasks"])
    celery.conf.task_serializer = "json"
    celery.conf.result_serializer = "json"
    celery.conf.accept_content = ["json"]
    celery.conf.result_persistent = False
    celery.conf.task_track_started = True
    celery.conf.timezone = "UTC"
    celery.conf.enable_utc = True

    # Creation must precede closure within each weekly cycle.
    celery.conf.beat_schedule = {
        "create-weekly-event": {
            "task": "weekly_rsvp.tasks.create_event_task",
            "schedule": crontab(
                minute=settings.CREATE_EVENT_MINUTE,
                hour=settings.CREATE_EVENT_HOUR,
                day_of_week=settings.CREATE_EVENT_DAY_OF_WEEK,
            ),
        },
        "close-weekly-registration": {
            "task": "weekly_rsvp.tasks.close_event_registration_task",
            "schedule": crontab(
                minute=settings.CLOSE_REGISTRATION_MINUTE,
                hour=settings.CLOSE_REGISTRATION_HOUR,
                day_of_week=settings.CLOSE_REGISTRATION_DAY_OF_WEEK,
            ),
        },
    }
    return celery


celery_app = make_celery()
