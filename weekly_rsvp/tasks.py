import logging

from weekly_rsvp.core.celery_config import celery_app
from weekly_rsvp.database.db import SessionLocal
from weekly_rsvp.domain.errors import NoActiveEventError
from weekly_rsvp.services.events import EventLifecycleManager
from weekly_rsvp.services.locks import singleton_lock
from weekly_rsvp.stores.sqlalchemy_store import SqlAlchemyEventStore

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name="weekly_rsvp.tasks.create_event_task")
def create_event_task(self) -> dict:
    """Create next week's event. Runs from celery beat every Sunday."""
    with singleton_lock("create_event") as acquired:
        if not acquired:
            logger.warning("create_event_task: another invocation is running, skipping")
            return {"status": "skipped"}

        db = SessionLocal()
        try:
            event = EventLifecycleManager(SqlAlchemyEventStore(db)).create_event()
        finally:
            db.close()

    return {"status": "created", "event_id": event.id, "name": event.name}


@celery_app.task(bind=True, name="weekly_rsvp.tasks.close_event_registration_task")
def close_event_registration_task(self) -> dict:
    """Close registration for the current event. Runs from celery beat every Friday."""
    with singleton_lock("close_event_registration") as acquired:
        if not acquired:
            logger.warning("close_event_registration_task: another invocation is running, skipping")
            return {"status": "skipped"}

        db = SessionLocal()
        try:
            event = EventLifecycleManager(SqlAlchemyEventStore(db)).close_event_registration()
        except NoActiveEventError as e:
            logger.warning("close_event_registration_task: %s", e.message)
            return {"status": "no_active_event"}
        finally:
            db.close()

    return {"status": "closed", "event_id": event.id}
