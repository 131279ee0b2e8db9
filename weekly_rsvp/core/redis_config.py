from weekly_rsvp.core.config import settings


def get_redis_url():
    return settings.REDIS_URL
