import logging
from contextlib import contextmanager

import redis

from weekly_rsvp.core.config import settings
from weekly_rsvp.core.redis_config import get_redis_url
from weekly_rsvp.domain.errors import ReservationBusyError

logger = logging.getLogger(__name__)


def get_redis_client():
    """Get Redis client for locking."""
    return redis.from_url(get_redis_url(), decode_responses=True)


def partition_lock_key(event_id: str, volunteer: bool) -> str:
    partition = "volunteer" if volunteer else "attendee"
    return f"reservation_lock:{event_id}:{partition}"


@contextmanager
def partition_lock(event_id: str, volunteer: bool):
    """
    Hold the capacity lock for one (event, partition) pair.
    Only one process at a time may count and insert reservations
    for the same partition of the same event.
    """
    redis_client = get_redis_client()
    lock = redis_client.lock(
        partition_lock_key(event_id, volunteer),
        timeout=settings.LOCK_TIMEOUT,
        blocking_timeout=settings.LOCK_BLOCKING_TIMEOUT,
    )

    try:
        if not lock.acquire(blocking=True, blocking_timeout=settings.LOCK_BLOCKING_TIMEOUT):
            raise ReservationBusyError()
    except redis.exceptions.LockError:  # type: ignore
        raise ReservationBusyError()

    try:
        yield
    finally:
        # Always release the lock
        try:
            lock.release()
        except redis.exceptions.LockNotOwnedError:  # type: ignore
            logger.warning("Lock %s expired before release", lock.name)


@contextmanager
def singleton_lock(name: str):
    """
    Non-blocking lock for scheduled jobs. Yields True when this caller holds
    the lock, False when another invocation is already running.
    """
    redis_client = get_redis_client()
    lock = redis_client.lock(f"lifecycle_lock:{name}", timeout=settings.LOCK_TIMEOUT * 6)
    acquired = lock.acquire(blocking=False)
    try:
        yield acquired
    finally:
        if acquired:
            try:
                lock.release()
            except redis.exceptions.LockNotOwnedError:  # type: ignore
                logger.warning("Lock %s expired before release", lock.name)
