"""
Weekly event lifecycle.

One event is created per week and becomes the current event by virtue of
having the latest scheduled date-time. Registration is closed either by the
weekly trigger or by the reservation engine once combined capacity is reached.
Events are never reopened.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

from weekly_rsvp.core.config import Settings, settings as default_settings
from weekly_rsvp.domain import models as domain
from weekly_rsvp.domain.errors import NoActiveEventError
from weekly_rsvp.services.clock import utc_now
from weekly_rsvp.stores.interfaces import EventStore

logger = logging.getLogger(__name__)


# Fixed English names; the host locale must not change event names.
MONTH_NAMES = (
    "JANUARY", "FEBRUARY", "MARCH", "APRIL", "MAY", "JUNE",
    "JULY", "AUGUST", "SEPTEMBER", "OCTOBER", "NOVEMBER", "DECEMBER",
)


def event_name(prefix: str, moment: datetime) -> str:
    """Display name such as ``Sunday Service 2026-OCTOBER-25``."""
    return f"{prefix} {moment.year}-{MONTH_NAMES[moment.month - 1]}-{moment.day}"


def same_utc_day(event_date_time: int, moment: datetime) -> bool:
    return domain.from_epoch_millis(event_date_time).date() == moment.astimezone(timezone.utc).date()


class EventLifecycleManager:
    def __init__(
        self,
        store: EventStore,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._settings = settings or default_settings
        self._clock = clock

    def create_event(self) -> domain.Event:
        # Literal seven-day offset from the trigger time, not "next Sunday".
        target = self._clock() + timedelta(days=7)

        # One event per target day, however many times the trigger fires.
        latest = self._store.find_latest_by_event_date_time()
        if latest is not None and same_utc_day(latest.event_date_time, target):
            logger.info("createEvent: (exists) %s", latest)
            return latest

        event = domain.Event(
            id=domain.new_id(),
            name=event_name(self._settings.EVENT_NAME_PREFIX, target),
            event_date_time=domain.to_epoch_millis(target),
            status=domain.EventStatus.OPEN,
        )
        event = self._store.save(event)
        logger.info("createEvent: %s", event)
        return event

    def current_event(self) -> domain.Event:
        """Return the event with the latest scheduled date-time, whatever its status."""
        event = self._store.find_latest_by_event_date_time()
        if event is None:
            raise NoActiveEventError()
        return event

    def close_event(self, event: domain.Event) -> domain.Event:
        closed = self._store.save(domain.close_event(event))
        logger.info("closeEvent: %s", closed)
        return closed

    def close_event_registration(self) -> domain.Event:
        return self.close_event(self.current_event())
