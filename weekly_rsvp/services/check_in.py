import logging
from datetime import datetime
from typing import Callable

from weekly_rsvp.domain import models as domain
from weekly_rsvp.domain.errors import NotFoundError
from weekly_rsvp.services.clock import utc_now
from weekly_rsvp.stores.interfaces import ReservationStore

logger = logging.getLogger(__name__)


class CheckInScanner:
    def __init__(self, reservations: ReservationStore, clock: Callable[[], datetime] = utc_now) -> None:
        self._reservations = reservations
        self._clock = clock

    def scan(self, reservation_id: str) -> domain.Reservation:
        """Record the check-in time. A second scan overwrites the first."""
        reservation = self._reservations.find_by_id(reservation_id)
        if reservation is None:
            raise NotFoundError("Reservation does not exist")
        scanned_at = domain.to_epoch_millis(self._clock())
        updated = self._reservations.save(domain.with_scan(reservation, scanned_at))
        logger.info("scan: %s", updated)
        return updated
