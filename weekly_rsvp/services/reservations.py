"""
Reservation engine.

Capacity is enforced per (event, partition): the count, the check and the
insert for one partition of one event run under a Redis lock, so two callers
can never both take the last seat. Re-reservations only flip the volunteer
flag on the existing row and never touch the lock or the capacity.
"""

import logging
import re
from contextlib import AbstractContextManager
from datetime import date, datetime
from typing import Callable

from weekly_rsvp.core.config import Settings, settings as default_settings
from weekly_rsvp.domain import models as domain
from weekly_rsvp.domain.errors import CapacityExceededError, EligibilityViolationError, InvalidInputError
from weekly_rsvp.services import locks
from weekly_rsvp.services.clock import utc_now
from weekly_rsvp.services.events import EventLifecycleManager
from weekly_rsvp.services.persons import PersonDirectory
from weekly_rsvp.stores.interfaces import DuplicateRecordError, ReservationStore

logger = logging.getLogger(__name__)

BIRTHDAY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

LockFactory = Callable[[str, bool], AbstractContextManager]


def parse_birthday(value: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` calendar date."""
    if not BIRTHDAY_PATTERN.match(value or ""):
        raise InvalidInputError(f"Invalid birthday '{value}', expected YYYY-MM-DD.", field="birthday")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidInputError(f"Invalid birthday '{value}', expected YYYY-MM-DD.", field="birthday")


class ReservationEngine:
    def __init__(
        self,
        events: EventLifecycleManager,
        persons: PersonDirectory,
        reservations: ReservationStore,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utc_now,
        lock_factory: LockFactory | None = None,
    ) -> None:
        self._events = events
        self._persons = persons
        self._reservations = reservations
        self._settings = settings or default_settings
        self._clock = clock
        self._lock_factory = lock_factory or locks.partition_lock

    def reserve(
        self,
        *,
        mobile_no: str,
        email: str,
        first_name: str,
        last_name: str,
        birthday: str,
        full_address: str,
        city: str,
        vaccinated: bool,
        volunteer: bool,
    ) -> domain.Reservation:
        logger.debug(
            "reserve: (start) [mobile_no=%s,email=%s,first_name=%s,last_name=%s,"
            "birthday=%s,full_address=%s,city=%s,vaccinated=%s,volunteer=%s]",
            mobile_no, email, first_name, last_name, birthday, full_address, city, vaccinated, volunteer,
        )

        converted_birthday = parse_birthday(birthday)
        current_event = self._events.current_event()

        person = self._persons.upsert(
            mobile_no=mobile_no,
            email=email,
            first_name=first_name,
            last_name=last_name,
            birthday=converted_birthday,
            full_address=full_address,
            city=city,
            vaccinated=vaccinated,
        )

        self._check_eligibility(converted_birthday, vaccinated)

        existing = self._reservations.find_by_person_and_event(person, current_event)
        if existing is not None:
            logger.debug("reserve: (done - has existing) [person=%s,event=%s]", person.id, current_event.id)
            return self._reservations.save(domain.with_volunteer(existing, volunteer))

        with self._lock_factory(current_event.id, volunteer):
            reservation_list = self._reservations.find_by_event(current_event)

            already_reserved = next((r for r in reservation_list if r.person_id == person.id), None)
            if already_reserved is not None:
                return self._reservations.save(domain.with_volunteer(already_reserved, volunteer))

            self._check_capacity(reservation_list, volunteer, current_event)

            new_reservation = domain.Reservation(
                id=domain.new_id(),
                person_id=person.id,
                event_id=current_event.id,
                volunteer=volunteer,
                reservation_date_time=domain.to_epoch_millis(self._clock()),
            )
            try:
                new_reservation = self._reservations.save(new_reservation)
            except DuplicateRecordError:
                # Same person racing through the other partition's lock.
                winner = self._reservations.find_by_person_and_event(person, current_event)
                if winner is None:
                    raise
                return self._reservations.save(domain.with_volunteer(winner, volunteer))
            logger.info("reserve: (done - saved) %s", new_reservation)

            # Re-count: the other partition may have inserted under its own lock.
            total = len(self._reservations.find_by_event(current_event))
            if total >= self._settings.TOTAL_ATTENDANCE:
                closed = self._events.close_event(current_event)
                logger.info("reserve: (max attendance) Closing event. [size=%s, event=%s]", total, closed)

        return new_reservation

    def _check_eligibility(self, birthday: date, vaccinated: bool) -> None:
        s = self._settings
        if s.CHECK_AGE:
            age = domain.age_on(birthday, self._clock().date())
            logger.debug("reserve: (validating age) [birthday=%s,age=%s]", birthday, age)
            if age < s.AGE_MIN or age > s.AGE_MAX:
                raise EligibilityViolationError(f"Sorry, only people ages {s.AGE_MIN} to {s.AGE_MAX} are allowed.")

        if s.CHECK_VACCINATED:
            logger.debug("reserve: (validating vaccination) [vaccinated=%s]", vaccinated)
            if not vaccinated:
                raise EligibilityViolationError("Sorry, only vaccinated individuals are allowed.")

    def _check_capacity(
        self, reservation_list: list[domain.Reservation], volunteer: bool, event: domain.Event
    ) -> None:
        s = self._settings
        logger.debug("reserve: (validating current event) [size=%s,event=%s]", len(reservation_list), event.id)
        if volunteer:
            if sum(1 for r in reservation_list if r.volunteer) >= s.MAX_VOLUNTEER_ATTENDANCE:
                raise CapacityExceededError(
                    f"Volunteer attendance limit reached. Only {s.MAX_VOLUNTEER_ATTENDANCE} people are allowed.",
                    volunteer=True,
                )
        elif sum(1 for r in reservation_list if not r.volunteer) >= s.MAX_ATTENDEE_ATTENDANCE:
            raise CapacityExceededError(
                f"Event attendance limit reached. Only {s.MAX_ATTENDEE_ATTENDANCE} people are allowed.",
                volunteer=False,
            )
