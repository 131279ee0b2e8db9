"""Domain records for events, people and reservations.

Records are immutable. Every change goes through one of the update functions
below, which return a new record with the named fields overridden.
"""

import enum
import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta, timezone


class EventStatus(str, enum.Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"


def new_id() -> str:
    return str(uuid.uuid4())


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def to_epoch_millis(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (moment - EPOCH) // timedelta(milliseconds=1)


def from_epoch_millis(millis: int) -> datetime:
    return EPOCH + timedelta(milliseconds=millis)


@dataclass(frozen=True)
class Event:
    id: str
    name: str
    event_date_time: int
    status: EventStatus = EventStatus.OPEN


@dataclass(frozen=True)
class Person:
    id: str
    mobile_no: str
    email: str
    first_name: str
    last_name: str
    birthday: date
    full_address: str
    city: str
    vaccinated: bool


@dataclass(frozen=True)
class Reservation:
    id: str
    person_id: str
    event_id: str
    volunteer: bool
    reservation_date_time: int
    scanned_date_time: int | None = None


def close_event(event: Event) -> Event:
    """Return ``event`` with registration closed. Closing is one-way."""
    return replace(event, status=EventStatus.CLOSED)


def update_profile(
    person: Person,
    *,
    email: str,
    first_name: str,
    last_name: str,
    birthday: date,
    full_address: str,
    city: str,
    vaccinated: bool,
) -> Person:
    return replace(
        person,
        email=email,
        first_name=first_name,
        last_name=last_name,
        birthday=birthday,
        full_address=full_address,
        city=city,
        vaccinated=vaccinated,
    )


def with_volunteer(reservation: Reservation, volunteer: bool) -> Reservation:
    return replace(reservation, volunteer=volunteer)


def with_scan(reservation: Reservation, scanned_at: int) -> Reservation:
    return replace(reservation, scanned_date_time=scanned_at)


def age_on(birthday: date, today: date) -> int:
    """Whole years elapsed between ``birthday`` and ``today``."""
    before_birthday = (today.month, today.day) < (birthday.month, birthday.day)
    return today.year - birthday.year - int(before_birthday)
