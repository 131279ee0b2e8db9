"""Store interfaces (repository pattern).

Stores return domain records and hide the persistence mechanics from the
services. ``save`` inserts or updates and makes the change durable.
"""

from abc import ABC, abstractmethod

from weekly_rsvp.domain.models import Event, Person, Reservation


class DuplicateRecordError(Exception):
    """A save violated a uniqueness constraint."""


class EventStore(ABC):
    @abstractmethod
    def save(self, event: Event) -> Event:
        ...

    @abstractmethod
    def find_latest_by_event_date_time(self) -> Event | None:
        """Return the event scheduled furthest in the future, or None."""
        ...


class PersonStore(ABC):
    @abstractmethod
    def save(self, person: Person) -> Person:
        """Raises DuplicateRecordError when the mobile number is taken."""
        ...

    @abstractmethod
    def find_by_mobile_no(self, mobile_no: str) -> Person | None:
        ...


class ReservationStore(ABC):
    @abstractmethod
    def save(self, reservation: Reservation) -> Reservation:
        """Raises DuplicateRecordError when the person already holds one for the event."""
        ...

    @abstractmethod
    def find_by_event(self, event: Event) -> list[Reservation]:
        ...

    @abstractmethod
    def find_by_person_and_event(self, person: Person, event: Event) -> Reservation | None:
        ...

    @abstractmethod
    def find_by_id(self, reservation_id: str) -> Reservation | None:
        ...
