"""SQLAlchemy implementations of the store interfaces."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from weekly_rsvp.domain import models as domain
from weekly_rsvp.models.events import Event
from weekly_rsvp.models.persons import Person
from weekly_rsvp.models.reservations import Reservation
from weekly_rsvp.stores.interfaces import DuplicateRecordError, EventStore, PersonStore, ReservationStore


def _commit(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateRecordError(str(e.orig)) from e


def _event_to_domain(row: Event) -> domain.Event:
    return domain.Event(
        id=row.id,
        name=row.name,
        event_date_time=row.event_date_time,
        status=domain.EventStatus(row.status),
    )


def _person_to_domain(row: Person) -> domain.Person:
    return domain.Person(
        id=row.id,
        mobile_no=row.mobile_no,
        email=row.email,
        first_name=row.first_name,
        last_name=row.last_name,
        birthday=row.birthday,
        full_address=row.full_address,
        city=row.city,
        vaccinated=row.vaccinated,
    )


def _reservation_to_domain(row: Reservation) -> domain.Reservation:
    return domain.Reservation(
        id=row.id,
        person_id=row.person_id,
        event_id=row.event_id,
        volunteer=row.volunteer,
        reservation_date_time=row.reservation_date_time,
        scanned_date_time=row.scanned_date_time,
    )


class SqlAlchemyEventStore(EventStore):
    def __init__(self, db: Session) -> None:
        self._db = db

    def save(self, event: domain.Event) -> domain.Event:
        row = self._db.get(Event, event.id)
        if row is None:
            row = Event(id=event.id)
            self._db.add(row)
        row.name = event.name
        row.event_date_time = event.event_date_time
        row.status = event.status.value
        _commit(self._db)
        self._db.refresh(row)
        return _event_to_domain(row)

    def find_latest_by_event_date_time(self) -> domain.Event | None:
        row = self._db.scalars(
            select(Event).order_by(Event.event_date_time.desc()).limit(1)
        ).first()
        return _event_to_domain(row) if row else None


class SqlAlchemyPersonStore(PersonStore):
    def __init__(self, db: Session) -> None:
        self._db = db

    def save(self, person: domain.Person) -> domain.Person:
        row = self._db.get(Person, person.id)
        if row is None:
            row = Person(id=person.id, mobile_no=person.mobile_no)
            self._db.add(row)
        row.email = person.email
        row.first_name = person.first_name
        row.last_name = person.last_name
        row.birthday = person.birthday
        row.full_address = person.full_address
        row.city = person.city
        row.vaccinated = person.vaccinated
        _commit(self._db)
        self._db.refresh(row)
        return _person_to_domain(row)

    def find_by_mobile_no(self, mobile_no: str) -> domain.Person | None:
        row = self._db.scalars(select(Person).where(Person.mobile_no == mobile_no)).first()
        return _person_to_domain(row) if row else None


class SqlAlchemyReservationStore(ReservationStore):
    def __init__(self, db: Session) -> None:
        self._db = db

    def save(self, reservation: domain.Reservation) -> domain.Reservation:
        row = self._db.get(Reservation, reservation.id)
        if row is None:
            row = Reservation(
                id=reservation.id,
                person_id=reservation.person_id,
                event_id=reservation.event_id,
            )
            self._db.add(row)
        row.volunteer = reservation.volunteer
        row.reservation_date_time = reservation.reservation_date_time
        row.scanned_date_time = reservation.scanned_date_time
        _commit(self._db)
        self._db.refresh(row)
        return _reservation_to_domain(row)

    def find_by_event(self, event: domain.Event) -> list[domain.Reservation]:
        rows = self._db.scalars(select(Reservation).where(Reservation.event_id == event.id))
        return [_reservation_to_domain(row) for row in rows]

    def find_by_person_and_event(
        self, person: domain.Person, event: domain.Event
    ) -> domain.Reservation | None:
        row = self._db.scalars(
            select(Reservation).where(
                Reservation.person_id == person.id,
                Reservation.event_id == event.id,
            )
        ).first()
        return _reservation_to_domain(row) if row else None

    def find_by_id(self, reservation_id: str) -> domain.Reservation | None:
        row = self._db.get(Reservation, reservation_id)
        return _reservation_to_domain(row) if row else None
