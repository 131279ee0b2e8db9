"""
Test the reservation engine.
"""
from datetime import datetime, timezone

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from weekly_rsvp.core.config import Settings
from weekly_rsvp.domain import models as domain
from weekly_rsvp.domain.errors import (
    CapacityExceededError,
    EligibilityViolationError,
    InvalidInputError,
    NoActiveEventError,
)
from weekly_rsvp.models.persons import Person
from weekly_rsvp.models.reservations import Reservation
from weekly_rsvp.services.events import EventLifecycleManager
from weekly_rsvp.stores.sqlalchemy_store import SqlAlchemyEventStore, SqlAlchemyReservationStore


def count(db_session: Session, model) -> int:
    return db_session.scalar(select(func.count(model.id)))


class TestReserve:
    def test_reserve_success(self, make_engine, event_manager: EventLifecycleManager, make_payload):
        event = event_manager.create_event()
        engine = make_engine()

        reservation = engine.reserve(**make_payload("0917"))

        assert reservation.id is not None
        assert reservation.event_id == event.id
        assert reservation.volunteer is False
        assert reservation.scanned_date_time is None
        assert reservation.reservation_date_time == domain.to_epoch_millis(datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc))

    def test_no_active_event(self, make_engine, db_session: Session, make_payload):
        with pytest.raises(NoActiveEventError):
            make_engine().reserve(**make_payload("0917"))

        assert count(db_session, Person) == 0

    def test_malformed_birthday_writes_nothing(
        self, make_engine, event_manager: EventLifecycleManager, db_session: Session, make_payload
    ):
        event_manager.create_event()
        engine = make_engine()
        engine.reserve(**make_payload("0917", first_name="Original"))

        with pytest.raises(InvalidInputError):
            engine.reserve(**make_payload("0917", first_name="Changed", birthday="15-03-2000"))
        with pytest.raises(InvalidInputError):
            engine.reserve(**make_payload("0918", birthday="15-03-2000"))

        assert count(db_session, Person) == 1
        assert count(db_session, Reservation) == 1
        assert db_session.scalar(select(Person.first_name)) == "Original"

    def test_re_reservation_updates_volunteer_flag(
        self, make_engine, event_manager: EventLifecycleManager, db_session: Session, make_payload
    ):
        event_manager.create_event()
        engine = make_engine()

        first = engine.reserve(**make_payload("0917", volunteer=False))
        second = engine.reserve(**make_payload("0917", volunteer=True, city="Makati"))

        assert second.id == first.id
        assert second.volunteer is True
        assert second.reservation_date_time == first.reservation_date_time
        assert count(db_session, Reservation) == 1
        assert db_session.scalar(select(Person.city)) == "Makati"

    def test_re_reservation_bypasses_capacity(self, make_engine, event_manager: EventLifecycleManager, make_payload):
        event_manager.create_event()
        engine = make_engine(MAX_ATTENDEE_ATTENDANCE=1, MAX_VOLUNTEER_ATTENDANCE=5)
        engine.reserve(**make_payload("0917"))

        again = engine.reserve(**make_payload("0917"))

        assert again.volunteer is False

    def test_re_reservation_does_not_take_the_lock(
        self, make_engine, event_manager: EventLifecycleManager, redis_client, make_payload
    ):
        event = event_manager.create_event()
        engine = make_engine()
        engine.reserve(**make_payload("0917"))

        held = redis_client.lock(f"reservation_lock:{event.id}:attendee", timeout=10)
        assert held.acquire(blocking=False)
        try:
            assert engine.reserve(**make_payload("0917")).event_id == event.id
        finally:
            held.release()

    def test_reservations_are_per_event(self, make_engine, db_session: Session, make_payload):
        moments = iter([
            datetime(2026, 6, 7, 2, 0, tzinfo=timezone.utc),
            datetime(2026, 6, 14, 2, 0, tzinfo=timezone.utc),
        ])
        manager = EventLifecycleManager(SqlAlchemyEventStore(db_session), Settings(), lambda: next(moments))
        manager.create_event()
        engine = make_engine()
        first = engine.reserve(**make_payload("0917"))

        manager.create_event()
        second = engine.reserve(**make_payload("0917"))

        assert second.id != first.id
        assert second.event_id != first.event_id
        assert count(db_session, Person) == 1

    def test_lost_insert_race_falls_back_to_update(
        self, make_engine, event_manager: EventLifecycleManager, db_session: Session, make_payload
    ):
        """A duplicate insert for the same person flips the existing row instead of failing."""
        event_manager.create_event()
        engine = make_engine()
        first = engine.reserve(**make_payload("0917", volunteer=False))

        class StaleStore(SqlAlchemyReservationStore):
            hidden = True

            def find_by_person_and_event(self, person, event):
                if self.hidden:
                    self.hidden = False
                    return None
                return super().find_by_person_and_event(person, event)

            def find_by_event(self, event):
                return []

        engine._reservations = StaleStore(db_session)
        second = engine.reserve(**make_payload("0917", volunteer=True))

        assert second.id == first.id
        assert second.volunteer is True
        assert count(db_session, Reservation) == 1


class TestEligibility:
    @pytest.mark.parametrize(
        "birthday",
        [
            "2011-06-15",  # exactly 15
            "1961-06-15",  # exactly 65
            "1960-06-16",  # 65, one day short of 66
        ],
    )
    def test_age_within_bounds(self, make_engine, event_manager: EventLifecycleManager, make_payload, birthday):
        event_manager.create_event()
        engine = make_engine(CHECK_AGE=True)

        assert engine.reserve(**make_payload("0917", birthday=birthday)) is not None

    @pytest.mark.parametrize(
        "birthday",
        [
            "2011-06-16",  # 14
            "1960-06-15",  # 66
        ],
    )
    def test_age_out_of_bounds(
        self, make_engine, event_manager: EventLifecycleManager, db_session: Session, make_payload, birthday
    ):
        event_manager.create_event()
        engine = make_engine(CHECK_AGE=True)

        with pytest.raises(EligibilityViolationError, match="only people ages 15 to 65"):
            engine.reserve(**make_payload("0917", birthday=birthday))

        # The person is still recorded, but holds no reservation.
        assert count(db_session, Person) == 1
        assert count(db_session, Reservation) == 0

    def test_age_not_checked_by_default(self, make_engine, event_manager: EventLifecycleManager, make_payload):
        event_manager.create_event()

        assert make_engine().reserve(**make_payload("0917", birthday="2020-01-01")) is not None

    def test_unvaccinated_rejected(self, make_engine, event_manager: EventLifecycleManager, make_payload):
        event_manager.create_event()
        engine = make_engine(CHECK_VACCINATED=True)

        with pytest.raises(EligibilityViolationError, match="only vaccinated"):
            engine.reserve(**make_payload("0917", vaccinated=False))

        assert engine.reserve(**make_payload("0918", vaccinated=True)) is not None

    def test_eligibility_applies_to_re_reservation(
        self, make_engine, event_manager: EventLifecycleManager, make_payload
    ):
        event_manager.create_event()
        make_engine().reserve(**make_payload("0917", vaccinated=False))

        with pytest.raises(EligibilityViolationError):
            make_engine(CHECK_VACCINATED=True).reserve(**make_payload("0917", vaccinated=False))


class TestCapacity:
    def test_attendee_ceiling_and_auto_close(
        self, make_engine, event_manager: EventLifecycleManager, make_payload
    ):
        event_manager.create_event()
        engine = make_engine(MAX_ATTENDEE_ATTENDANCE=1, MAX_VOLUNTEER_ATTENDANCE=1)

        assert engine.reserve(**make_payload("A", volunteer=False)) is not None
        assert event_manager.current_event().status == domain.EventStatus.OPEN

        with pytest.raises(CapacityExceededError, match="Event attendance limit reached") as exc:
            engine.reserve(**make_payload("B", volunteer=False))
        assert exc.value.volunteer is False
        assert event_manager.current_event().status == domain.EventStatus.OPEN

        assert engine.reserve(**make_payload("C", volunteer=True)) is not None
        assert event_manager.current_event().status == domain.EventStatus.CLOSED

    def test_volunteer_ceiling(self, make_engine, event_manager: EventLifecycleManager, make_payload):
        event_manager.create_event()
        engine = make_engine(MAX_ATTENDEE_ATTENDANCE=5, MAX_VOLUNTEER_ATTENDANCE=2)

        engine.reserve(**make_payload("V1", volunteer=True))
        engine.reserve(**make_payload("V2", volunteer=True))

        with pytest.raises(CapacityExceededError, match="Volunteer attendance limit reached. Only 2"):
            engine.reserve(**make_payload("V3", volunteer=True))

        # Attendee partition is independent.
        assert engine.reserve(**make_payload("A1", volunteer=False)).volunteer is False

    def test_closed_event_still_accepts_reservations(
        self, make_engine, event_manager: EventLifecycleManager, make_payload
    ):
        event_manager.create_event()
        event_manager.close_event_registration()

        reservation = make_engine().reserve(**make_payload("0917"))

        assert reservation.event_id == event_manager.current_event().id
