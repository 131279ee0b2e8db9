from fastapi import Depends
from sqlalchemy.orm import Session

from weekly_rsvp.core.config import Settings, get_settings
from weekly_rsvp.database.db import get_db
from weekly_rsvp.services.check_in import CheckInScanner
from weekly_rsvp.services.events import EventLifecycleManager
from weekly_rsvp.services.persons import PersonDirectory
from weekly_rsvp.services.reservations import ReservationEngine
from weekly_rsvp.stores.sqlalchemy_store import (
    SqlAlchemyEventStore,
    SqlAlchemyPersonStore,
    SqlAlchemyReservationStore,
)


def get_event_manager(
    db: Session = Depends(get_db), settings: Settings = Depends(get_settings)
) -> EventLifecycleManager:
    return EventLifecycleManager(SqlAlchemyEventStore(db), settings)


def get_reservation_store(db: Session = Depends(get_db)) -> SqlAlchemyReservationStore:
    return SqlAlchemyReservationStore(db)


def get_reservation_engine(
    db: Session = Depends(get_db),
    events: EventLifecycleManager = Depends(get_event_manager),
    settings: Settings = Depends(get_settings),
) -> ReservationEngine:
    return ReservationEngine(
        events,
        PersonDirectory(SqlAlchemyPersonStore(db)),
        SqlAlchemyReservationStore(db),
        settings,
    )


def get_check_in_scanner(
    reservations: SqlAlchemyReservationStore = Depends(get_reservation_store),
) -> CheckInScanner:
    return CheckInScanner(reservations)
