from fastapi import APIRouter, Depends, HTTPException

from weekly_rsvp.core.config import Settings, get_settings
from weekly_rsvp.domain.errors import NoActiveEventError
from weekly_rsvp.routes.deps import get_event_manager, get_reservation_store
from weekly_rsvp.schemas.events import EventOut, EventStatsOut
from weekly_rsvp.services.events import EventLifecycleManager
from weekly_rsvp.services.stats import get_event_stats
from weekly_rsvp.stores.interfaces import ReservationStore

router = APIRouter(prefix="/event", tags=["events"])


@router.post("", response_model=EventOut)
def create_event(events: EventLifecycleManager = Depends(get_event_manager)):
    """Create next week's event now, outside the weekly schedule."""
    return events.create_event()


@router.get("/current", response_model=EventOut)
def current_event(events: EventLifecycleManager = Depends(get_event_manager)):
    try:
        return events.current_event()
    except NoActiveEventError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/current/close", response_model=EventOut)
def close_current_event(events: EventLifecycleManager = Depends(get_event_manager)):
    try:
        return events.close_event_registration()
    except NoActiveEventError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/current/stats", response_model=EventStatsOut)
def current_event_stats(
    events: EventLifecycleManager = Depends(get_event_manager),
    reservations: ReservationStore = Depends(get_reservation_store),
    settings: Settings = Depends(get_settings),
):
    try:
        event = events.current_event()
    except NoActiveEventError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return get_event_stats(reservations, event, settings)
