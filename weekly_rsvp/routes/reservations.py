from fastapi import APIRouter, Depends, HTTPException

from weekly_rsvp.domain.errors import RsvpError
from weekly_rsvp.routes.deps import get_check_in_scanner, get_reservation_engine
from weekly_rsvp.schemas.reservations import ReservationOut, ReservationRequest
from weekly_rsvp.services.check_in import CheckInScanner
from weekly_rsvp.services.reservations import ReservationEngine

router = APIRouter(prefix="/reservations", tags=["reservations"])


@router.post("", response_model=ReservationOut)
def reserve(payload: ReservationRequest, engine: ReservationEngine = Depends(get_reservation_engine)):
    try:
        return engine.reserve(**payload.model_dump())
    except RsvpError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/{reservation_id}/scan", response_model=ReservationOut)
def scan(reservation_id: str, scanner: CheckInScanner = Depends(get_check_in_scanner)):
    try:
        return scanner.scan(reservation_id)
    except RsvpError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
