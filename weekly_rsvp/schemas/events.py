
from pydantic import BaseModel

from weekly_rsvp.domain.models import EventStatus


# ---------- Event ----------
class EventOut(BaseModel):
    id: str
    name: str
    event_date_time: int
    status: EventStatus

    class Config:
        from_attributes = True


class EventStatsOut(BaseModel):
    event_id: str
    status: str
    attendee_count: int
    volunteer_count: int
    checked_in_count: int
    max_attendee_attendance: int
    max_volunteer_attendance: int
