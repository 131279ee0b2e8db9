from weekly_rsvp.core.config import Settings, settings as default_settings
from weekly_rsvp.domain import models as domain
from weekly_rsvp.stores.interfaces import ReservationStore


def get_event_stats(
    reservations: ReservationStore, event: domain.Event, settings: Settings | None = None
) -> dict:
    settings = settings or default_settings
    reservation_list = reservations.find_by_event(event)
    volunteer_count = sum(1 for r in reservation_list if r.volunteer)

    return {
        "event_id": event.id,
        "status": event.status.value,
        "attendee_count": len(reservation_list) - volunteer_count,
        "volunteer_count": volunteer_count,
        "checked_in_count": sum(1 for r in reservation_list if r.scanned_date_time is not None),
        "max_attendee_attendance": settings.MAX_ATTENDEE_ATTENDANCE,
        "max_volunteer_attendance": settings.MAX_VOLUNTEER_ATTENDANCE,
    }
