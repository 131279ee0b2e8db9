from sqlalchemy import BigInteger, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from weekly_rsvp.database.db import Base
from weekly_rsvp.domain.models import EventStatus


class Event(Base):
    __tablename__ = "events"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    event_date_time: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=EventStatus.OPEN.value)

    reservations: Mapped[list["Reservation"]] = relationship(back_populates="event")
