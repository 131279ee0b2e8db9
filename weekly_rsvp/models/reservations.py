from sqlalchemy import BigInteger, Boolean, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from weekly_rsvp.database.db import Base


class Reservation(Base):
    __tablename__ = "reservations"
    __table_args__ = (UniqueConstraint("person_id", "event_id", name="uq_reservation_person_event"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    person_id: Mapped[str] = mapped_column(ForeignKey("persons.id"), nullable=False)
    event_id: Mapped[str] = mapped_column(ForeignKey("events.id"), nullable=False, index=True)
    volunteer: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    reservation_date_time: Mapped[int] = mapped_column(BigInteger, nullable=False)
    scanned_date_time: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    event: Mapped["Event"] = relationship(back_populates="reservations")
    person: Mapped["Person"] = relationship(back_populates="reservations")
