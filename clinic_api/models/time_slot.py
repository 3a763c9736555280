"""Time slot model definitions."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, UniqueConstraint

from clinic_api.database import Base


class TimeSlot(Base):
    """A bookable (date-time, dentist) pair."""
    __tablename__ = "time_slots"
    __table_args__ = (
        UniqueConstraint("slot_date_time", "dentist_id", name="slot_date_time_dentist_idx"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    slot_date_time = Column(DateTime, nullable=False)
    dentist_id = Column(String(36), ForeignKey("dentists.id"), nullable=False)
    is_booked = Column(Boolean, default=False, nullable=False)
    appointment_id = Column(String(36), ForeignKey("appointments.id"))
