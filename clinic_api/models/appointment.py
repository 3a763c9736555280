"""Appointment model definitions."""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, ForeignKey, String, Text

from clinic_api.database import Base

STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"
STATUS_CANCELLED = "cancelled"
STATUS_FINISHED = "finished"

APPOINTMENT_STATUSES = (STATUS_PENDING, STATUS_CONFIRMED, STATUS_CANCELLED, STATUS_FINISHED)


class Appointment(Base):
    """Represents a booked appointment."""
    __tablename__ = "appointments"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    patient_id = Column(String(36), ForeignKey("patients.id"), nullable=False)
    appointment_time = Column(DateTime, nullable=False)
    status = Column(Enum(*APPOINTMENT_STATUSES, name="appointment_status"), default=STATUS_PENDING, nullable=False)
    reason = Column(Text)
    phone_number = Column(String(20))
    notes = Column(Text)
    created_at = Column(DateTime, default=datetime.now, nullable=False)
