"""Clinic settings model definitions."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String

from clinic_api.database import Base


class ClinicSettings(Base):
    """Singleton row holding opening hours and slot length."""
    __tablename__ = "clinic_settings"

    id = Column(Integer, primary_key=True)
    clinic_name = Column(String, nullable=False)
    working_days = Column(String, nullable=False)  # 0=Sunday ... 6=Saturday
    working_hours_start = Column(String(5), nullable=False)  # HH:MM
    working_hours_end = Column(String(5), nullable=False)  # HH:MM
    slot_duration_minutes = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)
