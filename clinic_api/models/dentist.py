"""Dentist model definitions."""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, String

from clinic_api.database import Base


class Dentist(Base):
    """Represents a dentist practising at the clinic."""
    __tablename__ = "dentists"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    full_name = Column(String, nullable=False)
    specialization = Column(String)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.now, nullable=False)
