"""Patient model definitions."""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String

from clinic_api.database import Base


class Patient(Base):
    """A patient, keyed for lookup by email."""
    __tablename__ = "patients"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    full_name = Column(String, nullable=False)
    email = Column(String(320), unique=True, nullable=False)
    phone = Column(String(20), nullable=False)
    created_at = Column(DateTime, default=datetime.now, nullable=False)
