"""User model definitions."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, Integer, String

from clinic_api.database import Base

USER_ROLES = ("user", "admin")


class User(Base):
    """Represents an authenticated identity and its role."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    open_id = Column(String(64), unique=True, index=True, nullable=False)
    name = Column(String)
    email = Column(String(320))
    login_method = Column(String(64))
    role = Column(Enum(*USER_ROLES, name="user_role"), default="user", nullable=False)
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)
    last_signed_in = Column(DateTime, default=datetime.now, nullable=False)
