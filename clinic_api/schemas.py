from datetime import datetime

from pydantic import BaseModel, EmailStr, field_validator

from clinic_api.core import config
from clinic_api.models.appointment import APPOINTMENT_STATUSES


def to_server_local(value: datetime) -> datetime:
    """Convert aware values to naive server-local time; naive values pass through."""
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def normalize_datetime(value: datetime) -> datetime:
    """Server-local time with seconds dropped."""
    return to_server_local(value).replace(second=0, microsecond=0)


def _require_text(value: str, message: str) -> str:
    normalized = value.strip()
    if not normalized:
        raise ValueError(message)
    return normalized


class BookAppointmentRequest(BaseModel):
    full_name: str
    email: EmailStr
    phone: str
    reason: str
    appointment_time: datetime
    is_new_patient: bool = False
    slot_id: str | None = None
    dentist_id: str | None = None
    notes: str | None = None

    @field_validator('full_name')
    @classmethod
    def validate_full_name(cls, value: str) -> str:
        return _require_text(value, 'Full name is required.')

    @field_validator('email')
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, value: str) -> str:
        normalized = value.strip()
        if len(normalized) < config.MIN_PHONE_LENGTH:
            raise ValueError(f'Phone number must be at least {config.MIN_PHONE_LENGTH} characters.')
        return normalized

    @field_validator('reason')
    @classmethod
    def validate_reason(cls, value: str) -> str:
        return _require_text(value, 'Reason for visit is required.')

    @field_validator('appointment_time')
    @classmethod
    def validate_appointment_time(cls, value: datetime) -> datetime:
        return normalize_datetime(value)

    @field_validator('notes')
    @classmethod
    def validate_notes(cls, value: str | None) -> str | None:
        if value is None:
            return None

        normalized = value.strip()
        if not normalized:
            return None

        if len(normalized) > config.MAX_APPOINTMENT_NOTES_LENGTH:
            raise ValueError(f'Notes must be {config.MAX_APPOINTMENT_NOTES_LENGTH} characters or fewer.')

        return normalized


class BookAppointmentResponse(BaseModel):
    success: bool
    patient_id: str
    appointment_id: str
    slot_id: str | None = None


class UpdateStatusRequest(BaseModel):
    status: str

    @field_validator('status')
    @classmethod
    def validate_status(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in APPOINTMENT_STATUSES:
            raise ValueError(f'Status must be one of: {", ".join(APPOINTMENT_STATUSES)}.')
        return normalized


class CreateDentistRequest(BaseModel):
    full_name: str
    specialization: str | None = None

    @field_validator('full_name')
    @classmethod
    def validate_full_name(cls, value: str) -> str:
        return _require_text(value, 'Full name is required.')

    @field_validator('specialization')
    @classmethod
    def validate_specialization(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class CreateTimeSlotRequest(BaseModel):
    slot_date_time: datetime
    dentist_id: str

    @field_validator('slot_date_time')
    @classmethod
    def validate_slot_date_time(cls, value: datetime) -> datetime:
        return normalize_datetime(value)


class SuccessResponse(BaseModel):
    success: bool


class DentistResponse(BaseModel):
    id: str
    full_name: str
    specialization: str | None = None
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class AppointmentResponse(BaseModel):
    id: str
    patient_id: str
    appointment_time: datetime
    status: str
    reason: str | None = None
    phone_number: str | None = None
    notes: str | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class TimeSlotResponse(BaseModel):
    id: str
    slot_date_time: datetime
    dentist_id: str
    is_booked: bool
    appointment_id: str | None = None

    class Config:
        from_attributes = True


class ClinicSettingsResponse(BaseModel):
    clinic_name: str
    working_days: list[int]
    working_hours_start: str
    working_hours_end: str
    slot_duration_minutes: int

    class Config:
        from_attributes = True

    @field_validator('working_days', mode='before')
    @classmethod
    def split_working_days(cls, value):
        if isinstance(value, str):
            return [int(day) for day in value.split(',') if day.strip()]
        return value


class DashboardSummaryResponse(BaseModel):
    today_total: int
    today_by_status: dict[str, int]
    pending_total: int
    active_dentists: int
    cancellation_rate: float


class CurrentUserResponse(BaseModel):
    open_id: str
    name: str | None = None
    email: str | None = None
    role: str

    class Config:
        from_attributes = True
