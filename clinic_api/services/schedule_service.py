import logging
from datetime import datetime

from sqlalchemy.orm import Session

from clinic_api.core import config
from clinic_api.core.errors import DentistNotFoundError, DuplicateSlotError, InvalidInputError
from clinic_api.models.clinic_settings import ClinicSettings
from clinic_api.models.dentist import Dentist
from clinic_api.models.time_slot import TimeSlot
from clinic_api.repositories.base import ConstraintViolationError
from clinic_api.repositories.clinic_settings import ClinicSettingsRepository
from clinic_api.repositories.dentists import DentistRepository
from clinic_api.repositories.time_slots import TimeSlotRepository
from clinic_api.schemas import to_server_local
from clinic_api.services.transaction import transaction

logger = logging.getLogger(__name__)


class ScheduleService:
    """Public availability reads and slot seeding."""

    def __init__(self, db: Session):
        self.db = db
        self.time_slots = TimeSlotRepository(db)
        self.dentists = DentistRepository(db)
        self.clinic_settings = ClinicSettingsRepository(db)

    def get_available_slots(self, start_date: datetime, end_date: datetime) -> list[TimeSlot]:
        start_date = to_server_local(start_date)
        end_date = to_server_local(end_date)
        if end_date < start_date:
            raise InvalidInputError('end_date must not be before start_date.')
        return self.time_slots.list_available(start_date, end_date)

    def get_dentists(self) -> list[Dentist]:
        return self.dentists.list_active()

    def get_clinic_info(self) -> ClinicSettings | None:
        return self.clinic_settings.get()

    def create_time_slot(self, slot_date_time: datetime, dentist_id: str) -> TimeSlot:
        with transaction(self.db):
            if self.dentists.get_by_id(dentist_id) is None:
                raise DentistNotFoundError()
            try:
                slot = self.time_slots.create(slot_date_time=slot_date_time, dentist_id=dentist_id)
            except ConstraintViolationError as exc:
                raise DuplicateSlotError() from exc

        logger.info('Created slot %s for dentist %s at %s', slot.id, dentist_id, slot_date_time.isoformat())
        return slot

    def ensure_default_clinic_settings(self) -> ClinicSettings:
        with transaction(self.db):
            settings = self.clinic_settings.get()
            if settings is None:
                settings = self.clinic_settings.create(**config.DEFAULT_CLINIC_SETTINGS)
                logger.info('Seeded default clinic settings for %s', settings.clinic_name)
        return settings
