import logging
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from clinic_api.core import config
from clinic_api.core.errors import AppointmentNotFoundError, InvalidStatusTransitionError, SlotUnavailableError
from clinic_api.models.appointment import (
    APPOINTMENT_STATUSES,
    STATUS_CANCELLED,
    STATUS_CONFIRMED,
    STATUS_FINISHED,
    STATUS_PENDING,
    Appointment,
)
from clinic_api.models.dentist import Dentist
from clinic_api.repositories.appointments import AppointmentRepository
from clinic_api.repositories.dentists import DentistRepository
from clinic_api.repositories.time_slots import TimeSlotRepository
from clinic_api.schemas import DashboardSummaryResponse
from clinic_api.services.transaction import transaction

logger = logging.getLogger(__name__)

ALLOWED_STATUS_TRANSITIONS = {
    STATUS_PENDING: {STATUS_CONFIRMED, STATUS_CANCELLED},
    STATUS_CONFIRMED: {STATUS_FINISHED, STATUS_CANCELLED},
    STATUS_CANCELLED: set(),
    STATUS_FINISHED: set(),
}


def day_bounds(now: datetime) -> tuple[datetime, datetime]:
    start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


class AdminService:
    """Staff-facing reads and writes. Callers are expected to be admins already."""

    def __init__(
        self,
        db: Session,
        strict_transitions: bool | None = None,
        enforce_slot_booking: bool | None = None,
    ):
        self.db = db
        self.appointments = AppointmentRepository(db)
        self.dentists = DentistRepository(db)
        self.time_slots = TimeSlotRepository(db)
        if strict_transitions is None:
            strict_transitions = config.STRICT_STATUS_TRANSITIONS
        self.strict_transitions = strict_transitions
        if enforce_slot_booking is None:
            enforce_slot_booking = config.ENFORCE_SLOT_BOOKING
        self.enforce_slot_booking = enforce_slot_booking

    def get_today_appointments(self, now: datetime | None = None) -> list[Appointment]:
        start, end = day_bounds(now or datetime.now())
        return self.appointments.list_between(start, end)

    def get_pending_appointments(self) -> list[Appointment]:
        return self.appointments.list_by_status(STATUS_PENDING)

    def get_appointment_details(self, appointment_id: str) -> Appointment | None:
        return self.appointments.get_by_id(appointment_id)

    def update_appointment_status(self, appointment_id: str, status: str) -> Appointment:
        with transaction(self.db):
            appointment = self.appointments.get_by_id(appointment_id)
            if appointment is None:
                raise AppointmentNotFoundError()

            previous = appointment.status
            if self.strict_transitions and status != previous:
                if status not in ALLOWED_STATUS_TRANSITIONS.get(previous, set()):
                    raise InvalidStatusTransitionError(
                        f'Cannot move an appointment from {previous} to {status}.'
                    )

            if previous == STATUS_CANCELLED and status != STATUS_CANCELLED and self.enforce_slot_booking:
                self._reclaim_slot(appointment)

            self.appointments.set_status(appointment_id, status)
            if status == STATUS_CANCELLED:
                self.time_slots.release_for_appointment(appointment_id)

        self.appointments.refresh(appointment)
        logger.info('Appointment %s status %s -> %s', appointment_id, previous, status)
        return appointment

    def _reclaim_slot(self, appointment: Appointment) -> None:
        """Take a free slot at the appointment time again before reinstating it.

        Cancelling released the slot, so it may since have been booked by
        somebody else; in that case the reinstatement is refused.
        """
        slot = self.time_slots.find_free_at(appointment.appointment_time)
        if slot is None or not self.time_slots.claim(slot.id, appointment.id):
            logger.warning('Cannot reinstate appointment %s: its slot is taken', appointment.id)
            raise SlotUnavailableError()

    def get_dashboard_summary(self, now: datetime | None = None) -> DashboardSummaryResponse:
        start, end = day_bounds(now or datetime.now())
        counts = self.appointments.count_by_status_between(start, end)
        today_by_status = {status: counts.get(status, 0) for status in APPOINTMENT_STATUSES}
        today_total = sum(today_by_status.values())

        cancellation_rate = 0.0
        if today_total:
            cancellation_rate = round(today_by_status[STATUS_CANCELLED] / today_total * 100, 1)

        return DashboardSummaryResponse(
            today_total=today_total,
            today_by_status=today_by_status,
            pending_total=self.appointments.count_by_status(STATUS_PENDING),
            active_dentists=len(self.dentists.list_active()),
            cancellation_rate=cancellation_rate,
        )

    def list_dentists(self) -> list[Dentist]:
        return self.dentists.list_active()

    def get_dentist(self, dentist_id: str) -> Dentist | None:
        return self.dentists.get_by_id(dentist_id)

    def create_dentist(self, full_name: str, specialization: str | None = None) -> Dentist:
        with transaction(self.db):
            dentist = self.dentists.create(full_name=full_name, specialization=specialization)
        logger.info('Created dentist %s', dentist.id)
        return dentist
