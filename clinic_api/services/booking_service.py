"""Booking workflow: resolve the patient, create the appointment, claim the slot."""

import logging

from sqlalchemy.orm import Session

from clinic_api.core import config
from clinic_api.core.errors import InvalidInputError, SlotUnavailableError
from clinic_api.models.appointment import STATUS_PENDING, Appointment
from clinic_api.models.patient import Patient
from clinic_api.repositories.appointments import AppointmentRepository
from clinic_api.repositories.base import ConstraintViolationError
from clinic_api.repositories.patients import PatientRepository
from clinic_api.repositories.time_slots import TimeSlotRepository
from clinic_api.schemas import BookAppointmentRequest, BookAppointmentResponse
from clinic_api.services.transaction import transaction

logger = logging.getLogger(__name__)


class BookingService:
    def __init__(self, db: Session, enforce_slot_booking: bool | None = None):
        self.db = db
        self.patients = PatientRepository(db)
        self.appointments = AppointmentRepository(db)
        self.time_slots = TimeSlotRepository(db)
        if enforce_slot_booking is None:
            enforce_slot_booking = config.ENFORCE_SLOT_BOOKING
        self.enforce_slot_booking = enforce_slot_booking

    def book_appointment(self, data: BookAppointmentRequest) -> BookAppointmentResponse:
        """Book ``data.appointment_time`` for the patient identified by email.

        Runs as one transaction. With slot enforcement on, the matching time
        slot is claimed with a conditional update after the appointment row
        exists; if another booking got there first the whole booking is rolled
        back and ``SlotUnavailableError`` is raised. ``is_new_patient`` is
        informational and does not change the flow.
        """
        with transaction(self.db):
            patient = self._resolve_patient(data)
            appointment = self.appointments.create(
                patient_id=patient.id,
                appointment_time=data.appointment_time,
                reason=data.reason,
                phone_number=data.phone,
                status=STATUS_PENDING,
                notes=data.notes,
            )

            slot_id = None
            if self.enforce_slot_booking:
                slot_id = self._claim_slot(data, appointment.id)

            patient_id = patient.id
            appointment_id = appointment.id

        logger.info(
            'Booked appointment %s for patient %s at %s (slot %s)',
            appointment_id,
            patient_id,
            data.appointment_time.isoformat(),
            slot_id,
        )
        return BookAppointmentResponse(
            success=True,
            patient_id=patient_id,
            appointment_id=appointment_id,
            slot_id=slot_id,
        )

    def get_patient_appointments(self, email: str) -> list[Appointment]:
        patient = self.patients.get_by_email(email.strip().lower())
        if patient is None:
            return []
        return self.appointments.list_by_patient(patient.id)

    def _resolve_patient(self, data: BookAppointmentRequest) -> Patient:
        patient = self.patients.get_by_email(data.email)
        if patient is not None:
            return patient

        try:
            return self.patients.create(full_name=data.full_name, email=data.email, phone=data.phone)
        except ConstraintViolationError:
            # A concurrent booking inserted the same email first. Nothing else
            # has been written yet, so start over and reuse their row.
            self.db.rollback()
            patient = self.patients.get_by_email(data.email)
            if patient is None:
                raise
            return patient

    def _claim_slot(self, data: BookAppointmentRequest, appointment_id: str) -> str:
        if data.slot_id:
            slot = self.time_slots.get_by_id(data.slot_id)
            if slot is None:
                raise SlotUnavailableError()
            if slot.slot_date_time != data.appointment_time:
                raise InvalidInputError('The selected slot does not match the requested appointment time.')
            if data.dentist_id and slot.dentist_id != data.dentist_id:
                raise InvalidInputError('The selected slot belongs to a different dentist.')
        else:
            slot = self.time_slots.find_free_at(data.appointment_time, data.dentist_id)
            if slot is None:
                raise SlotUnavailableError()

        if not self.time_slots.claim(slot.id, appointment_id):
            logger.warning('Slot %s was claimed by another booking', slot.id)
            raise SlotUnavailableError()

        return slot.id
