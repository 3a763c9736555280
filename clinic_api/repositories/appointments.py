from datetime import datetime

from sqlalchemy import func

from clinic_api.models.appointment import STATUS_PENDING, Appointment
from clinic_api.repositories.base import Repository, persistence_boundary


class AppointmentRepository(Repository):
    @persistence_boundary
    def create(
        self,
        patient_id: str,
        appointment_time: datetime,
        reason: str,
        phone_number: str,
        status: str = STATUS_PENDING,
        notes: str | None = None,
    ) -> Appointment:
        appointment = Appointment(
            patient_id=patient_id,
            appointment_time=appointment_time,
            reason=reason,
            phone_number=phone_number,
            status=status,
            notes=notes,
        )
        self.db.add(appointment)
        self.db.flush()
        return appointment

    @persistence_boundary
    def get_by_id(self, appointment_id: str) -> Appointment | None:
        return self.db.query(Appointment).filter(Appointment.id == appointment_id).first()

    @persistence_boundary
    def list_by_patient(self, patient_id: str) -> list[Appointment]:
        return (
            self.db.query(Appointment)
            .filter(Appointment.patient_id == patient_id)
            .order_by(Appointment.appointment_time.asc())
            .all()
        )

    @persistence_boundary
    def list_between(self, start: datetime, end: datetime) -> list[Appointment]:
        """Appointments with ``start <= appointment_time < end``."""
        return (
            self.db.query(Appointment)
            .filter(
                Appointment.appointment_time >= start,
                Appointment.appointment_time < end,
            )
            .order_by(Appointment.appointment_time.asc())
            .all()
        )

    @persistence_boundary
    def list_by_status(self, status: str) -> list[Appointment]:
        return (
            self.db.query(Appointment)
            .filter(Appointment.status == status)
            .order_by(Appointment.created_at.desc())
            .all()
        )

    @persistence_boundary
    def count_by_status_between(self, start: datetime, end: datetime) -> dict[str, int]:
        rows = (
            self.db.query(Appointment.status, func.count(Appointment.id))
            .filter(
                Appointment.appointment_time >= start,
                Appointment.appointment_time < end,
            )
            .group_by(Appointment.status)
            .all()
        )
        return {status: count for status, count in rows}

    @persistence_boundary
    def count_by_status(self, status: str) -> int:
        return self.db.query(func.count(Appointment.id)).filter(Appointment.status == status).scalar() or 0

    @persistence_boundary
    def set_status(self, appointment_id: str, status: str) -> int:
        return (
            self.db.query(Appointment)
            .filter(Appointment.id == appointment_id)
            .update({Appointment.status: status}, synchronize_session='fetch')
        )
