from datetime import datetime

from clinic_api.models.time_slot import TimeSlot
from clinic_api.repositories.base import Repository, persistence_boundary


class TimeSlotRepository(Repository):
    @persistence_boundary
    def list_available(self, start: datetime, end: datetime) -> list[TimeSlot]:
        """Unbooked slots with ``start <= slot_date_time <= end``, earliest first."""
        return (
            self.db.query(TimeSlot)
            .filter(
                TimeSlot.slot_date_time >= start,
                TimeSlot.slot_date_time <= end,
                TimeSlot.is_booked.is_(False),
            )
            .order_by(TimeSlot.slot_date_time.asc())
            .all()
        )

    @persistence_boundary
    def get_by_id(self, slot_id: str) -> TimeSlot | None:
        return self.db.query(TimeSlot).filter(TimeSlot.id == slot_id).first()

    @persistence_boundary
    def find_free_at(self, slot_time: datetime, dentist_id: str | None = None) -> TimeSlot | None:
        query = self.db.query(TimeSlot).filter(
            TimeSlot.slot_date_time == slot_time,
            TimeSlot.is_booked.is_(False),
        )
        if dentist_id:
            query = query.filter(TimeSlot.dentist_id == dentist_id)
        return query.order_by(TimeSlot.dentist_id.asc()).first()

    @persistence_boundary
    def claim(self, slot_id: str, appointment_id: str) -> bool:
        """Mark a slot booked only if it is still free.

        The ``is_booked`` predicate is evaluated by the store inside the
        UPDATE, so of two concurrent claims exactly one changes a row.
        """
        updated = (
            self.db.query(TimeSlot)
            .filter(TimeSlot.id == slot_id, TimeSlot.is_booked.is_(False))
            .update(
                {TimeSlot.is_booked: True, TimeSlot.appointment_id: appointment_id},
                synchronize_session=False,
            )
        )
        return updated == 1

    @persistence_boundary
    def release_for_appointment(self, appointment_id: str) -> int:
        return (
            self.db.query(TimeSlot)
            .filter(TimeSlot.appointment_id == appointment_id)
            .update(
                {TimeSlot.is_booked: False, TimeSlot.appointment_id: None},
                synchronize_session=False,
            )
        )

    @persistence_boundary
    def create(self, slot_date_time: datetime, dentist_id: str) -> TimeSlot:
        slot = TimeSlot(slot_date_time=slot_date_time, dentist_id=dentist_id, is_booked=False)
        self.db.add(slot)
        self.db.flush()
        return slot
