from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from clinic_api.core.errors import InvalidInputError, SlotUnavailableError
from clinic_api.models.appointment import Appointment
from clinic_api.models.patient import Patient
from clinic_api.models.time_slot import TimeSlot
from clinic_api.repositories.patients import PatientRepository
from clinic_api.schemas import BookAppointmentRequest
from clinic_api.services.booking_service import BookingService
from conftest import add_slot

JANE_TIME = datetime(2024, 6, 10, 14, 0)


def build_request(**overrides) -> BookAppointmentRequest:
    fields = {
        'full_name': 'Jane Doe',
        'email': 'jane@example.com',
        'phone': '5551234567',
        'reason': 'Cleaning',
        'appointment_time': JANE_TIME,
        'is_new_patient': True,
    }
    fields.update(overrides)
    return BookAppointmentRequest(**fields)


def test_booking_with_new_email_creates_patient_and_pending_appointment(db_session) -> None:
    result = BookingService(db_session, enforce_slot_booking=False).book_appointment(build_request())

    patients = db_session.query(Patient).all()
    appointments = db_session.query(Appointment).all()

    assert result.success is True
    assert len(patients) == 1
    assert patients[0].email == 'jane@example.com'
    assert result.patient_id == patients[0].id
    assert len(appointments) == 1
    assert appointments[0].id == result.appointment_id
    assert appointments[0].patient_id == patients[0].id
    assert appointments[0].status == 'pending'
    assert appointments[0].appointment_time == JANE_TIME
    assert appointments[0].phone_number == '5551234567'
    assert result.slot_id is None


def test_second_booking_with_same_email_reuses_patient(db_session) -> None:
    service = BookingService(db_session, enforce_slot_booking=False)

    first = service.book_appointment(build_request())
    second = service.book_appointment(
        build_request(appointment_time=JANE_TIME + timedelta(days=1), is_new_patient=False, full_name='Jane D.')
    )

    assert second.patient_id == first.patient_id
    assert second.appointment_id != first.appointment_id
    assert db_session.query(Patient).count() == 1
    assert db_session.query(Appointment).count() == 2


def test_booking_reuses_patient_inserted_by_a_concurrent_booking(db_session, monkeypatch: pytest.MonkeyPatch) -> None:
    existing = PatientRepository(db_session).create(full_name='Jane Doe', email='jane@example.com', phone='5551234567')
    db_session.commit()
    existing_id = existing.id
    service = BookingService(db_session, enforce_slot_booking=False)
    lookup = service.patients.get_by_email
    calls = []

    def get_by_email_missing_first_time(email: str):
        calls.append(email)
        if len(calls) == 1:
            return None
        return lookup(email)

    monkeypatch.setattr(service.patients, 'get_by_email', get_by_email_missing_first_time)

    result = service.book_appointment(build_request())

    assert calls == ['jane@example.com', 'jane@example.com']
    assert result.patient_id == existing_id
    assert db_session.query(Patient).count() == 1
    assert db_session.get(Appointment, result.appointment_id).patient_id == existing_id


def test_booking_claims_matching_slot(db_session, dentist) -> None:
    slot = add_slot(db_session, dentist.id, JANE_TIME)

    result = BookingService(db_session, enforce_slot_booking=True).book_appointment(build_request())

    db_session.refresh(slot)
    assert result.slot_id == slot.id
    assert slot.is_booked is True
    assert slot.appointment_id == result.appointment_id


def test_booking_an_already_claimed_slot_fails_and_rolls_back(db_session, dentist) -> None:
    add_slot(db_session, dentist.id, JANE_TIME)
    service = BookingService(db_session, enforce_slot_booking=True)
    service.book_appointment(build_request())

    with pytest.raises(SlotUnavailableError):
        service.book_appointment(build_request(email='john@example.com', full_name='John Roe'))

    assert db_session.query(Appointment).count() == 1
    assert db_session.query(Patient).filter(Patient.email == 'john@example.com').first() is None


def test_booking_without_any_slot_at_that_time_fails(db_session, dentist) -> None:
    add_slot(db_session, dentist.id, JANE_TIME + timedelta(hours=1))

    with pytest.raises(SlotUnavailableError):
        BookingService(db_session, enforce_slot_booking=True).book_appointment(build_request())

    assert db_session.query(Appointment).count() == 0


def test_booking_by_slot_id_rejects_time_mismatch(db_session, dentist) -> None:
    slot = add_slot(db_session, dentist.id, JANE_TIME + timedelta(hours=2))

    with pytest.raises(InvalidInputError):
        BookingService(db_session, enforce_slot_booking=True).book_appointment(build_request(slot_id=slot.id))

    db_session.refresh(slot)
    assert slot.is_booked is False


def test_booking_by_unknown_slot_id_is_unavailable(db_session) -> None:
    with pytest.raises(SlotUnavailableError):
        BookingService(db_session, enforce_slot_booking=True).book_appointment(build_request(slot_id='missing'))


def test_booking_for_a_dentist_claims_that_dentists_slot(db_session, dentist) -> None:
    add_slot(db_session, 'aaa-first-dentist', JANE_TIME)
    wanted = add_slot(db_session, dentist.id, JANE_TIME)

    result = BookingService(db_session, enforce_slot_booking=True).book_appointment(
        build_request(dentist_id=dentist.id)
    )

    assert result.slot_id == wanted.id
    assert db_session.query(TimeSlot).filter(TimeSlot.is_booked.is_(True)).count() == 1


def test_get_patient_appointments_for_unknown_email_is_empty(db_session) -> None:
    assert BookingService(db_session).get_patient_appointments('ghost@example.com') == []


def test_get_patient_appointments_matches_email_case_insensitively(db_session) -> None:
    service = BookingService(db_session, enforce_slot_booking=False)
    booked = service.book_appointment(build_request())

    appointments = service.get_patient_appointments('  JANE@example.com ')

    assert [appointment.id for appointment in appointments] == [booked.appointment_id]


def test_request_normalizes_fields() -> None:
    request = build_request(
        full_name='  Jane Doe ',
        email='Jane@Example.COM',
        appointment_time=datetime(2024, 6, 10, 14, 0, 42),
        notes='   ',
    )

    assert request.full_name == 'Jane Doe'
    assert request.email == 'jane@example.com'
    assert request.appointment_time == JANE_TIME
    assert request.notes is None


def test_request_converts_aware_times_to_local_naive() -> None:
    aware = datetime(2024, 6, 10, 14, 0, tzinfo=timezone.utc)

    request = build_request(appointment_time=aware)

    assert request.appointment_time.tzinfo is None
    assert request.appointment_time == aware.astimezone().replace(tzinfo=None)


@pytest.mark.parametrize(
    'overrides',
    [
        {'full_name': '   '},
        {'email': 'not-an-email'},
        {'phone': '555-1234'},
        {'reason': ''},
        {'appointment_time': 'not a date'},
        {'notes': 'x' * 601},
    ],
)
def test_request_rejects_invalid_input(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        build_request(**overrides)
