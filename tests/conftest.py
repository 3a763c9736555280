from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from clinic_api.database import Base, get_db
from clinic_api.main import app
from clinic_api.models.appointment import Appointment
from clinic_api.models.dentist import Dentist
from clinic_api.models.patient import Patient
from clinic_api.models.time_slot import TimeSlot
from clinic_api.models.user import User


@pytest.fixture
def db_engine():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db_session(db_engine):
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def admin_user() -> User:
    return User(id=1, open_id='owner-1', name='Clinic Owner', role='admin')


@pytest.fixture
def regular_user() -> User:
    return User(id=2, open_id='patient-1', name='Regular User', role='user')


@pytest.fixture
def dentist(db_session) -> Dentist:
    dentist = Dentist(full_name='Dr. Alice Moreau', specialization='Orthodontics', is_active=True)
    db_session.add(dentist)
    db_session.commit()
    db_session.refresh(dentist)
    return dentist


def add_slot(db, dentist_id: str, slot_date_time: datetime, is_booked: bool = False) -> TimeSlot:
    slot = TimeSlot(slot_date_time=slot_date_time, dentist_id=dentist_id, is_booked=is_booked)
    db.add(slot)
    db.commit()
    db.refresh(slot)
    return slot


def add_appointment(
    db,
    appointment_time: datetime,
    status: str = 'pending',
    created_at: datetime | None = None,
    email: str = 'patient@example.com',
) -> Appointment:
    patient = db.query(Patient).filter(Patient.email == email).first()
    if patient is None:
        patient = Patient(full_name='Sample Patient', email=email, phone='5550001111')
        db.add(patient)
        db.flush()

    appointment = Appointment(
        patient_id=patient.id,
        appointment_time=appointment_time,
        status=status,
        reason='Checkup',
        phone_number='5550001111',
        created_at=created_at or datetime.now(),
    )
    db.add(appointment)
    db.commit()
    db.refresh(appointment)
    return appointment
