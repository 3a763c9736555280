import pytest
from sqlalchemy import inspect
from sqlalchemy.orm import sessionmaker

from clinic_api import main
from clinic_api.models.clinic_settings import ClinicSettings


def test_initialize_database_creates_indexes_and_seeds_settings(db_engine, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr('clinic_api.database.engine', db_engine)
    monkeypatch.setattr('clinic_api.database.SessionLocal', sessionmaker(bind=db_engine))
    monkeypatch.setattr('clinic_api.database._indexes_checked', False)

    main.initialize_database()

    index_names = {index['name'] for index in inspect(db_engine).get_indexes('appointments')}
    assert 'idx_appointments_status_created' in index_names

    db = sessionmaker(bind=db_engine)()
    try:
        assert db.query(ClinicSettings).one().clinic_name == 'Canuck Dentist'
    finally:
        db.close()


def test_initialize_database_without_store_only_warns(monkeypatch: pytest.MonkeyPatch, caplog) -> None:
    monkeypatch.setattr('clinic_api.database.engine', None)

    main.initialize_database()

    assert 'DATABASE_URL is not set' in caplog.text
