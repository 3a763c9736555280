from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from clinic_api.core import config
from clinic_api.core.errors import StoreUnavailableError


def build_engine(database_url: str | None) -> Engine | None:
    if not database_url:
        return None
    return create_engine(database_url, pool_pre_ping=True)


engine = build_engine(config.DATABASE_URL)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_indexes_checked = False

INDEX_STATEMENTS = [
    ('appointments', 'CREATE INDEX IF NOT EXISTS idx_appointments_status_created ON appointments(status, created_at)'),
    ('appointments', 'CREATE INDEX IF NOT EXISTS idx_appointments_time ON appointments(appointment_time)'),
    ('time_slots', 'CREATE INDEX IF NOT EXISTS idx_time_slots_booked_time ON time_slots(is_booked, slot_date_time)'),
]


def ensure_schema_indexes(bind: Engine | None = None) -> None:
    global _indexes_checked

    bind = bind or engine
    if bind is None:
        raise StoreUnavailableError()

    if _indexes_checked:
        return

    with _schema_lock:
        if _indexes_checked:
            return

        table_names = set(inspect(bind).get_table_names())

        with bind.begin() as connection:
            for table_name, statement in INDEX_STATEMENTS:
                if table_name in table_names:
                    connection.execute(text(statement))

        _indexes_checked = True


def get_db():
    if engine is None:
        raise StoreUnavailableError()

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
