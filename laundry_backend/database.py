from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker

from laundry_backend.core import config


def _engine_options(database_url: str) -> dict:
    if database_url.startswith('sqlite'):
        return {'connect_args': {'check_same_thread': False}}
    return {'pool_pre_ping': True}


engine = create_engine(config.DATABASE_URL, **_engine_options(config.DATABASE_URL))

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_appointment_schema_checked = False
_machine_schema_checked = False


def ensure_appointment_schema() -> None:
    global _appointment_schema_checked

    if _appointment_schema_checked:
        return

    with _schema_lock:
        if _appointment_schema_checked:
            return

        inspector = inspect(engine)

        if 'appointments' not in inspector.get_table_names():
            _appointment_schema_checked = True
            return

        with engine.begin() as connection:
            connection.execute(
                text(
                    'CREATE INDEX IF NOT EXISTS idx_appointments_hall_service_start '
                    'ON appointments(hall_id, service_type, appointment_datetime)'
                )
            )
            connection.execute(
                text(
                    'CREATE INDEX IF NOT EXISTS idx_appointments_machine_start '
                    'ON appointments(machine_id, appointment_datetime)'
                )
            )

        _appointment_schema_checked = True


def ensure_machine_schema() -> None:
    global _machine_schema_checked

    if _machine_schema_checked:
        return

    with _schema_lock:
        if _machine_schema_checked:
            return

        inspector = inspect(engine)

        if 'machines' not in inspector.get_table_names():
            _machine_schema_checked = True
            return

        with engine.begin() as connection:
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_machines_hall_type_status ON machines(hall_id, type, status)')
            )

        _machine_schema_checked = True
