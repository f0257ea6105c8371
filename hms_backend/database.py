from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker

from hms_backend.core import config


engine = create_engine(config.DATABASE_URL, echo=config.SQL_ECHO)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_doctor_schema_checked = False
_appointment_schema_checked = False


def _add_missing_columns(table_name: str, migration_steps: list[tuple[str, str]], index_statements: list[str]) -> None:
    inspector = inspect(engine)

    if table_name not in inspector.get_table_names():
        return

    existing_columns = {column['name'] for column in inspector.get_columns(table_name)}

    with engine.begin() as connection:
        for column_name, statement in migration_steps:
            if column_name not in existing_columns:
                connection.execute(text(statement))
        for statement in index_statements:
            connection.execute(text(statement))


def ensure_doctor_schema() -> None:
    global _doctor_schema_checked

    if _doctor_schema_checked:
        return

    with _schema_lock:
        if _doctor_schema_checked:
            return

        _add_missing_columns(
            'doctors',
            [
                ('schedule', 'ALTER TABLE doctors ADD COLUMN schedule JSON'),
                ('license_verification_status', 'ALTER TABLE doctors ADD COLUMN license_verification_status VARCHAR'),
                ('year_of_registration', 'ALTER TABLE doctors ADD COLUMN year_of_registration INTEGER'),
            ],
            ['CREATE INDEX IF NOT EXISTS idx_doctors_speciality ON doctors(speciality)'],
        )

        _doctor_schema_checked = True


def ensure_appointment_schema() -> None:
    global _appointment_schema_checked

    if _appointment_schema_checked:
        return

    with _schema_lock:
        if _appointment_schema_checked:
            return

        _add_missing_columns(
            'appointments',
            [
                ('doctor_id', 'ALTER TABLE appointments ADD COLUMN doctor_id INTEGER'),
                ('duration_minutes', 'ALTER TABLE appointments ADD COLUMN duration_minutes INTEGER'),
                ('notes', 'ALTER TABLE appointments ADD COLUMN notes VARCHAR'),
            ],
            [
                'CREATE INDEX IF NOT EXISTS idx_appointments_patient_time '
                'ON appointments(patient_id, appointment_date_time)',
                'CREATE INDEX IF NOT EXISTS idx_appointments_doctor_time '
                'ON appointments(doctor_id, appointment_date_time)',
            ],
        )

        _appointment_schema_checked = True
