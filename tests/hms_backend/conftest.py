import os
from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from hms_backend.database import Base  # noqa: E402
from hms_backend.models.appointment import Appointment  # noqa: E402
from hms_backend.models.doctor import Doctor  # noqa: E402
from hms_backend.models.patient import Patient  # noqa: E402
from hms_backend.models.staff import Staff  # noqa: E402

ROUTE_MODULES = ('appointment_routes', 'doctor_routes', 'patient_routes', 'staff_routes')


@pytest.fixture
def db():
    engine = create_engine('sqlite:///:memory:')
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    tables = [Patient.__table__, Doctor.__table__, Staff.__table__, Appointment.__table__]
    Base.metadata.create_all(bind=engine, tables=tables)

    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine, tables=list(reversed(tables)))
        engine.dispose()


@pytest.fixture
def skip_schema_check(monkeypatch: pytest.MonkeyPatch) -> None:
    for module_name in ROUTE_MODULES:
        monkeypatch.setattr(f'hms_backend.routes.{module_name}.ensure_database_ready', lambda: None)


@pytest.fixture
def make_doctor(db):
    def _make_doctor(name: str = 'Dr. Jane Doe', speciality: str = 'Cardiology', schedule=None, **kwargs) -> Doctor:
        doctor = Doctor(
            name=name,
            speciality=speciality,
            email=kwargs.pop('email', f"{name.lower().replace(' ', '.').replace('..', '.')}@hospital.com"),
            schedule=schedule,
            **kwargs,
        )
        db.add(doctor)
        db.commit()
        db.refresh(doctor)
        return doctor

    return _make_doctor


@pytest.fixture
def make_patient(db):
    def _make_patient(name: str = 'Jane Patient', email: str = 'jane@example.com', **kwargs) -> Patient:
        patient = Patient(name=name, email=email, date_of_birth=kwargs.pop('date_of_birth', date(1985, 6, 15)), **kwargs)
        db.add(patient)
        db.commit()
        db.refresh(patient)
        return patient

    return _make_patient


@pytest.fixture
def make_appointment(db):
    def _make_appointment(patient: Patient, doctor: Doctor | None = None, **kwargs) -> Appointment:
        appointment = Appointment(
            patient_id=patient.id,
            doctor_id=doctor.id if doctor else None,
            doctor_name=doctor.name if doctor else kwargs.pop('doctor_name', ''),
            **kwargs,
        )
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment

    return _make_appointment
