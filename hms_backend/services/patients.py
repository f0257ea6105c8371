from datetime import date

from fastapi import HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from hms_backend.models.patient import Patient


def get_patient_or_404(patient_id: int, db: Session) -> Patient:
    patient = db.query(Patient).filter(Patient.id == patient_id).first()
    if not patient:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail='Patient not found.',
        )
    return patient


def list_patients(db: Session, *, q: str | None = None) -> list[Patient]:
    query = db.query(Patient)

    search = (q or '').strip()
    if search:
        pattern = f'%{search}%'
        query = query.filter(
            or_(
                Patient.name.ilike(pattern),
                Patient.email.ilike(pattern),
                Patient.gender.ilike(pattern),
            )
        )

    return query.order_by(Patient.name.asc(), Patient.id.asc()).all()


def create_patient(
    db: Session,
    *,
    name: str,
    email: str,
    number: int | None = None,
    date_of_birth: date | None = None,
    gender: str | None = None,
) -> Patient:
    if db.query(Patient).filter(Patient.email == email).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail='A patient with this email already exists.',
        )

    patient = Patient(
        name=name,
        email=email,
        number=number,
        date_of_birth=date_of_birth,
        gender=gender,
    )
    db.add(patient)
    db.commit()
    db.refresh(patient)
    return patient
