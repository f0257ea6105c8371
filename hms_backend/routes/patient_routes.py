from datetime import date

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hms_backend.routes.common import database_unavailable, ensure_database_ready, get_db
from hms_backend.services import patients as patient_service

router = APIRouter(tags=['patients'])


class CreatePatientRequest(BaseModel):
    name: str
    email: str
    number: int | None = None
    date_of_birth: date | None = None
    gender: str | None = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Patient name is required.')
        return normalized

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        normalized = value.strip().lower()
        if '@' not in normalized:
            raise ValueError('A valid email address is required.')
        return normalized

    @field_validator('gender')
    @classmethod
    def validate_gender(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class PatientResponse(BaseModel):
    id: int
    name: str
    number: int | None = None
    email: str | None = None
    date_of_birth: date | None = None
    gender: str | None = None
    age: int | None = None
    basic_info: str

    class Config:
        from_attributes = True


@router.get('', response_model=list[PatientResponse])
def list_patients(q: str | None = Query(default=None), db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return patient_service.list_patients(db, q=q)
    except SQLAlchemyError as exc:
        raise database_unavailable(exc) from exc


@router.get('/{patient_id}', response_model=PatientResponse)
def get_patient(patient_id: int, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return patient_service.get_patient_or_404(patient_id, db)
    except SQLAlchemyError as exc:
        raise database_unavailable(exc) from exc


@router.post('', response_model=PatientResponse, status_code=status.HTTP_201_CREATED)
def create_patient(data: CreatePatientRequest, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return patient_service.create_patient(
            db,
            name=data.name,
            email=data.email,
            number=data.number,
            date_of_birth=data.date_of_birth,
            gender=data.gender,
        )
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc
