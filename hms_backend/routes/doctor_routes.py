from datetime import date, datetime

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hms_backend.models.doctor import Doctor
from hms_backend.routes.common import database_unavailable, ensure_database_ready, get_db
from hms_backend.scheduling.availability import ScheduleRecord
from hms_backend.services import doctors as doctor_service

router = APIRouter(tags=['doctors'])


class ScheduleBody(BaseModel):
    leave_time_slots: list[datetime] | None = None
    full_day_leaves: list[datetime] | None = None


class CreateDoctorRequest(BaseModel):
    name: str
    email: str
    speciality: str
    number: int | None = None
    license_reg_no: str | None = None
    smc: str | None = None
    gender: str | None = None
    date_of_birth: date | None = None
    year_of_registration: int | None = None
    schedule: ScheduleBody | None = None

    @field_validator('name', 'speciality')
    @classmethod
    def validate_required_text(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('This field is required.')
        return normalized

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        normalized = value.strip().lower()
        if '@' not in normalized:
            raise ValueError('A valid email address is required.')
        return normalized

    @field_validator('license_reg_no', 'smc', 'gender')
    @classmethod
    def validate_optional_text(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @field_validator('year_of_registration')
    @classmethod
    def validate_year_of_registration(cls, value: int | None) -> int | None:
        if value is not None and not 1900 <= value <= date.today().year:
            raise ValueError('Year of registration is out of range.')
        return value


class UpdateLicenseRequest(BaseModel):
    is_verified: bool


class DoctorResponse(BaseModel):
    id: int
    name: str
    number: int | None = None
    email: str | None = None
    speciality: str
    license_reg_no: str | None = None
    smc: str | None = None
    gender: str | None = None
    date_of_birth: date | None = None
    year_of_registration: int | None = None
    age: int | None = None
    basic_info: str
    is_license_verified: bool
    license_verification_status: str | None = None
    schedule: ScheduleBody | None = None


class AvailabilityResponse(BaseModel):
    doctor_id: int
    at: datetime
    is_available: bool


def to_schedule_body(schedule: ScheduleRecord | None) -> ScheduleBody | None:
    if schedule is None:
        return None
    return ScheduleBody(
        leave_time_slots=list(schedule.leave_time_slots) if schedule.leave_time_slots is not None else None,
        full_day_leaves=list(schedule.full_day_leaves) if schedule.full_day_leaves is not None else None,
    )


def to_doctor_response(doctor: Doctor) -> DoctorResponse:
    return DoctorResponse(
        id=doctor.id,
        name=doctor.name,
        number=doctor.number,
        email=doctor.email,
        speciality=doctor.speciality or '',
        license_reg_no=doctor.license_reg_no,
        smc=doctor.smc,
        gender=doctor.gender,
        date_of_birth=doctor.date_of_birth,
        year_of_registration=doctor.year_of_registration,
        age=doctor.age,
        basic_info=doctor.basic_info,
        is_license_verified=doctor.is_license_verified,
        license_verification_status=doctor.license_verification_status,
        schedule=to_schedule_body(doctor_service.doctor_schedule(doctor)),
    )


@router.get('', response_model=list[DoctorResponse])
def list_doctors(
    q: str | None = Query(default=None),
    department: str | None = Query(default=None),
    available_at: datetime | None = Query(default=None),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        doctors = doctor_service.list_doctors(db, q=q, department=department, available_at=available_at)
        return [to_doctor_response(doctor) for doctor in doctors]
    except SQLAlchemyError as exc:
        raise database_unavailable(exc) from exc


@router.get('/{doctor_id}', response_model=DoctorResponse)
def get_doctor(doctor_id: int, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return to_doctor_response(doctor_service.get_doctor_or_404(doctor_id, db))
    except SQLAlchemyError as exc:
        raise database_unavailable(exc) from exc


@router.get('/{doctor_id}/availability', response_model=AvailabilityResponse)
def get_doctor_availability(
    doctor_id: int,
    at: datetime = Query(...),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        doctor = doctor_service.get_doctor_or_404(doctor_id, db)
        return AvailabilityResponse(
            doctor_id=doctor.id,
            at=at,
            is_available=doctor_service.is_doctor_available(doctor, at),
        )
    except SQLAlchemyError as exc:
        raise database_unavailable(exc) from exc


@router.get('/{doctor_id}/schedule', response_model=ScheduleBody | None)
def get_doctor_schedule(doctor_id: int, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        doctor = doctor_service.get_doctor_or_404(doctor_id, db)
        return to_schedule_body(doctor_service.doctor_schedule(doctor))
    except SQLAlchemyError as exc:
        raise database_unavailable(exc) from exc


@router.put('/{doctor_id}/schedule', response_model=DoctorResponse)
def replace_doctor_schedule(doctor_id: int, data: ScheduleBody, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        doctor = doctor_service.get_doctor_or_404(doctor_id, db)
        schedule = ScheduleRecord(
            leave_time_slots=data.leave_time_slots,
            full_day_leaves=data.full_day_leaves,
        )
        return to_doctor_response(doctor_service.replace_schedule(doctor, schedule, db))
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc


@router.delete('/{doctor_id}/schedule', status_code=status.HTTP_204_NO_CONTENT)
def clear_doctor_schedule(doctor_id: int, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        doctor = doctor_service.get_doctor_or_404(doctor_id, db)
        doctor_service.replace_schedule(doctor, None, db)
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc


@router.post('', response_model=DoctorResponse, status_code=status.HTTP_201_CREATED)
def create_doctor(data: CreateDoctorRequest, db: Session = Depends(get_db)):
    ensure_database_ready()

    schedule = None
    if data.schedule is not None:
        schedule = ScheduleRecord(
            leave_time_slots=data.schedule.leave_time_slots,
            full_day_leaves=data.schedule.full_day_leaves,
        )

    try:
        doctor = doctor_service.create_doctor(
            db,
            name=data.name,
            email=data.email,
            speciality=data.speciality,
            number=data.number,
            license_reg_no=data.license_reg_no,
            smc=data.smc,
            gender=data.gender,
            date_of_birth=data.date_of_birth,
            year_of_registration=data.year_of_registration,
            schedule=schedule,
        )
        return to_doctor_response(doctor)
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc


@router.patch('/{doctor_id}/license', response_model=DoctorResponse)
def update_doctor_license(doctor_id: int, data: UpdateLicenseRequest, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        doctor = doctor_service.get_doctor_or_404(doctor_id, db)
        return to_doctor_response(doctor_service.set_license_verification(doctor, data.is_verified, db))
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc
