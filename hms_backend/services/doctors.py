from datetime import date, datetime

from fastapi import HTTPException, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from hms_backend.models.doctor import Doctor
from hms_backend.scheduling.availability import (
    ScheduleRecord,
    is_available,
    schedule_from_document,
    schedule_to_document,
)

ALL_DEPARTMENTS = 'all'
LICENSE_VERIFIED = 'verified'
LICENSE_PENDING = 'pending'


def doctor_schedule(doctor: Doctor) -> ScheduleRecord | None:
    return schedule_from_document(doctor.schedule)


def get_doctor_or_404(doctor_id: int, db: Session) -> Doctor:
    doctor = db.query(Doctor).filter(Doctor.id == doctor_id).first()
    if not doctor:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail='Doctor not found.',
        )
    return doctor


def list_doctors(
    db: Session,
    *,
    q: str | None = None,
    department: str | None = None,
    available_at: datetime | None = None,
) -> list[Doctor]:
    query = db.query(Doctor)

    normalized_department = (department or '').strip().lower()
    if normalized_department and normalized_department != ALL_DEPARTMENTS:
        query = query.filter(func.lower(Doctor.speciality) == normalized_department)

    search = (q or '').strip()
    if search:
        pattern = f'%{search}%'
        query = query.filter(or_(Doctor.name.ilike(pattern), Doctor.speciality.ilike(pattern)))

    doctors = query.order_by(Doctor.name.asc(), Doctor.id.asc()).all()

    if available_at is not None:
        doctors = [doctor for doctor in doctors if is_available(doctor_schedule(doctor), available_at)]

    return doctors


def is_doctor_available(doctor: Doctor, instant: datetime) -> bool:
    return is_available(doctor_schedule(doctor), instant)


def replace_schedule(doctor: Doctor, schedule: ScheduleRecord | None, db: Session) -> Doctor:
    doctor.schedule = schedule_to_document(schedule)
    db.commit()
    db.refresh(doctor)
    return doctor


def create_doctor(
    db: Session,
    *,
    name: str,
    email: str,
    speciality: str,
    number: int | None = None,
    license_reg_no: str | None = None,
    smc: str | None = None,
    gender: str | None = None,
    date_of_birth: date | None = None,
    year_of_registration: int | None = None,
    schedule: ScheduleRecord | None = None,
) -> Doctor:
    if db.query(Doctor).filter(Doctor.email == email).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail='A doctor with this email already exists.',
        )

    doctor = Doctor(
        name=name,
        email=email,
        speciality=speciality,
        number=number,
        license_reg_no=license_reg_no,
        smc=smc,
        gender=gender,
        date_of_birth=date_of_birth,
        year_of_registration=year_of_registration,
        license_verification_status=LICENSE_PENDING,
        schedule=schedule_to_document(schedule),
    )
    db.add(doctor)
    db.commit()
    db.refresh(doctor)
    return doctor


def set_license_verification(doctor: Doctor, is_verified: bool, db: Session) -> Doctor:
    doctor.license_verification_status = LICENSE_VERIFIED if is_verified else LICENSE_PENDING
    db.commit()
    db.refresh(doctor)
    return doctor
