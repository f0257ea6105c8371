from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hms_backend.core import config
from hms_backend.routes.common import database_unavailable, ensure_database_ready, get_db
from hms_backend.scheduling.appointments import (
    STATUS_DISPLAY,
    AppointmentFilter,
    AppointmentRecord,
    AppointmentStatus,
    current_appointments,
    filter_appointments,
)
from hms_backend.services import appointments as appointment_service
from hms_backend.services.patients import get_patient_or_404

router = APIRouter(tags=['appointments'])

DASHBOARD_CURRENT_LIMIT = 2


def _normalize_notes(value: str | None) -> str | None:
    if value is None:
        return None

    normalized = value.strip()
    if not normalized:
        return None

    if len(normalized) > config.MAX_APPOINTMENT_NOTES_LENGTH:
        raise ValueError(f'Notes must be {config.MAX_APPOINTMENT_NOTES_LENGTH} characters or fewer.')

    return normalized


class CreateAppointmentRequest(BaseModel):
    patient_id: int
    doctor_id: int
    appointment_date_time: datetime | None = None
    duration_minutes: int | None = None
    notes: str | None = None

    @field_validator('duration_minutes')
    @classmethod
    def validate_duration_minutes(cls, value: int | None) -> int | None:
        if value is not None and value <= 0:
            raise ValueError('Duration must be a positive number of minutes.')
        return value

    @field_validator('notes')
    @classmethod
    def validate_notes(cls, value: str | None) -> str | None:
        return _normalize_notes(value)


class RescheduleAppointmentRequest(BaseModel):
    appointment_date_time: datetime


class UpdateAppointmentStatusRequest(BaseModel):
    status: AppointmentStatus

    @field_validator('status', mode='before')
    @classmethod
    def validate_status(cls, value):
        if isinstance(value, AppointmentStatus):
            return value

        parsed = AppointmentStatus.parse(value)
        if parsed is AppointmentStatus.NONE and str(value).strip().lower() != AppointmentStatus.NONE.value:
            raise ValueError('Invalid appointment status.')
        return parsed


class AppointmentResponse(BaseModel):
    id: int
    patient_id: int | None = None
    doctor_id: int | None = None
    doctor_name: str
    appointment_date_time: datetime | None = None
    duration_minutes: int | None = None
    notes: str | None = None
    status: AppointmentStatus
    status_label: str
    status_color: str


class StatusOptionResponse(BaseModel):
    status: AppointmentStatus
    label: str
    color: str


class FilterOptionResponse(BaseModel):
    filter: AppointmentFilter
    label: str


def to_appointment_response(record: AppointmentRecord) -> AppointmentResponse:
    display = record.display
    return AppointmentResponse(
        id=record.id,
        patient_id=record.patient_id,
        doctor_id=record.doctor_id,
        doctor_name=record.doctor_name,
        appointment_date_time=record.appointment_date_time,
        duration_minutes=record.duration_minutes,
        notes=record.notes,
        status=record.status,
        status_label=display.label,
        status_color=display.color.value,
    )


@router.get('/statuses', response_model=list[StatusOptionResponse])
def list_statuses():
    return [
        StatusOptionResponse(status=appointment_status, label=display.label, color=display.color.value)
        for appointment_status, display in STATUS_DISPLAY.items()
    ]


@router.get('/filters', response_model=list[FilterOptionResponse])
def list_filters():
    return [FilterOptionResponse(filter=criterion, label=criterion.label) for criterion in AppointmentFilter]


@router.get('', response_model=list[AppointmentResponse])
def list_appointments(
    patient_id: int = Query(...),
    criterion: AppointmentFilter = Query(default=AppointmentFilter.ALL, alias='filter'),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        get_patient_or_404(patient_id, db)
        records = appointment_service.list_patient_appointments(patient_id, db)
        return [to_appointment_response(record) for record in filter_appointments(records, criterion)]
    except SQLAlchemyError as exc:
        raise database_unavailable(exc) from exc


@router.get('/current', response_model=list[AppointmentResponse])
def list_current_appointments(
    patient_id: int = Query(...),
    limit: int | None = Query(default=DASHBOARD_CURRENT_LIMIT, ge=1),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        get_patient_or_404(patient_id, db)
        records = appointment_service.list_patient_appointments(patient_id, db)
        return [to_appointment_response(record) for record in current_appointments(records, limit=limit)]
    except SQLAlchemyError as exc:
        raise database_unavailable(exc) from exc


@router.post('', response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(data: CreateAppointmentRequest, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        appointment = appointment_service.book_appointment(
            db,
            patient_id=data.patient_id,
            doctor_id=data.doctor_id,
            appointment_date_time=data.appointment_date_time,
            duration_minutes=data.duration_minutes,
            notes=data.notes,
        )
        return to_appointment_response(AppointmentRecord.model_validate(appointment))
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc


@router.post('/{appointment_id}/cancel', response_model=AppointmentResponse)
def cancel_appointment(appointment_id: int, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        appointment = appointment_service.cancel_appointment(appointment_id, db)
        return to_appointment_response(AppointmentRecord.model_validate(appointment))
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc


@router.post('/{appointment_id}/reschedule', response_model=AppointmentResponse)
def reschedule_appointment(
    appointment_id: int,
    data: RescheduleAppointmentRequest,
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        appointment = appointment_service.reschedule_appointment(appointment_id, data.appointment_date_time, db)
        return to_appointment_response(AppointmentRecord.model_validate(appointment))
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc


@router.patch('/{appointment_id}/status', response_model=AppointmentResponse)
def update_appointment_status(
    appointment_id: int,
    data: UpdateAppointmentStatusRequest,
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        appointment = appointment_service.set_appointment_status(appointment_id, data.status, db)
        return to_appointment_response(AppointmentRecord.model_validate(appointment))
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc
