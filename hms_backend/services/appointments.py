import logging
from datetime import datetime

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from hms_backend.core import config
from hms_backend.models.appointment import Appointment
from hms_backend.scheduling.appointments import AppointmentRecord, AppointmentStatus
from hms_backend.services.doctors import get_doctor_or_404, is_doctor_available
from hms_backend.services.patients import get_patient_or_404

logger = logging.getLogger(__name__)

CLOSED_STATUSES = frozenset({AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED})


def normalize_start_time(value: datetime) -> datetime:
    """Truncate to the minute and store as naive hospital-local time."""
    if value.tzinfo is not None:
        value = value.astimezone(config.get_hospital_timezone()).replace(tzinfo=None)
    return value.replace(second=0, microsecond=0)


def get_appointment_or_404(appointment_id: int, db: Session) -> Appointment:
    appointment = db.query(Appointment).filter(Appointment.id == appointment_id).first()
    if not appointment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail='Appointment not found.',
        )
    return appointment


def list_patient_appointments(patient_id: int, db: Session) -> list[AppointmentRecord]:
    """Snapshot of a patient's appointments, soonest first, waitlisted last."""
    appointments = db.query(Appointment).filter(
        Appointment.patient_id == patient_id,
    ).order_by(
        Appointment.appointment_date_time.is_(None),
        Appointment.appointment_date_time.asc(),
        Appointment.id.asc(),
    ).all()

    return [AppointmentRecord.model_validate(appointment) for appointment in appointments]


def _ensure_open(appointment: Appointment) -> None:
    current_status = AppointmentStatus.parse(appointment.status)
    if current_status in CLOSED_STATUSES:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f'Appointment is already {current_status.value}.',
        )


def _ensure_doctor_available(doctor, start_time: datetime) -> None:
    if not is_doctor_available(doctor, start_time):
        logger.info('Refused booking with doctor %s at %s: on leave', doctor.id, start_time)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail='The doctor is on leave at the requested time.',
        )


def book_appointment(
    db: Session,
    *,
    patient_id: int,
    doctor_id: int,
    appointment_date_time: datetime | None = None,
    duration_minutes: int | None = None,
    notes: str | None = None,
) -> Appointment:
    """Book a patient with a doctor.

    Without a date and time the booking goes on the waitlist, which is
    recorded with the no-show status.
    """
    get_patient_or_404(patient_id, db)
    doctor = get_doctor_or_404(doctor_id, db)

    start_time = None
    appointment_status = AppointmentStatus.NO_SHOW
    if appointment_date_time is not None:
        start_time = normalize_start_time(appointment_date_time)
        _ensure_doctor_available(doctor, start_time)
        appointment_status = AppointmentStatus.SCHEDULED

    appointment = Appointment(
        patient_id=patient_id,
        doctor_id=doctor.id,
        doctor_name=doctor.name,
        appointment_date_time=start_time,
        duration_minutes=duration_minutes,
        notes=notes,
        status=appointment_status.value,
    )
    db.add(appointment)
    db.commit()
    db.refresh(appointment)

    logger.info('Booked appointment %s for patient %s (%s)', appointment.id, patient_id, appointment_status.value)
    return appointment


def cancel_appointment(appointment_id: int, db: Session) -> Appointment:
    appointment = get_appointment_or_404(appointment_id, db)
    _ensure_open(appointment)

    appointment.status = AppointmentStatus.CANCELLED.value
    db.commit()
    db.refresh(appointment)

    logger.info('Cancelled appointment %s', appointment.id)
    return appointment


def reschedule_appointment(appointment_id: int, new_date_time: datetime, db: Session) -> Appointment:
    appointment = get_appointment_or_404(appointment_id, db)
    _ensure_open(appointment)

    start_time = normalize_start_time(new_date_time)
    if appointment.doctor_id is not None:
        doctor = get_doctor_or_404(appointment.doctor_id, db)
        _ensure_doctor_available(doctor, start_time)

    appointment.appointment_date_time = start_time
    appointment.status = AppointmentStatus.RESCHEDULED.value
    db.commit()
    db.refresh(appointment)

    logger.info('Rescheduled appointment %s to %s', appointment.id, start_time)
    return appointment


def set_appointment_status(appointment_id: int, new_status: AppointmentStatus, db: Session) -> Appointment:
    appointment = get_appointment_or_404(appointment_id, db)

    appointment.status = new_status.value
    db.commit()
    db.refresh(appointment)

    logger.info('Appointment %s status set to %s', appointment.id, new_status.value)
    return appointment
