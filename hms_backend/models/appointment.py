"""Appointment model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from hms_backend.database import Base


class Appointment(Base):
    """Represents a booking between a patient and a doctor."""
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False)
    doctor_id = Column(Integer, ForeignKey("doctors.id"))
    doctor_name = Column(String, default="")
    appointment_date_time = Column(DateTime)  # null while waitlisted
    duration_minutes = Column(Integer)
    notes = Column(String)
    status = Column(String)
