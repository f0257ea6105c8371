"""Doctor model definitions."""

from sqlalchemy import JSON, Column, Date, Integer, String

from hms_backend.core.dates import full_years_between
from hms_backend.database import Base


class Doctor(Base):
    """Represents a doctor with an optional leave schedule."""
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    number = Column(Integer)
    email = Column(String, unique=True, index=True)
    speciality = Column(String, default="")
    license_reg_no = Column(String)
    smc = Column(String)  # state medical council
    gender = Column(String)
    date_of_birth = Column(Date)
    year_of_registration = Column(Integer)
    license_verification_status = Column(String)
    # None means no schedule recorded, which is not the same as empty leave lists.
    schedule = Column(JSON, nullable=True)

    @property
    def age(self) -> int | None:
        return full_years_between(self.date_of_birth)

    @property
    def basic_info(self) -> str:
        info = self.name or ""
        if self.license_reg_no:
            info += f" (License: {self.license_reg_no})"
        if self.year_of_registration:
            info += f" - Registered: {self.year_of_registration}"
        return info

    @property
    def is_license_verified(self) -> bool:
        return (self.license_verification_status or "").strip().lower() == "verified"
