"""Staff model definitions."""

from enum import Enum

from sqlalchemy import JSON, Column, Date, Integer, String

from hms_backend.core.dates import full_years_between
from hms_backend.database import Base


class StaffStatus(str, Enum):
    AVAILABLE = "Available"
    BUSY = "Busy"
    ON_BREAK = "On Break"
    OFF_DUTY = "Off Duty"

    @property
    def color(self) -> str:
        return STAFF_STATUS_COLORS[self]


STAFF_STATUS_COLORS = {
    StaffStatus.AVAILABLE: "green",
    StaffStatus.BUSY: "orange",
    StaffStatus.ON_BREAK: "blue",
    StaffStatus.OFF_DUTY: "red",
}


class Staff(Base):
    """Represents a non-doctor staff member."""
    __tablename__ = "staff"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True)
    date_of_birth = Column(Date)
    join_date = Column(Date)
    educational_qualification = Column(String)
    certificates = Column(JSON)
    staff_role = Column(String)
    status = Column(String)

    @property
    def age(self) -> int | None:
        return full_years_between(self.date_of_birth)

    @property
    def years_of_service(self) -> int | None:
        return full_years_between(self.join_date)

    @property
    def basic_info(self) -> str:
        info = self.name or ""
        if self.staff_role:
            info += f" - {self.staff_role}"
        years = self.years_of_service
        if years is not None:
            info += f" ({years} years of service)"
        return info

    @property
    def education_info(self) -> str:
        info = self.educational_qualification or ""
        if self.certificates:
            if info:
                info += " - "
            info += ", ".join(self.certificates)
        return info or "No educational information available"
