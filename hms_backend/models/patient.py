"""Patient model definitions."""

from sqlalchemy import Column, Date, Integer, String

from hms_backend.core.dates import full_years_between
from hms_backend.database import Base


class Patient(Base):
    """Represents a registered patient."""
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    number = Column(Integer)  # medical record number
    email = Column(String, unique=True, index=True)
    date_of_birth = Column(Date)
    gender = Column(String)

    @property
    def age(self) -> int | None:
        return full_years_between(self.date_of_birth)

    @property
    def basic_info(self) -> str:
        info = self.name or ""
        age = self.age

        if age is not None:
            info += f" (Age: {age}"
            if self.gender:
                info += f", {self.gender}"
            info += ")"
        elif self.gender:
            info += f" ({self.gender})"

        return info
