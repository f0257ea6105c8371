from datetime import date

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hms_backend.models.staff import Staff, StaffStatus
from hms_backend.routes.common import database_unavailable, ensure_database_ready, get_db
from hms_backend.services import staff as staff_service

router = APIRouter(tags=['staff'])


class CreateStaffRequest(BaseModel):
    full_name: str
    email: str
    date_of_birth: date
    date_of_joining: date
    designation: str
    education: str = ''
    certificate_urls: list[str] = []

    @field_validator('full_name', 'designation')
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

    @field_validator('certificate_urls')
    @classmethod
    def validate_certificate_urls(cls, value: list[str]) -> list[str]:
        return [url.strip() for url in value if url.strip()]


class UpdateStaffStatusRequest(BaseModel):
    status: StaffStatus


class StaffResponse(BaseModel):
    id: int
    name: str
    email: str | None = None
    date_of_birth: date | None = None
    join_date: date | None = None
    staff_role: str | None = None
    certificates: list[str] = []
    status: StaffStatus | None = None
    status_color: str | None = None
    age: int | None = None
    years_of_service: int | None = None
    basic_info: str
    education_info: str


def to_staff_response(member: Staff) -> StaffResponse:
    member_status = StaffStatus(member.status) if member.status else None
    return StaffResponse(
        id=member.id,
        name=member.name,
        email=member.email,
        date_of_birth=member.date_of_birth,
        join_date=member.join_date,
        staff_role=member.staff_role,
        certificates=member.certificates or [],
        status=member_status,
        status_color=member_status.color if member_status else None,
        age=member.age,
        years_of_service=member.years_of_service,
        basic_info=member.basic_info,
        education_info=member.education_info,
    )


@router.get('', response_model=list[StaffResponse])
def list_staff(db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return [to_staff_response(member) for member in staff_service.list_staff(db)]
    except SQLAlchemyError as exc:
        raise database_unavailable(exc) from exc


@router.post('', response_model=StaffResponse, status_code=status.HTTP_201_CREATED)
def create_staff(data: CreateStaffRequest, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        member = staff_service.create_staff(
            db,
            name=data.full_name,
            email=data.email,
            date_of_birth=data.date_of_birth,
            join_date=data.date_of_joining,
            designation=data.designation,
            education=data.education.strip(),
            certificate_urls=data.certificate_urls,
        )
        return to_staff_response(member)
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc


@router.patch('/{staff_id}/status', response_model=StaffResponse)
def update_staff_status(staff_id: int, data: UpdateStaffStatusRequest, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        member = staff_service.get_staff_or_404(staff_id, db)
        return to_staff_response(staff_service.update_staff_status(member, data.status, db))
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc
