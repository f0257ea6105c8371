from datetime import date

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from hms_backend.models.staff import Staff, StaffStatus


def get_staff_or_404(staff_id: int, db: Session) -> Staff:
    member = db.query(Staff).filter(Staff.id == staff_id).first()
    if not member:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail='Staff member not found.',
        )
    return member


def list_staff(db: Session) -> list[Staff]:
    return db.query(Staff).order_by(Staff.name.asc(), Staff.id.asc()).all()


def create_staff(
    db: Session,
    *,
    name: str,
    email: str,
    date_of_birth: date,
    join_date: date,
    designation: str,
    education: str,
    certificate_urls: list[str],
) -> Staff:
    if db.query(Staff).filter(Staff.email == email).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail='A staff member with this email already exists.',
        )

    member = Staff(
        name=name,
        email=email,
        date_of_birth=date_of_birth,
        join_date=join_date,
        staff_role=designation,
        educational_qualification=education,
        certificates=list(certificate_urls),
    )
    db.add(member)
    db.commit()
    db.refresh(member)
    return member


def update_staff_status(member: Staff, new_status: StaffStatus, db: Session) -> Staff:
    member.status = new_status.value
    db.commit()
    db.refresh(member)
    return member
