from datetime import date

import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from hms_backend.models.staff import StaffStatus
from hms_backend.routes.patient_routes import CreatePatientRequest, create_patient, get_patient, list_patients
from hms_backend.routes.staff_routes import (
    CreateStaffRequest,
    UpdateStaffStatusRequest,
    create_staff,
    list_staff,
    update_staff_status,
)


def test_create_patient_request_normalizes_fields() -> None:
    request = CreatePatientRequest(name='  Jane Doe ', email=' JANE@EXAMPLE.COM ', gender='  ')

    assert request.name == 'Jane Doe'
    assert request.email == 'jane@example.com'
    assert request.gender is None


@pytest.mark.parametrize('payload', [{'name': '  ', 'email': 'a@b.c'}, {'name': 'Jane', 'email': 'not-an-email'}])
def test_create_patient_request_rejects_invalid_fields(payload: dict) -> None:
    with pytest.raises(ValidationError):
        CreatePatientRequest(**payload)


def test_create_and_search_patients(db, skip_schema_check) -> None:
    created = create_patient(
        CreatePatientRequest(name='Jane Doe', email='jane@example.com', gender='Female', number=10042),
        db=db,
    )
    create_patient(CreatePatientRequest(name='Omar Haddad', email='omar@example.com'), db=db)

    assert [patient.name for patient in list_patients(q='jane', db=db)] == ['Jane Doe']
    assert get_patient(patient_id=created.id, db=db).number == 10042


def test_get_patient_returns_not_found(db, skip_schema_check) -> None:
    with pytest.raises(HTTPException) as exception_info:
        get_patient(patient_id=12, db=db)

    assert exception_info.value.status_code == 404


def test_create_staff_request_rejects_blank_designation() -> None:
    with pytest.raises(ValidationError):
        CreateStaffRequest(
            full_name='Sarah Johnson',
            email='sarah@hospital.com',
            date_of_birth=date(1988, 9, 15),
            date_of_joining=date(2018, 3, 1),
            designation='   ',
        )


def test_create_staff_and_change_status(db, skip_schema_check) -> None:
    request = CreateStaffRequest(
        full_name='Sarah Johnson',
        email='Sarah@Hospital.com',
        date_of_birth=date(1988, 9, 15),
        date_of_joining=date(2018, 3, 1),
        designation='Head Nurse',
        education='BSc Nursing',
        certificate_urls=['https://files.example.com/bls.pdf', '  '],
    )

    created = create_staff(request, db=db)

    assert created.email == 'sarah@hospital.com'
    assert created.certificates == ['https://files.example.com/bls.pdf']
    assert created.status is None
    assert created.basic_info.startswith('Sarah Johnson - Head Nurse (')

    updated = update_staff_status(
        staff_id=created.id,
        data=UpdateStaffStatusRequest(status='Off Duty'),
        db=db,
    )

    assert updated.status is StaffStatus.OFF_DUTY
    assert updated.status_color == 'red'
    assert [member.id for member in list_staff(db=db)] == [created.id]


def test_staff_without_education_reports_placeholder(db, skip_schema_check) -> None:
    request = CreateStaffRequest(
        full_name='Sam Lee',
        email='sam@hospital.com',
        date_of_birth=date(1990, 1, 1),
        date_of_joining=date(2020, 1, 1),
        designation='Porter',
    )

    assert create_staff(request, db=db).education_info == 'No educational information available'
