from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from hms_backend.scheduling.availability import (
    ScheduleRecord,
    is_available,
    is_on_full_day_leave,
    schedule_from_document,
    schedule_to_document,
)

IST = timezone(timedelta(hours=5, minutes=30))


@pytest.fixture
def june_schedule() -> ScheduleRecord:
    return ScheduleRecord(
        full_day_leaves=[datetime(2025, 6, 1)],
        leave_time_slots=[datetime(2025, 6, 10, 9, 0)],
    )


@pytest.mark.parametrize(
    ('instant', 'expected'),
    [
        (datetime(2025, 6, 1, 14, 0), False),
        (datetime(2025, 6, 10, 9, 0), False),
        (datetime(2025, 6, 10, 9, 1), True),
        (datetime(2025, 6, 2, 9, 0), True),
    ],
)
def test_is_available_for_documented_examples(june_schedule: ScheduleRecord, instant: datetime, expected: bool) -> None:
    assert is_available(june_schedule, instant) is expected


@pytest.mark.parametrize('hour, minute', [(0, 0), (8, 59), (12, 30), (23, 59)])
def test_full_day_leave_blocks_every_time_of_day(june_schedule: ScheduleRecord, hour: int, minute: int) -> None:
    assert is_available(june_schedule, datetime(2025, 6, 1, hour, minute)) is False


def test_full_day_leave_ignores_time_of_stored_entry() -> None:
    schedule = ScheduleRecord(full_day_leaves=[datetime(2025, 6, 1, 18, 45)])

    assert is_available(schedule, datetime(2025, 6, 1, 7, 0)) is False


def test_leave_slot_ignores_seconds() -> None:
    schedule = ScheduleRecord(leave_time_slots=[datetime(2025, 6, 10, 9, 0, 0)])

    assert is_available(schedule, datetime(2025, 6, 10, 9, 0, 45, 120)) is False
    assert is_available(schedule, datetime(2025, 6, 10, 8, 59, 59)) is True


@pytest.mark.parametrize(
    'instant',
    [datetime(2025, 1, 1), datetime(2025, 6, 1, 14, 0), datetime(2030, 12, 31, 23, 59, tzinfo=timezone.utc)],
)
def test_absent_schedule_is_always_available(instant: datetime) -> None:
    assert is_available(None, instant) is True


def test_empty_schedule_is_available_but_distinct_from_absent() -> None:
    empty = ScheduleRecord(leave_time_slots=[], full_day_leaves=[])

    assert is_available(empty, datetime(2025, 6, 1, 9, 0)) is True
    assert schedule_to_document(empty) == {'leaveTimeSlots': [], 'fullDayLeaves': []}
    assert schedule_to_document(None) is None


def test_aware_instant_is_read_in_hospital_calendar() -> None:
    schedule = ScheduleRecord(full_day_leaves=[date(2025, 6, 1)])
    # 20:00 UTC on May 31 is already June 1 in IST
    instant = datetime(2025, 5, 31, 20, 0, tzinfo=timezone.utc)

    assert is_available(schedule, instant, tz=IST) is False
    assert is_available(schedule, instant, tz=timezone.utc) is True


def test_aware_leave_slot_matches_local_instant() -> None:
    schedule = ScheduleRecord(leave_time_slots=[datetime(2025, 6, 10, 3, 30, tzinfo=timezone.utc)])

    assert is_available(schedule, datetime(2025, 6, 10, 9, 0), tz=IST) is False
    assert is_available(schedule, datetime(2025, 6, 10, 9, 0, tzinfo=IST), tz=IST) is False


def test_is_on_full_day_leave(june_schedule: ScheduleRecord) -> None:
    assert is_on_full_day_leave(june_schedule, date(2025, 6, 1)) is True
    assert is_on_full_day_leave(june_schedule, date(2025, 6, 10)) is False
    assert is_on_full_day_leave(None, date(2025, 6, 1)) is False


def test_schedule_from_document_reads_camel_case_and_iso_strings() -> None:
    schedule = schedule_from_document(
        {'fullDayLeaves': ['2025-06-01'], 'leaveTimeSlots': ['2025-06-10T09:00:00']},
    )

    assert schedule == ScheduleRecord(
        full_day_leaves=[datetime(2025, 6, 1)],
        leave_time_slots=[datetime(2025, 6, 10, 9, 0)],
    )


def test_schedule_from_document_drops_unreadable_entries() -> None:
    schedule = schedule_from_document({'fullDayLeaves': ['2025-06-01', 'not-a-date', 42], 'leaveTimeSlots': 'nope'})

    assert schedule.full_day_leaves == (datetime(2025, 6, 1),)
    assert schedule.leave_time_slots is None


@pytest.mark.parametrize('document', [None, 'schedule', 7, ['2025-06-01']])
def test_schedule_from_document_treats_missing_or_malformed_as_absent(document) -> None:
    assert schedule_from_document(document) is None


def test_document_round_trip_preserves_missing_lists() -> None:
    original = ScheduleRecord(full_day_leaves=[datetime(2025, 6, 1)])

    document = schedule_to_document(original)

    assert document == {'leaveTimeSlots': None, 'fullDayLeaves': ['2025-06-01T00:00:00']}
    assert schedule_from_document(document) == original


def test_schedule_record_is_immutable(june_schedule: ScheduleRecord) -> None:
    with pytest.raises(ValidationError):
        june_schedule.full_day_leaves = ()


@pytest.mark.parametrize('bad_zone', ['', 'Mars/Olympus_Mons', '../etc/passwd'])
def test_is_available_stays_total_with_unusable_hospital_timezone(
    monkeypatch: pytest.MonkeyPatch,
    june_schedule: ScheduleRecord,
    bad_zone: str,
) -> None:
    monkeypatch.setattr('hms_backend.core.config.HOSPITAL_TIMEZONE', bad_zone)

    assert is_available(june_schedule, datetime(2025, 6, 1, 14, 0)) is False
    assert is_available(june_schedule, datetime(2025, 6, 2, 9, 0, tzinfo=timezone.utc)) is True
