"""Doctor availability against recorded leave.

A schedule carries two independent kinds of leave: full days, matched on the
calendar date alone, and single leave slots, matched to the minute. Both the
queried instant and the leave entries are read in the hospital's local
calendar. Naive datetimes are assumed to already be local; aware ones are
converted first.

A doctor without any schedule is bookable at every instant. A schedule whose
lists are empty (or missing) is bookable too, but is kept distinct from "no
schedule" so that stored documents round-trip unchanged.
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import date, datetime, timezone, tzinfo
from zoneinfo import ZoneInfoNotFoundError

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from hms_backend.core import config
from hms_backend.core.dates import coerce_instant

logger = logging.getLogger(__name__)


class ScheduleRecord(BaseModel):
    """Immutable snapshot of a doctor's leave."""

    model_config = ConfigDict(frozen=True)

    leave_time_slots: tuple[datetime, ...] | None = Field(
        default=None,
        validation_alias=AliasChoices('leave_time_slots', 'leaveTimeSlots'),
    )
    full_day_leaves: tuple[datetime, ...] | None = Field(
        default=None,
        validation_alias=AliasChoices('full_day_leaves', 'fullDayLeaves'),
    )

    @field_validator('leave_time_slots', 'full_day_leaves', mode='before')
    @classmethod
    def coerce_entries(cls, value):
        if value is None:
            return None
        if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
            logger.debug('Ignoring malformed leave list: %r', value)
            return None

        instants = []
        for item in value:
            instant = coerce_instant(item)
            if instant is None:
                logger.debug('Dropping unreadable leave entry: %r', item)
                continue
            instants.append(instant)
        return tuple(instants)


def _to_local(instant: datetime, tz: tzinfo) -> datetime:
    if instant.tzinfo is None:
        return instant
    return instant.astimezone(tz)


def _minute_key(instant: datetime) -> tuple[int, int, int, int, int]:
    return (instant.year, instant.month, instant.day, instant.hour, instant.minute)


def _resolve_timezone(tz: tzinfo | None) -> tzinfo:
    if tz is not None:
        return tz
    try:
        return config.get_hospital_timezone()
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning('Unusable HOSPITAL_TIMEZONE %r, comparing in UTC', config.HOSPITAL_TIMEZONE)
        return timezone.utc


def is_on_full_day_leave(schedule: ScheduleRecord | None, day: date, tz: tzinfo | None = None) -> bool:
    if schedule is None or not schedule.full_day_leaves:
        return False

    tz = _resolve_timezone(tz)
    if isinstance(day, datetime):
        day = _to_local(day, tz).date()

    return any(_to_local(leave, tz).date() == day for leave in schedule.full_day_leaves)


def is_available(schedule: ScheduleRecord | None, instant: datetime, tz: tzinfo | None = None) -> bool:
    """Return whether a doctor can be booked at ``instant``.

    Full-day leave wins over everything else. Leave slots compare year,
    month, day, hour and minute; seconds are ignored.
    """
    if schedule is None:
        return True

    tz = _resolve_timezone(tz)
    local_instant = _to_local(instant, tz)

    if is_on_full_day_leave(schedule, local_instant.date(), tz):
        return False

    wanted = _minute_key(local_instant)
    for slot in schedule.leave_time_slots or ():
        if _minute_key(_to_local(slot, tz)) == wanted:
            return False

    return True


def schedule_from_document(document: Mapping | None) -> ScheduleRecord | None:
    if document is None:
        return None
    if not isinstance(document, Mapping):
        logger.debug('Ignoring malformed schedule document: %r', document)
        return None
    return ScheduleRecord.model_validate(document)


def schedule_to_document(schedule: ScheduleRecord | None) -> dict | None:
    if schedule is None:
        return None

    def dump(instants: tuple[datetime, ...] | None) -> list[str] | None:
        if instants is None:
            return None
        return [instant.isoformat() for instant in instants]

    return {
        'leaveTimeSlots': dump(schedule.leave_time_slots),
        'fullDayLeaves': dump(schedule.full_day_leaves),
    }
