"""Appointment status classification and dashboard filters."""

import logging
import re
from collections.abc import Iterable
from datetime import datetime
from enum import Enum
from typing import NamedTuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from hms_backend.core.dates import coerce_instant

logger = logging.getLogger(__name__)

_STATUS_KEY_PATTERN = re.compile(r'[^a-z]')


class AppointmentStatus(str, Enum):
    SCHEDULED = 'scheduled'
    IN_PROGRESS = 'in_progress'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'
    NO_SHOW = 'no_show'
    RESCHEDULED = 'rescheduled'
    NONE = 'none'

    @classmethod
    def _missing_(cls, value):
        if not isinstance(value, str):
            return cls.NONE

        key = _STATUS_KEY_PATTERN.sub('', value.lower())
        status = _STATUS_ALIASES.get(key)
        if status is None:
            logger.debug('Unrecognized appointment status %r, treating as none', value)
            return cls.NONE
        return cls(status)

    @classmethod
    def parse(cls, raw) -> 'AppointmentStatus':
        if raw is None:
            return cls.NONE
        return cls(raw)


_STATUS_ALIASES = {
    'scheduled': 'scheduled',
    'inprogress': 'in_progress',
    'completed': 'completed',
    'cancelled': 'cancelled',
    'canceled': 'cancelled',
    'noshow': 'no_show',
    'rescheduled': 'rescheduled',
    'none': 'none',
    '': 'none',
}


class StatusColor(str, Enum):
    BLUE = 'blue'
    GREEN = 'green'
    GRAY = 'gray'
    RED = 'red'
    ORANGE = 'orange'


class StatusDisplay(NamedTuple):
    label: str
    color: StatusColor


STATUS_DISPLAY = {
    AppointmentStatus.SCHEDULED: StatusDisplay('Scheduled', StatusColor.BLUE),
    AppointmentStatus.IN_PROGRESS: StatusDisplay('In Progress', StatusColor.GREEN),
    AppointmentStatus.COMPLETED: StatusDisplay('Completed', StatusColor.GRAY),
    AppointmentStatus.CANCELLED: StatusDisplay('Cancelled', StatusColor.RED),
    AppointmentStatus.NO_SHOW: StatusDisplay('Waiting', StatusColor.ORANGE),
    AppointmentStatus.RESCHEDULED: StatusDisplay('Rescheduled', StatusColor.BLUE),
    AppointmentStatus.NONE: StatusDisplay('None', StatusColor.GRAY),
}


def classify(status: AppointmentStatus | str | None) -> StatusDisplay:
    return STATUS_DISPLAY[AppointmentStatus.parse(status)]


class AppointmentFilter(str, Enum):
    ALL = 'all'
    UPCOMING = 'upcoming'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'
    WAITING = 'waiting'

    @property
    def label(self) -> str:
        return _FILTER_TITLES[self]

    @property
    def statuses(self) -> frozenset[AppointmentStatus] | None:
        """Statuses admitted by this filter, or ``None`` for everything."""
        return _FILTER_STATUSES[self]


_FILTER_TITLES = {
    AppointmentFilter.ALL: 'All',
    AppointmentFilter.UPCOMING: 'Upcoming',
    AppointmentFilter.COMPLETED: 'Completed',
    AppointmentFilter.CANCELLED: 'Cancelled',
    AppointmentFilter.WAITING: 'Waitlist',
}

_FILTER_STATUSES = {
    AppointmentFilter.ALL: None,
    AppointmentFilter.UPCOMING: frozenset(
        {AppointmentStatus.SCHEDULED, AppointmentStatus.RESCHEDULED, AppointmentStatus.IN_PROGRESS}
    ),
    AppointmentFilter.COMPLETED: frozenset({AppointmentStatus.COMPLETED}),
    AppointmentFilter.CANCELLED: frozenset({AppointmentStatus.CANCELLED}),
    # no-show doubles as the waitlist bucket
    AppointmentFilter.WAITING: frozenset({AppointmentStatus.NO_SHOW}),
}

CURRENT_STATUSES = frozenset(
    {
        AppointmentStatus.SCHEDULED,
        AppointmentStatus.IN_PROGRESS,
        AppointmentStatus.RESCHEDULED,
        AppointmentStatus.NO_SHOW,
    }
)


class AppointmentRecord(BaseModel):
    """Read-only snapshot of a stored appointment."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int | str
    doctor_name: str = Field(default='', validation_alias=AliasChoices('doctor_name', 'doctorName', 'name'))
    patient_id: int | str | None = Field(default=None, validation_alias=AliasChoices('patient_id', 'patientId'))
    doctor_id: int | str | None = Field(default=None, validation_alias=AliasChoices('doctor_id', 'doctorId'))
    appointment_date_time: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices('appointment_date_time', 'appointmentDateTime'),
    )
    duration_minutes: int | None = Field(
        default=None,
        validation_alias=AliasChoices('duration_minutes', 'durationMinutes'),
    )
    notes: str | None = None
    status: AppointmentStatus = AppointmentStatus.NONE

    @field_validator('doctor_name', mode='before')
    @classmethod
    def default_doctor_name(cls, value):
        return value if isinstance(value, str) else ''

    @field_validator('appointment_date_time', mode='before')
    @classmethod
    def coerce_date_time(cls, value):
        return coerce_instant(value)

    @field_validator('duration_minutes', mode='before')
    @classmethod
    def coerce_duration(cls, value):
        if isinstance(value, bool):
            return None
        try:
            return int(value) if value is not None else None
        except (TypeError, ValueError):
            return None

    @field_validator('notes', mode='before')
    @classmethod
    def coerce_notes(cls, value):
        return value if isinstance(value, str) else None

    @field_validator('status', mode='before')
    @classmethod
    def parse_status(cls, value):
        return AppointmentStatus.parse(value)

    @property
    def display(self) -> StatusDisplay:
        return classify(self.status)


def filter_appointments(
    appointments: Iterable[AppointmentRecord],
    criterion: AppointmentFilter | str = AppointmentFilter.ALL,
) -> list[AppointmentRecord]:
    """Return the appointments in ``criterion``'s bucket, keeping input order."""
    statuses = AppointmentFilter(criterion).statuses
    if statuses is None:
        return list(appointments)
    return [appointment for appointment in appointments if appointment.status in statuses]


def current_appointments(
    appointments: Iterable[AppointmentRecord],
    limit: int | None = None,
) -> list[AppointmentRecord]:
    current = [appointment for appointment in appointments if appointment.status in CURRENT_STATUSES]
    if limit is not None:
        return current[:limit]
    return current
