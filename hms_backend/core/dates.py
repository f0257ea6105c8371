from datetime import date, datetime, time


def full_years_between(start: date | datetime | None, end: date | None = None) -> int | None:
    """Whole calendar years from ``start`` to ``end`` (today by default)."""
    if start is None:
        return None

    if isinstance(start, datetime):
        start = start.date()
    end = end or date.today()

    years = end.year - start.year
    if (end.month, end.day) < (start.month, start.day):
        years -= 1
    return years


def coerce_instant(value) -> datetime | None:
    """Best-effort conversion of a stored timestamp to a ``datetime``.

    Accepts datetimes, dates (taken at midnight) and ISO-8601 strings. Anything
    else yields ``None`` so callers can drop it instead of failing.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    return None
