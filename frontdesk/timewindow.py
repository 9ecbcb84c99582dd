"""
Hotel clock convention.

Guests check in from 09:00 and must leave by 08:00, so a room vacated in the
morning can be let again the same day. Every stored stay boundary goes
through :func:`normalize`; the result is a naive local datetime.
"""

from datetime import date, datetime, time, timedelta

from frontdesk.errors import ValidationError

CHECK_IN = 'check-in'
CHECK_OUT = 'check-out'

CHECK_IN_TIME = time(9, 0, 0, 0)
CHECK_OUT_TIME = time(8, 0, 0, 0)
END_OF_DAY = time(23, 59, 59, 999000)

_ROLE_TIMES = {
    CHECK_IN: CHECK_IN_TIME,
    CHECK_OUT: CHECK_OUT_TIME,
}


def now():
    return datetime.now()


def to_calendar_date(value):
    """Return the calendar date of ``value``, dropping any time of day.

    Accepts ``date``, ``datetime`` and ISO-8601 strings such as
    ``2024-06-01`` or ``2024-06-01T17:45:00.000Z``.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError('Invalid date')

    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1]
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        raise ValidationError(f'Invalid date: {value}') from None


def normalize(value, role):
    try:
        clock = _ROLE_TIMES[role]
    except KeyError:
        raise ValueError(f'unknown role {role!r}') from None
    return datetime.combine(to_calendar_date(value), clock)


def normalize_check_in(value):
    return normalize(value, CHECK_IN)


def normalize_check_out(value):
    return normalize(value, CHECK_OUT)


def occupied_window(day):
    """Window used for "who is in the hotel today": 08:00 until end of day."""
    day = to_calendar_date(day)
    return datetime.combine(day, CHECK_OUT_TIME), datetime.combine(day, END_OF_DAY)


def stats_window(day):
    """Window used for the occupancy counters: one hotel night from 09:00."""
    day = to_calendar_date(day)
    return (
        datetime.combine(day, CHECK_IN_TIME),
        datetime.combine(day + timedelta(days=1), CHECK_OUT_TIME),
    )
