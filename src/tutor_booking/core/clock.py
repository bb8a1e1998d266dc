'''
Time-of-day normalisation and weekday encoding.
'''
import re
from datetime import date, time

from ..common.exceptions import InvalidTimeError

# "10:00 AM", "1:05:30 pm"
_TWELVE_HOUR = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::(\d{2}))?\s*([AaPp][Mm])\s*$")
# "09:00", "17:00:00"
_TWENTY_FOUR_HOUR = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::(\d{2}))?\s*$")


def to_time_of_day(value: time | str) -> time:
    """
    Converts a clock value into a canonical 24-hour datetime.time.

    Accepts datetime.time, "HH:MM", "HH:MM:SS" and 12-hour "H:MM AM|PM".
    12 AM is midnight (00:00) and 12 PM is noon (12:00).
    Raises InvalidTimeError for anything else.
    """
    if isinstance(value, time):
        return value.replace(tzinfo=None, microsecond=0)
    if not isinstance(value, str):
        raise InvalidTimeError(f"Cannot convert {type(value).__name__} to a time of day.")

    match = _TWELVE_HOUR.match(value)
    if match:
        hours, minutes, seconds, meridiem = match.groups()
        hour = int(hours)
        if not 1 <= hour <= 12:
            raise InvalidTimeError(f"Invalid 12-hour clock value: '{value}'")
        hour = hour % 12
        if meridiem.upper() == "PM":
            hour += 12
        return _build(value, hour, int(minutes), int(seconds or 0))

    match = _TWENTY_FOUR_HOUR.match(value)
    if match:
        hours, minutes, seconds = match.groups()
        return _build(value, int(hours), int(minutes), int(seconds or 0))

    raise InvalidTimeError(f"Unrecognised time format: '{value}'")


def _build(raw: str, hour: int, minute: int, second: int) -> time:
    try:
        return time(hour, minute, second)
    except ValueError as e:
        raise InvalidTimeError(f"Invalid time '{raw}': {e}") from e


def format_time_of_day(value: time) -> str:
    """Canonical string form, e.g. 09:00:00."""
    return value.strftime("%H:%M:%S")


def weekday_of(day: date) -> int:
    """
    Weekday of a calendar date as 0=Sunday .. 6=Saturday.
    """
    return day.isoweekday() % 7
