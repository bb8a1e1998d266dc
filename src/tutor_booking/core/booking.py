'''
Booking validation: one accept/reject verdict from availability and conflicts.
'''
from collections.abc import Collection, Iterable
from datetime import date, time

from ..common.exceptions import InvalidTimeError
from ..models.scheduling import BookingVerdict, RecurringAvailability, Session, TimeSpan
from .availability import is_available
from .clock import format_time_of_day, to_time_of_day
from .conflicts import find_conflicts

TUTOR_UNAVAILABLE = "Tutor is not available during the requested time"
INVALID_TIME_RANGE = "Invalid time range"
UNABLE_TO_VERIFY = "Unable to verify availability"

ACCEPTED = BookingVerdict(available=True)


def requested_span(session_date: date, start: time | str, end: time | str) -> TimeSpan:
    """
    Normalises raw clock input into a TimeSpan.
    Raises InvalidTimeError when either end is malformed or end <= start.
    """
    start_time = to_time_of_day(start)
    end_time = to_time_of_day(end)
    if end_time <= start_time:
        raise InvalidTimeError(
            f"End time {format_time_of_day(end_time)} must be after start time {format_time_of_day(start_time)}."
        )
    return TimeSpan(date=session_date, start_time=start_time, end_time=end_time)


def rejected(reason: str) -> BookingVerdict:
    return BookingVerdict(available=False, conflict=reason)


def conflict_reason(conflicting: Session) -> str:
    return (
        "Requested time conflicts with an existing session "
        f"({format_time_of_day(conflicting.start_time)}-{format_time_of_day(conflicting.end_time)})"
    )


def check_availability(
    span: TimeSpan,
    windows: Iterable[RecurringAvailability],
    time_off_dates: Collection[date]
) -> BookingVerdict | None:
    """Returns a rejection when the tutor is not available, None otherwise."""
    if not is_available(windows, time_off_dates, span):
        return rejected(TUTOR_UNAVAILABLE)
    return None


def check_conflicts(span: TimeSpan, existing_sessions: Iterable[Session]) -> BookingVerdict | None:
    """Returns a rejection naming the first colliding session, None otherwise."""
    conflicts = find_conflicts(existing_sessions, span)
    if conflicts:
        return rejected(conflict_reason(conflicts[0]))
    return None


def validate_booking(
    session_date: date,
    start: time | str,
    end: time | str,
    windows: Iterable[RecurringAvailability],
    time_off_dates: Collection[date],
    existing_sessions: Iterable[Session]
) -> BookingVerdict:
    """
    Short-circuits in order: time normalisation, availability, conflicts.
    Never raises for an expected rejection.
    """
    try:
        span = requested_span(session_date, start, end)
    except InvalidTimeError:
        return rejected(INVALID_TIME_RANGE)

    unavailable = check_availability(span, windows, time_off_dates)
    if unavailable is not None:
        return unavailable

    conflicting = check_conflicts(span, existing_sessions)
    if conflicting is not None:
        return conflicting

    return ACCEPTED
