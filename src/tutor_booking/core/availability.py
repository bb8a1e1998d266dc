'''
Recurring-availability evaluation with time-off override.
'''
from collections.abc import Collection, Iterable
from datetime import date

from ..models.scheduling import DayAvailability, RecurringAvailability, TimeSpan
from .clock import weekday_of
from .intervals import contains


def windows_for_day(windows: Iterable[RecurringAvailability], day: date) -> list[RecurringAvailability]:
    weekday = weekday_of(day)
    return [window for window in windows if weekday in window.days_of_week]


def is_available(
    windows: Iterable[RecurringAvailability],
    time_off_dates: Collection[date],
    span: TimeSpan
) -> bool:
    """
    A span is bookable when some window recurring on its weekday fully contains
    it (inclusive boundaries) and the date is not a time-off date.
    Time off always wins.
    """
    matching = windows_for_day(windows, span.date)
    if not matching:
        return False
    contained = any(contains(w.start_time, w.end_time, span) for w in matching)
    return contained and span.date not in time_off_dates


def to_day_availability(windows: list[RecurringAvailability]) -> DayAvailability:
    """
    Collapses the stored windows into the single active one (the last written).
    No windows yields the empty sentinel.
    """
    if not windows:
        return DayAvailability()
    active = windows[-1]
    return DayAvailability(
        days_of_week=sorted(active.days_of_week),
        start_time=active.start_time,
        end_time=active.end_time
    )
