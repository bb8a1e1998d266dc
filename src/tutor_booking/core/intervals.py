'''
Interval overlap on date + time-of-day spans.
'''
from ..models.scheduling import TimeSpan


def overlaps(a: TimeSpan, b: TimeSpan) -> bool:
    """
    True iff both spans fall on the same date and intersect.
    Half-open semantics: a span ending at 12:00 does not overlap one starting at 12:00.
    """
    if a.date != b.date:
        return False
    return a.start_time < b.end_time and b.start_time < a.end_time


def contains(outer_start, outer_end, inner: TimeSpan) -> bool:
    """Inclusive containment of a span's times inside a window."""
    return outer_start <= inner.start_time and inner.end_time <= outer_end
