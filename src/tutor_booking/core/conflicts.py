'''
Session conflict checking.

The checker does no identity filtering: callers decide whether the supplied
sessions are the tutor's, the student's or both.
'''
from collections.abc import Iterable

from ..models.scheduling import Session, TimeSpan
from .intervals import overlaps


def find_conflicts(existing: Iterable[Session], candidate: Session | TimeSpan) -> list[Session]:
    span = candidate.span if isinstance(candidate, Session) else candidate
    return [session for session in existing if overlaps(session.span, span)]


def has_conflict(existing: Iterable[Session], candidate: Session | TimeSpan) -> bool:
    span = candidate.span if isinstance(candidate, Session) else candidate
    return any(overlaps(session.span, span) for session in existing)
