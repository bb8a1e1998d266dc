'''
Tutor matching: eligibility, scoring and deterministic ranking.
'''
from collections.abc import Iterable

from ..models.scheduling import StudentProfile, TutorCandidate


def score(student: StudentProfile, candidate: TutorCandidate) -> TutorCandidate | None:
    """
    Returns a scored copy of the candidate, or None when the grade levels differ.
    A grade-matching candidate with no common topic scores 0.
    """
    if candidate.grade_level != student.grade_level:
        return None
    common_topics = student.topics & candidate.topics
    return candidate.model_copy(update={
        "common_topics": common_topics,
        "matching_score": len(common_topics)
    })


def rank(candidates: Iterable[TutorCandidate]) -> list[TutorCandidate]:
    """
    Score descending, then name ascending (case-sensitive).
    sorted() is stable, so duplicate names keep their input order.
    """
    return sorted(candidates, key=lambda c: (-c.matching_score, c.name))


def match_candidates(student: StudentProfile, pool: Iterable[TutorCandidate]) -> list[TutorCandidate]:
    """
    Scores the pool, drops ineligible and zero-overlap candidates and ranks the rest.
    """
    scored = (score(student, candidate) for candidate in pool)
    return rank(c for c in scored if c is not None and c.matching_score > 0)
