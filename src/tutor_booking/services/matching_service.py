'''
Matching Service
'''
from typing import Annotated, Optional

from fastapi import Depends

from ..common.exceptions import DataSourceError, StudentNotFoundError
from ..core import matching as matching_core
from ..core.diagnostics import Diagnostics
from ..database.data_source import SchedulingDataSource
from ..models import scheduling as scheduling_models


class MatchingService:
    """
    Ranks tutors for a student: profile first, then the grade-level candidate
    pool, then the pure matcher.

    Failures collapse to an empty list. Whether the list is empty because
    nothing matched or because a lookup failed is visible only in the
    diagnostics passed in.
    """
    def __init__(self, data_source: Annotated[SchedulingDataSource, Depends(SchedulingDataSource)]):
        self.data_source = data_source

    async def find_matching_tutors(
        self,
        student_id: int,
        diagnostics: Optional[Diagnostics] = None
    ) -> list[scheduling_models.TutorCandidate]:
        diagnostics = diagnostics if diagnostics is not None else Diagnostics()

        # 1. Student profile
        try:
            student = await self.data_source.student_profile(student_id)
            if student is None:
                raise StudentNotFoundError(f"Student {student_id} not found.")
        except (DataSourceError, StudentNotFoundError) as e:
            diagnostics.error("Error fetching student topics:", e)
            return []

        # 2. Candidate pool, pre-filtered on grade level by the data source
        try:
            pool = await self.data_source.tutor_candidates(student.grade_level)
        except DataSourceError as e:
            diagnostics.error("Error fetching tutors:", e)
            return []

        # 3. Score, drop non-matches, rank
        matches = matching_core.match_candidates(student, pool)
        if not matches:
            diagnostics.warning("No tutors found with matching topics and grade level.")
        return matches
