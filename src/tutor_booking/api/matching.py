'''
API endpoint for ranking tutors against a student.
'''
from typing import Annotated, Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..core.diagnostics import DiagnosticRecord, Diagnostics
from ..models import scheduling as scheduling_models
from ..services.matching_service import MatchingService


class MatchingResponse(BaseModel):
    """
    tutors is empty both when nothing matched and when a lookup failed;
    diagnostics tells the two apart.
    """
    tutors: list[scheduling_models.TutorCandidate] = Field(default_factory=list)
    diagnostics: list[DiagnosticRecord] = Field(default_factory=list)


class MatchingAPI:
    """
    A class to encapsulate the tutor matching endpoint.
    """
    def __init__(self):
        self.router = APIRouter(
            prefix="/matching",
            tags=["Matching"]
        )
        self._register_routes()

    def _register_routes(self):
        """Registers all the API routes for this class."""
        self.router.add_api_route(
            "/{student_id}",
            self.find_matching_tutors,
            methods=["GET"],
            response_model=MatchingResponse)

    async def find_matching_tutors(
        self,
        student_id: int,
        matching_service: Annotated[MatchingService, Depends(MatchingService)]
    ) -> Any:
        """
        Tutors on the student's grade level sharing at least one topic,
        best match first, ties by name.
        """
        diagnostics = Diagnostics()
        tutors = await matching_service.find_matching_tutors(student_id, diagnostics)
        return MatchingResponse(tutors=tutors, diagnostics=diagnostics.records)

# Instantiate the class and export its router
matching_api = MatchingAPI()
router = matching_api.router
