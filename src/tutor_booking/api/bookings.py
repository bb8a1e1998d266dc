'''
API endpoints for validating and booking sessions, and managing booked sessions.
'''
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, Response, status

from ..core.diagnostics import Diagnostics
from ..models import scheduling as scheduling_models
from ..services.booking_service import BookingService
from ..services.session_service import SessionService


class BookingsAPI:
    """
    A class to encapsulate the booking and session endpoints.
    """
    def __init__(self):
        self.router = APIRouter(tags=["Bookings"])
        self._register_routes()

    def _register_routes(self):
        """Registers all the API routes for this class."""
        self.router.add_api_route(
                "/bookings/validate",
                self.validate_booking,
                methods=["POST"],
                response_model=scheduling_models.BookingVerdict,
                response_model_exclude_none=True)
        self.router.add_api_route(
                "/bookings",
                self.book_session,
                methods=["POST"],
                response_model=scheduling_models.BookingResult)
        self.router.add_api_route(
                "/sessions",
                self.list_sessions,
                methods=["GET"],
                response_model=list[scheduling_models.Session])
        self.router.add_api_route(
                "/sessions/overdue",
                self.get_most_overdue_session,
                methods=["GET"],
                response_model=scheduling_models.Session | None)
        self.router.add_api_route(
                "/sessions/{session_id}",
                self.delete_session,
                methods=["DELETE"],
                status_code=status.HTTP_204_NO_CONTENT)

    async def validate_booking(
        self,
        request: scheduling_models.BookingRequest,
        booking_service: Annotated[BookingService, Depends(BookingService)]
    ) -> Any:
        """
        Returns {available: true} or {available: false, conflict: <reason>}.
        Nothing is written.
        """
        return await booking_service.validate_booking(
            request.student_id,
            request.tutor_id,
            request.session_date,
            request.start_time,
            request.end_time,
            Diagnostics()
        )

    async def book_session(
        self,
        request: scheduling_models.SessionCreate,
        session_service: Annotated[SessionService, Depends(SessionService)],
        response: Response
    ) -> Any:
        """
        Validates then persists. 201 with the created session, 409 with the
        verdict when rejected, 503 when the accepted session could not be saved.
        """
        result = await session_service.book_session(
            request.student_id,
            request.tutor_id,
            request.session_date,
            request.start_time,
            request.end_time,
            request.subject,
            Diagnostics()
        )
        if not result.verdict.available:
            response.status_code = status.HTTP_409_CONFLICT
        elif result.session is None:
            response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        else:
            response.status_code = status.HTTP_201_CREATED
        return result

    async def list_sessions(
        self,
        session_service: Annotated[SessionService, Depends(SessionService)],
        student_id: Annotated[int | None, Query(description="Sessions this student attends")] = None,
        tutor_id: Annotated[int | None, Query(description="Sessions this tutor teaches")] = None
    ) -> Any:
        """
        Empty list when neither student_id nor tutor_id is given.
        """
        return await session_service.fetch_user_sessions(student_id, tutor_id, Diagnostics())

    async def get_most_overdue_session(
        self,
        session_service: Annotated[SessionService, Depends(SessionService)]
    ) -> Any:
        """
        The oldest finished session not yet marked completed, or null.
        Data source failures become 503 in the app-level handler.
        """
        return await session_service.fetch_most_overdue_session(diagnostics=Diagnostics())

    async def delete_session(
        self,
        session_id: int,
        session_service: Annotated[SessionService, Depends(SessionService)]
    ):
        # SessionNotFoundError -> 404 and DataSourceError -> 503 via the app handlers
        await session_service.delete_session(session_id, Diagnostics())
        return Response(status_code=status.HTTP_204_NO_CONTENT)

# Instantiate the class and export its router
bookings_api = BookingsAPI()
router = bookings_api.router
