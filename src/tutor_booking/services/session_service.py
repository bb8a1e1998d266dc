'''
Session Service
'''
from datetime import date, datetime, time
from typing import Annotated, Optional

from fastapi import Depends

from ..common.exceptions import DataSourceError, SessionNotFoundError
from ..common.logger import log
from ..core import booking as booking_core
from ..core.diagnostics import Diagnostics
from ..database.data_source import SchedulingDataSource
from ..models import scheduling as scheduling_models
from .booking_service import BookingService


class SessionService:
    """
    Lifecycle of booked sessions: listing, booking (validate then persist),
    overdue lookup and deletion.
    """
    def __init__(
        self,
        data_source: Annotated[SchedulingDataSource, Depends(SchedulingDataSource)],
        booking_service: Annotated[BookingService, Depends(BookingService)]
    ):
        self.data_source = data_source
        self.booking_service = booking_service

    async def fetch_user_sessions(
        self,
        student_id: Optional[int] = None,
        tutor_id: Optional[int] = None,
        diagnostics: Optional[Diagnostics] = None
    ) -> list[scheduling_models.Session]:
        """
        Sessions of a student, of a tutor, or of either when both are given,
        ordered by date then start time.
        Students and tutors have separate ID spaces, so the caller names the role.
        """
        diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        if student_id is None and tutor_id is None:
            return []
        try:
            return await self.data_source.sessions_for(student_id=student_id, tutor_id=tutor_id)
        except DataSourceError as e:
            diagnostics.error("Error fetching sessions:", e)
            return []

    async def fetch_most_overdue_session(
        self,
        now: Optional[datetime] = None,
        diagnostics: Optional[Diagnostics] = None
    ) -> Optional[scheduling_models.Session]:
        diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        try:
            return await self.data_source.most_overdue_session(now or datetime.now())
        except DataSourceError as e:
            diagnostics.error("Error fetching most overdue session:", e)
            raise

    async def book_session(
        self,
        student_id: int,
        tutor_id: int,
        session_date: date,
        requested_start: time | str,
        requested_end: time | str,
        subject: str,
        diagnostics: Optional[Diagnostics] = None
    ) -> scheduling_models.BookingResult:
        """
        Persists the session only when the validator accepts it.
        Sending the confirmation is left to the caller.
        """
        diagnostics = diagnostics if diagnostics is not None else Diagnostics()

        verdict = await self.booking_service.validate_booking(
            student_id, tutor_id, session_date, requested_start, requested_end, diagnostics
        )
        if not verdict.available:
            log.info(f"Booking for student {student_id} with tutor {tutor_id} on {session_date} rejected: {verdict.conflict}")
            return scheduling_models.BookingResult(verdict=verdict)

        span = booking_core.requested_span(session_date, requested_start, requested_end)
        candidate = scheduling_models.Session(
            student_id=student_id,
            tutor_id=tutor_id,
            session_date=span.date,
            start_time=span.start_time,
            end_time=span.end_time,
            subject=subject
        )
        try:
            created = await self.data_source.persist_session(candidate)
        except DataSourceError as e:
            diagnostics.error("Error booking session:", e)
            return scheduling_models.BookingResult(verdict=verdict)

        diagnostics.info("Session booked successfully:", f"session {created.id}")
        return scheduling_models.BookingResult(verdict=verdict, session=created)

    async def delete_session(
        self,
        session_id: int,
        diagnostics: Optional[Diagnostics] = None
    ) -> None:
        """
        Raises SessionNotFoundError when the session does not exist and
        DataSourceError when the lookup or the delete fails.
        """
        diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        try:
            existing = await self.data_source.get_session(session_id)
            if existing is None:
                raise SessionNotFoundError("Session not found in database")
            if not await self.data_source.delete_session(session_id):
                raise SessionNotFoundError("Session not found in database")
        except (SessionNotFoundError, DataSourceError) as e:
            diagnostics.error("Error deleting session:", e)
            raise

        diagnostics.info("Session deleted from database", f"session {session_id}")
