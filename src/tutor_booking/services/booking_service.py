'''
Booking Service
'''
from datetime import date, time
from typing import Annotated, Optional

from fastapi import Depends

from ..common.exceptions import DataSourceError, InvalidTimeError
from ..core import booking as booking_core
from ..core.diagnostics import Diagnostics
from ..database.data_source import SchedulingDataSource
from ..models import scheduling as scheduling_models
from .availability_service import AvailabilityService


class BookingService:
    """
    Fetch-then-decide orchestration around the pure booking validator.

    Reads happen in a fixed order (availability, then sessions) and stop as
    soon as a rejection is certain. Any read failure rejects the booking.
    """
    def __init__(
        self,
        data_source: Annotated[SchedulingDataSource, Depends(SchedulingDataSource)],
        availability_service: Annotated[AvailabilityService, Depends(AvailabilityService)]
    ):
        self.data_source = data_source
        self.availability_service = availability_service

    async def _sessions_in_scope(self, student_id: int, tutor_id: int) -> list[scheduling_models.Session]:
        """
        A new session collides with anything the tutor OR the student already has booked.
        Completed sessions are history and never conflict.
        """
        return await self.data_source.sessions_for(
            student_id=student_id,
            tutor_id=tutor_id,
            exclude_completed=True
        )

    async def validate_booking(
        self,
        student_id: int,
        tutor_id: int,
        session_date: date,
        requested_start: time | str,
        requested_end: time | str,
        diagnostics: Optional[Diagnostics] = None
    ) -> scheduling_models.BookingVerdict:
        diagnostics = diagnostics if diagnostics is not None else Diagnostics()

        # 1. Canonical 24h span
        try:
            span = booking_core.requested_span(session_date, requested_start, requested_end)
        except InvalidTimeError as e:
            diagnostics.warning("Rejected malformed booking request:", e)
            return booking_core.rejected(booking_core.INVALID_TIME_RANGE)

        # 2. Availability
        try:
            windows, time_off = await self.availability_service.load_snapshot(tutor_id)
        except DataSourceError as e:
            diagnostics.error("Error fetching tutor availability:", e)
            return booking_core.rejected(booking_core.UNABLE_TO_VERIFY)

        unavailable = booking_core.check_availability(span, windows, time_off)
        if unavailable is not None:
            return unavailable

        # 3. Conflicts
        try:
            existing = await self._sessions_in_scope(student_id, tutor_id)
        except DataSourceError as e:
            diagnostics.error("Error fetching sessions:", e)
            return booking_core.rejected(booking_core.UNABLE_TO_VERIFY)

        conflicting = booking_core.check_conflicts(span, existing)
        if conflicting is not None:
            return conflicting

        # 4. Accepted
        return booking_core.ACCEPTED
