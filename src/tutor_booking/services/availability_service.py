'''
Availability Service
'''
from datetime import date, time
from typing import Annotated, Optional

from fastapi import Depends

from ..common.exceptions import DataSourceError
from ..common.logger import log
from ..core import availability as availability_core
from ..core.diagnostics import Diagnostics
from ..database.data_source import SchedulingDataSource
from ..models import scheduling as scheduling_models


class AvailabilityService:
    """
    Reads and maintains a tutor's recurring window and time off, and answers
    "is this span bookable?" on top of the pure evaluator.
    Read failures fail closed: they never produce an "available" answer.
    """
    def __init__(self, data_source: Annotated[SchedulingDataSource, Depends(SchedulingDataSource)]):
        self.data_source = data_source

    async def load_snapshot(self, tutor_id: int) -> tuple[list[scheduling_models.RecurringAvailability], set[date]]:
        """
        Fetches windows then time off. Raises DataSourceError.
        """
        windows = await self.data_source.availability(tutor_id)
        time_off = await self.data_source.time_off(tutor_id)
        return windows, time_off

    async def is_available(
        self,
        tutor_id: int,
        span: scheduling_models.TimeSpan,
        diagnostics: Optional[Diagnostics] = None
    ) -> bool:
        diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        try:
            windows, time_off = await self.load_snapshot(tutor_id)
        except DataSourceError as e:
            diagnostics.error("Error fetching tutor availability:", e)
            return False
        return availability_core.is_available(windows, time_off, span)

    async def fetch_day_availability(
        self,
        tutor_id: int,
        diagnostics: Optional[Diagnostics] = None
    ) -> Optional[scheduling_models.DayAvailability]:
        """
        The tutor's active window, or the empty sentinel when none is configured.
        None means the lookup itself failed.
        """
        diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        try:
            windows = await self.data_source.availability(tutor_id)
        except DataSourceError as e:
            diagnostics.error("Error fetching tutor availability:", e)
            return None
        return availability_core.to_day_availability(windows)

    async def update_availability(
        self,
        tutor_id: int,
        days_of_week: list[int],
        start_time: time,
        end_time: time,
        diagnostics: Optional[Diagnostics] = None
    ) -> scheduling_models.OperationResult:
        diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        try:
            update = scheduling_models.AvailabilityUpdate(
                days_of_week=days_of_week,
                start_time=start_time,
                end_time=end_time
            )
        except ValueError as e:
            diagnostics.error("Invalid tutor availability:", e)
            return scheduling_models.OperationResult(success=False, error=str(e))

        try:
            window = await self.data_source.replace_availability(
                tutor_id, update.days_of_week, update.start_time, update.end_time
            )
        except DataSourceError as e:
            diagnostics.error("Error updating tutor availability:", e)
            return scheduling_models.OperationResult(success=False, error=str(e))

        log.info(f"Tutor {tutor_id} availability set to days {sorted(window.days_of_week)} {window.start_time}-{window.end_time}.")
        return scheduling_models.OperationResult(success=True, data=window)

    async def add_time_off(
        self,
        tutor_id: int,
        day: date,
        diagnostics: Optional[Diagnostics] = None
    ) -> Optional[scheduling_models.TimeOff]:
        diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        try:
            return await self.data_source.persist_time_off(tutor_id, day)
        except DataSourceError as e:
            diagnostics.error("Error adding time-off:", e)
            return None

    async def fetch_time_off(
        self,
        tutor_id: int,
        diagnostics: Optional[Diagnostics] = None
    ) -> list[date]:
        diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        try:
            return sorted(await self.data_source.time_off(tutor_id))
        except DataSourceError as e:
            diagnostics.error("Error fetching time-off:", e)
            return []

    async def validate_time_off(
        self,
        tutor_id: int,
        day: date,
        diagnostics: Optional[Diagnostics] = None
    ) -> bool:
        """
        True iff the tutor has no time off booked on that date yet.
        Pre-check for new time-off requests; a failed lookup answers False.
        """
        diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        try:
            return not await self.data_source.has_time_off(tutor_id, day)
        except DataSourceError as e:
            diagnostics.error("Error validating time-off:", e)
            return False

    async def remove_time_off(
        self,
        tutor_id: int,
        day: date,
        diagnostics: Optional[Diagnostics] = None
    ) -> bool:
        """
        Reports and re-raises storage failures. Returns False when nothing was removed.
        """
        diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        try:
            return await self.data_source.remove_time_off(tutor_id, day)
        except DataSourceError as e:
            diagnostics.error("Error removing time-off:", e)
            raise
