'''
API endpoints for tutor availability and time off.
'''
from datetime import date
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ..common.exceptions import InvalidTimeError
from ..core import booking as booking_core
from ..core.diagnostics import Diagnostics
from ..models import scheduling as scheduling_models
from ..services.availability_service import AvailabilityService


class AvailabilityAPI:
    """
    A class to encapsulate the availability and time-off endpoints.
    """
    def __init__(self):
        self.router = APIRouter(tags=["Availability"])
        self._register_routes()

    def _register_routes(self):
        """Registers all the API routes for this class."""
        self.router.add_api_route(
                "/availability/{tutor_id}",
                self.get_availability,
                methods=["GET"],
                response_model=scheduling_models.DayAvailability)
        self.router.add_api_route(
                "/availability/{tutor_id}",
                self.update_availability,
                methods=["PUT"],
                response_model=scheduling_models.RecurringAvailability)
        self.router.add_api_route(
                "/availability/{tutor_id}/check",
                self.check_availability,
                methods=["GET"])
        self.router.add_api_route(
                "/time-off/{tutor_id}",
                self.list_time_off,
                methods=["GET"],
                response_model=list[date])
        self.router.add_api_route(
                "/time-off/{tutor_id}/validate",
                self.validate_time_off,
                methods=["GET"])
        self.router.add_api_route(
                "/time-off/{tutor_id}",
                self.add_time_off,
                methods=["POST"],
                status_code=status.HTTP_201_CREATED,
                response_model=scheduling_models.TimeOff)
        self.router.add_api_route(
                "/time-off/{tutor_id}",
                self.remove_time_off,
                methods=["DELETE"],
                status_code=status.HTTP_204_NO_CONTENT)

    async def get_availability(
        self,
        tutor_id: int,
        availability_service: Annotated[AvailabilityService, Depends(AvailabilityService)]
    ) -> Any:
        """
        Returns the tutor's recurring window. Empty days and null times mean none is configured.
        """
        result = await availability_service.fetch_day_availability(tutor_id, Diagnostics())
        if result is None:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Could not load tutor availability.")
        return result

    async def update_availability(
        self,
        tutor_id: int,
        update: scheduling_models.AvailabilityUpdate,
        availability_service: Annotated[AvailabilityService, Depends(AvailabilityService)]
    ) -> Any:
        """
        Replaces the tutor's recurring window (last write wins).
        """
        result = await availability_service.update_availability(
            tutor_id, update.days_of_week, update.start_time, update.end_time, Diagnostics()
        )
        if not result.success:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=result.error)
        return result.data

    async def check_availability(
        self,
        tutor_id: int,
        availability_service: Annotated[AvailabilityService, Depends(AvailabilityService)],
        session_date: Annotated[date, Query(description="Calendar date, YYYY-MM-DD")],
        start_time: Annotated[str, Query(description="e.g. '10:00 AM' or '10:00:00'")],
        end_time: Annotated[str, Query(description="e.g. '11:00 AM' or '11:00:00'")]
    ) -> dict:
        """
        Whether the requested span lies inside the tutor's window and off any time-off date.
        Existing sessions are not considered here; see POST /bookings/validate.
        """
        try:
            span = booking_core.requested_span(session_date, start_time, end_time)
        except InvalidTimeError as e:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
        available = await availability_service.is_available(tutor_id, span, Diagnostics())
        return {"available": available}

    async def list_time_off(
        self,
        tutor_id: int,
        availability_service: Annotated[AvailabilityService, Depends(AvailabilityService)]
    ) -> Any:
        return await availability_service.fetch_time_off(tutor_id, Diagnostics())

    async def validate_time_off(
        self,
        tutor_id: int,
        availability_service: Annotated[AvailabilityService, Depends(AvailabilityService)],
        day: Annotated[date, Query(alias="date")]
    ) -> dict:
        """
        True when no time off is booked yet for that date.
        """
        return {"valid": await availability_service.validate_time_off(tutor_id, day, Diagnostics())}

    async def add_time_off(
        self,
        tutor_id: int,
        availability_service: Annotated[AvailabilityService, Depends(AvailabilityService)],
        day: Annotated[date, Query(alias="date")]
    ) -> Any:
        diagnostics = Diagnostics()
        if not await availability_service.validate_time_off(tutor_id, day, diagnostics):
            if diagnostics.has_errors:
                raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Could not verify existing time off.")
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Time off already booked for this date.")
        created = await availability_service.add_time_off(tutor_id, day, diagnostics)
        if created is None:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Could not save time off.")
        return created

    async def remove_time_off(
        self,
        tutor_id: int,
        availability_service: Annotated[AvailabilityService, Depends(AvailabilityService)],
        day: Annotated[date, Query(alias="date")]
    ):
        removed = await availability_service.remove_time_off(tutor_id, day, Diagnostics())
        if not removed:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Time off not found.")
        return Response(status_code=status.HTTP_204_NO_CONTENT)

# Instantiate the class and export its router
availability_api = AvailabilityAPI()
router = availability_api.router
