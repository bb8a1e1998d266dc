'''
Pytest configuration for the booking engine.

This file sets up fixtures for:
1. A mocked SchedulingDataSource, so no database is needed.
2. Instances of every service class, pre-injected with that mock.
3. A FastAPI TestClient whose data source dependency is overridden by the mock.
'''

import pytest
from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient

from tutor_booking.main import app
from tutor_booking.core.diagnostics import Diagnostics
from tutor_booking.database.data_source import SchedulingDataSource
from tutor_booking.services.availability_service import AvailabilityService
from tutor_booking.services.booking_service import BookingService
from tutor_booking.services.matching_service import MatchingService
from tutor_booking.services.session_service import SessionService

from tests.database.factories import RecurringAvailabilityFactory


@pytest.fixture(scope="session")
def anyio_backend():
    """
    Pins the anyio plugin to asyncio for the whole run.
    """
    return "asyncio"


# --- 1. DATA SOURCE ---

@pytest.fixture(scope="function")
def mock_data_source() -> SchedulingDataSource:
    """
    Provides a mock SchedulingDataSource.
    Defaults describe a tutor free 09:00-17:00 on weekdays with nothing booked.
    """
    mock_source = MagicMock(spec=SchedulingDataSource)
    mock_source.availability = AsyncMock(return_value=[RecurringAvailabilityFactory()])
    mock_source.time_off = AsyncMock(return_value=set())
    mock_source.has_time_off = AsyncMock(return_value=False)
    mock_source.sessions_for = AsyncMock(return_value=[])
    mock_source.get_session = AsyncMock(return_value=None)
    mock_source.most_overdue_session = AsyncMock(return_value=None)
    mock_source.student_profile = AsyncMock(return_value=None)
    mock_source.tutor_candidates = AsyncMock(return_value=[])
    mock_source.persist_session = AsyncMock()
    mock_source.delete_session = AsyncMock(return_value=True)
    mock_source.replace_availability = AsyncMock()
    mock_source.persist_time_off = AsyncMock()
    mock_source.remove_time_off = AsyncMock(return_value=True)
    return mock_source


@pytest.fixture(scope="function")
def diagnostics() -> Diagnostics:
    return Diagnostics()


# --- 2. SERVICE FIXTURES ---

@pytest.fixture(scope="function")
def availability_service(mock_data_source: SchedulingDataSource) -> AvailabilityService:
    return AvailabilityService(data_source=mock_data_source)

@pytest.fixture(scope="function")
def booking_service(
    mock_data_source: SchedulingDataSource,
    availability_service: AvailabilityService
) -> BookingService:
    return BookingService(data_source=mock_data_source, availability_service=availability_service)

@pytest.fixture(scope="function")
def session_service(
    mock_data_source: SchedulingDataSource,
    booking_service: BookingService
) -> SessionService:
    return SessionService(data_source=mock_data_source, booking_service=booking_service)

@pytest.fixture(scope="function")
def matching_service(mock_data_source: SchedulingDataSource) -> MatchingService:
    return MatchingService(data_source=mock_data_source)


# --- 3. API CLIENT ---

@pytest.fixture(scope="function")
def client(mock_data_source: SchedulingDataSource) -> TestClient:
    """
    TestClient without the lifespan context, so no engine is created;
    every service receives the mocked data source instead.
    """
    app.dependency_overrides[SchedulingDataSource] = lambda: mock_data_source
    test_client = TestClient(app)
    yield test_client
    app.dependency_overrides.clear()
