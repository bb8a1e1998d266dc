'''
Tests for SchedulingDataSource against a mocked AsyncSession.
Checks ORM-to-model mapping and that storage errors surface as DataSourceError.
'''
import pytest
from datetime import datetime, time
from unittest.mock import AsyncMock, MagicMock

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tutor_booking.common.exceptions import DataSourceError
from tutor_booking.database import models as db_models
from tutor_booking.database.data_source import SchedulingDataSource
from tests.database.factories import SessionFactory
from tests.constants import MONDAY, SATURDAY, TEST_SESSION_ID, TEST_STUDENT_ID, TEST_TUTOR_ID


def scalar_result(rows: list) -> MagicMock:
    result = MagicMock()
    result.all.return_value = rows
    result.first.return_value = rows[0] if rows else None
    return result


@pytest.fixture
def mock_db() -> AsyncSession:
    db = MagicMock(spec=AsyncSession)
    db.scalars = AsyncMock(return_value=scalar_result([]))
    db.scalar = AsyncMock(return_value=None)
    db.get = AsyncMock(return_value=None)
    db.execute = AsyncMock()
    db.flush = AsyncMock()
    db.refresh = AsyncMock()
    return db


@pytest.fixture
def data_source(mock_db: AsyncSession) -> SchedulingDataSource:
    return SchedulingDataSource(db=mock_db)


def session_row(**overrides) -> db_models.Sessions:
    values = dict(
        id=TEST_SESSION_ID,
        student_id=TEST_STUDENT_ID,
        tutor_id=TEST_TUTOR_ID,
        session_date=MONDAY,
        start_time=time(10, 0),
        end_time=time(11, 0),
        subject="Math",
        completed=False
    )
    values.update(overrides)
    return db_models.Sessions(**values)


@pytest.mark.anyio
class TestDataSourceReads:

    async def test_availability_maps_rows(self, data_source, mock_db):
        mock_db.scalars.return_value = scalar_result([
            db_models.TutorAvailability(
                tutor_id=TEST_TUTOR_ID, day_of_week=[1, 3], start_time=time(9, 0), end_time=time(12, 0)
            )
        ])

        windows = await data_source.availability(TEST_TUTOR_ID)

        assert len(windows) == 1
        assert windows[0].days_of_week == {1, 3}
        assert windows[0].start_time == time(9, 0)

    async def test_time_off_is_a_set(self, data_source, mock_db):
        mock_db.scalars.return_value = scalar_result([MONDAY, SATURDAY])
        assert await data_source.time_off(TEST_TUTOR_ID) == {MONDAY, SATURDAY}

    async def test_has_time_off(self, data_source, mock_db):
        assert await data_source.has_time_off(TEST_TUTOR_ID, MONDAY) is False
        mock_db.scalar.return_value = 1
        assert await data_source.has_time_off(TEST_TUTOR_ID, MONDAY) is True

    async def test_sessions_for_requires_a_participant(self, data_source, mock_db):
        with pytest.raises(ValueError):
            await data_source.sessions_for()
        mock_db.scalars.assert_not_awaited()

    async def test_sessions_for_maps_rows(self, data_source, mock_db):
        mock_db.scalars.return_value = scalar_result([session_row()])

        sessions = await data_source.sessions_for(tutor_id=TEST_TUTOR_ID, exclude_completed=True)

        assert [s.id for s in sessions] == [TEST_SESSION_ID]
        assert sessions[0].span.date == MONDAY

    async def test_get_session_missing(self, data_source):
        assert await data_source.get_session(TEST_SESSION_ID) is None

    async def test_student_profile(self, data_source, mock_db):
        mock_db.get.return_value = db_models.Students(
            id=TEST_STUDENT_ID, name="Sam", grade_level="10", topics=["Math", "Science"]
        )
        profile = await data_source.student_profile(TEST_STUDENT_ID)
        assert profile.student_id == TEST_STUDENT_ID
        assert profile.topics == {"Math", "Science"}
        assert profile.grade_level == "10"

    async def test_tutor_candidates_start_unscored(self, data_source, mock_db):
        mock_db.scalars.return_value = scalar_result([
            db_models.Tutors(id=TEST_TUTOR_ID, name="Alice", grade_level="10", topics=["Math"])
        ])
        candidates = await data_source.tutor_candidates("10")
        assert candidates[0].name == "Alice"
        assert candidates[0].matching_score == 0
        assert candidates[0].common_topics == set()

    async def test_most_overdue(self, data_source, mock_db):
        mock_db.scalars.return_value = scalar_result([session_row()])
        overdue = await data_source.most_overdue_session(datetime(2024, 12, 9, 12, 0))
        assert overdue.id == TEST_SESSION_ID


@pytest.mark.anyio
class TestDataSourceWrites:

    async def test_persist_session(self, data_source, mock_db):
        def assign_id(row):
            row.id = TEST_SESSION_ID
        mock_db.refresh.side_effect = assign_id

        created = await data_source.persist_session(SessionFactory(id=None))

        assert created.id == TEST_SESSION_ID
        mock_db.add.assert_called_once()
        mock_db.flush.assert_awaited_once()

    async def test_delete_session_rowcount(self, data_source, mock_db):
        mock_db.execute.return_value = MagicMock(rowcount=1)
        assert await data_source.delete_session(TEST_SESSION_ID) is True
        mock_db.execute.return_value = MagicMock(rowcount=0)
        assert await data_source.delete_session(TEST_SESSION_ID) is False

    async def test_replace_availability(self, data_source, mock_db):
        window = await data_source.replace_availability(TEST_TUTOR_ID, [5, 1, 1], time(9, 0), time(10, 0))
        assert window.days_of_week == {1, 5}
        assert mock_db.execute.await_count == 1
        mock_db.add.assert_called_once()

    async def test_remove_time_off(self, data_source, mock_db):
        mock_db.execute.return_value = MagicMock(rowcount=0)
        assert await data_source.remove_time_off(TEST_TUTOR_ID, MONDAY) is False


@pytest.mark.anyio
class TestDataSourceErrors:

    @pytest.mark.parametrize("error", [
        SQLAlchemyError("boom"),
        OperationalError("SELECT 1", {}, Exception("connection refused")),
    ])
    async def test_read_errors_are_wrapped(self, data_source, mock_db, error):
        mock_db.scalars.side_effect = error
        with pytest.raises(DataSourceError):
            await data_source.availability(TEST_TUTOR_ID)

    async def test_write_errors_are_wrapped(self, data_source, mock_db):
        mock_db.flush.side_effect = SQLAlchemyError("unique violation")
        with pytest.raises(DataSourceError, match="unique violation"):
            await data_source.persist_time_off(TEST_TUTOR_ID, MONDAY)

    async def test_non_storage_errors_propagate_unchanged(self, data_source, mock_db):
        mock_db.get.side_effect = KeyError("unexpected")
        with pytest.raises(KeyError):
            await data_source.get_session(TEST_SESSION_ID)
