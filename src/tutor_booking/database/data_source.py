'''
Scheduling data source.

The narrow read/write contract the booking and matching services depend on,
implemented over the async SQLAlchemy session. Every storage failure surfaces
as DataSourceError so callers can fail closed without knowing about SQLAlchemy.
'''
from contextlib import asynccontextmanager
from datetime import date, datetime, time
from typing import Annotated, Optional

from fastapi import Depends
from sqlalchemy import and_, delete, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..common.exceptions import DataSourceError
from ..common.logger import log
from ..models import scheduling as scheduling_models
from . import models as db_models
from .engine import get_db_session


class SchedulingDataSource:
    """
    Reads and writes tutors' availability, time off, sessions and matching profiles.
    """
    def __init__(self, db: Annotated[AsyncSession, Depends(get_db_session)]):
        self.db = db

    @asynccontextmanager
    async def _guard(self, operation: str):
        try:
            yield
        except SQLAlchemyError as e:
            log.error(f"Data source failure during {operation}: {e}")
            raise DataSourceError(str(e)) from e

    # --- Reads ---

    async def availability(self, tutor_id: int) -> list[scheduling_models.RecurringAvailability]:
        """All stored windows for a tutor, oldest first. Possibly empty."""
        async with self._guard("availability"):
            stmt = select(db_models.TutorAvailability).filter(
                db_models.TutorAvailability.tutor_id == tutor_id
            ).order_by(db_models.TutorAvailability.id)
            rows = (await self.db.scalars(stmt)).all()

        return [
            scheduling_models.RecurringAvailability(
                tutor_id=row.tutor_id,
                days_of_week=set(row.day_of_week or []),
                start_time=row.start_time,
                end_time=row.end_time
            )
            for row in rows
        ]

    async def time_off(self, tutor_id: int) -> set[date]:
        async with self._guard("time_off"):
            stmt = select(db_models.TimeOff.date).filter(db_models.TimeOff.tutor_id == tutor_id)
            return set((await self.db.scalars(stmt)).all())

    async def has_time_off(self, tutor_id: int, day: date) -> bool:
        async with self._guard("has_time_off"):
            stmt = select(db_models.TimeOff.id).filter(
                db_models.TimeOff.tutor_id == tutor_id,
                db_models.TimeOff.date == day
            ).limit(1)
            return (await self.db.scalar(stmt)) is not None

    async def sessions_for(
        self,
        student_id: Optional[int] = None,
        tutor_id: Optional[int] = None,
        exclude_completed: bool = False
    ) -> list[scheduling_models.Session]:
        """
        Sessions where the student OR the tutor participates, ordered by date then start.
        At least one of student_id / tutor_id is required.
        """
        if student_id is None and tutor_id is None:
            raise ValueError("sessions_for needs a student_id or a tutor_id.")

        participants = []
        if student_id is not None:
            participants.append(db_models.Sessions.student_id == student_id)
        if tutor_id is not None:
            participants.append(db_models.Sessions.tutor_id == tutor_id)

        stmt = select(db_models.Sessions).filter(or_(*participants))
        if exclude_completed:
            stmt = stmt.filter(db_models.Sessions.completed.is_(False))
        stmt = stmt.order_by(db_models.Sessions.session_date, db_models.Sessions.start_time)

        async with self._guard("sessions_for"):
            rows = (await self.db.scalars(stmt)).all()
        return [scheduling_models.Session.model_validate(row) for row in rows]

    async def get_session(self, session_id: int) -> Optional[scheduling_models.Session]:
        async with self._guard("get_session"):
            row = await self.db.get(db_models.Sessions, session_id)
        if row is None:
            return None
        return scheduling_models.Session.model_validate(row)

    async def most_overdue_session(self, now: datetime) -> Optional[scheduling_models.Session]:
        """The earliest-ending session that is already over but not marked completed."""
        today = now.date()
        stmt = select(db_models.Sessions).filter(
            db_models.Sessions.completed.is_(False),
            or_(
                db_models.Sessions.session_date < today,
                and_(
                    db_models.Sessions.session_date == today,
                    db_models.Sessions.end_time <= now.time()
                )
            )
        ).order_by(
            db_models.Sessions.session_date,
            db_models.Sessions.end_time
        ).limit(1)

        async with self._guard("most_overdue_session"):
            row = (await self.db.scalars(stmt)).first()
        if row is None:
            return None
        return scheduling_models.Session.model_validate(row)

    async def student_profile(self, student_id: int) -> Optional[scheduling_models.StudentProfile]:
        async with self._guard("student_profile"):
            row = await self.db.get(db_models.Students, student_id)
        if row is None:
            return None
        return scheduling_models.StudentProfile(
            student_id=row.id,
            topics=set(row.topics or []),
            grade_level=row.grade_level
        )

    async def tutor_candidates(self, grade_level: str) -> list[scheduling_models.TutorCandidate]:
        """Coarse pre-filter: tutors on the grade level that declare any topics."""
        stmt = select(db_models.Tutors).filter(
            db_models.Tutors.grade_level == grade_level,
            db_models.Tutors.topics.is_not(None)
        ).order_by(db_models.Tutors.id)

        async with self._guard("tutor_candidates"):
            rows = (await self.db.scalars(stmt)).all()
        return [
            scheduling_models.TutorCandidate(
                tutor_id=row.id,
                name=row.name,
                topics=set(row.topics or []),
                grade_level=row.grade_level
            )
            for row in rows
        ]

    # --- Writes ---

    async def persist_session(self, session: scheduling_models.Session) -> scheduling_models.Session:
        new_session = db_models.Sessions(
            student_id=session.student_id,
            tutor_id=session.tutor_id,
            session_date=session.session_date,
            start_time=session.start_time,
            end_time=session.end_time,
            subject=session.subject,
            completed=session.completed
        )
        async with self._guard("persist_session"):
            self.db.add(new_session)
            await self.db.flush()
            await self.db.refresh(new_session)
        return scheduling_models.Session.model_validate(new_session)

    async def delete_session(self, session_id: int) -> bool:
        """Returns False when no row matched."""
        async with self._guard("delete_session"):
            result = await self.db.execute(
                delete(db_models.Sessions).where(db_models.Sessions.id == session_id)
            )
            await self.db.flush()
        return result.rowcount > 0

    async def replace_availability(
        self,
        tutor_id: int,
        days_of_week: list[int],
        start_time: time,
        end_time: time
    ) -> scheduling_models.RecurringAvailability:
        """Last write wins: the tutor keeps exactly one window."""
        async with self._guard("replace_availability"):
            await self.db.execute(
                delete(db_models.TutorAvailability).where(db_models.TutorAvailability.tutor_id == tutor_id)
            )
            row = db_models.TutorAvailability(
                tutor_id=tutor_id,
                day_of_week=sorted(set(days_of_week)),
                start_time=start_time,
                end_time=end_time
            )
            self.db.add(row)
            await self.db.flush()

        return scheduling_models.RecurringAvailability(
            tutor_id=tutor_id,
            days_of_week=set(row.day_of_week),
            start_time=row.start_time,
            end_time=row.end_time
        )

    async def persist_time_off(self, tutor_id: int, day: date) -> scheduling_models.TimeOff:
        async with self._guard("persist_time_off"):
            self.db.add(db_models.TimeOff(tutor_id=tutor_id, date=day))
            await self.db.flush()
        return scheduling_models.TimeOff(tutor_id=tutor_id, date=day)

    async def remove_time_off(self, tutor_id: int, day: date) -> bool:
        async with self._guard("remove_time_off"):
            result = await self.db.execute(
                delete(db_models.TimeOff).where(
                    db_models.TimeOff.tutor_id == tutor_id,
                    db_models.TimeOff.date == day
                )
            )
            await self.db.flush()
        return result.rowcount > 0
