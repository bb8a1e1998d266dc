from typing import Optional

from sqlalchemy import BigInteger, Boolean, Date, ForeignKeyConstraint, Index, Integer, JSON, PrimaryKeyConstraint, Text, Time, UniqueConstraint, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
import datetime

# SQLite only autoincrements INTEGER PRIMARY KEY columns
RowId = BigInteger().with_variant(Integer, "sqlite")


class Base(DeclarativeBase):
    pass


class Tutors(Base):
    __tablename__ = 'tutors'
    __table_args__ = (
        PrimaryKeyConstraint('id', name='tutors_pkey'),
        Index('idx_tutors_grade_level', 'grade_level')
    )

    id: Mapped[int] = mapped_column(RowId, primary_key=True)
    name: Mapped[str] = mapped_column(Text)
    grade_level: Mapped[str] = mapped_column(Text)
    topics: Mapped[Optional[list]] = mapped_column(JSON)

    availability: Mapped[list['TutorAvailability']] = relationship('TutorAvailability', back_populates='tutor')
    time_off: Mapped[list['TimeOff']] = relationship('TimeOff', back_populates='tutor')
    sessions: Mapped[list['Sessions']] = relationship('Sessions', back_populates='tutor')


class Students(Base):
    __tablename__ = 'students'
    __table_args__ = (
        PrimaryKeyConstraint('id', name='students_pkey'),
    )

    id: Mapped[int] = mapped_column(RowId, primary_key=True)
    name: Mapped[str] = mapped_column(Text)
    grade_level: Mapped[str] = mapped_column(Text)
    topics: Mapped[list] = mapped_column(JSON, default=list)

    sessions: Mapped[list['Sessions']] = relationship('Sessions', back_populates='student')


class TutorAvailability(Base):
    __tablename__ = 'tutor_availability'
    __table_args__ = (
        ForeignKeyConstraint(['tutor_id'], ['tutors.id'], ondelete='CASCADE', name='tutor_availability_tutor_id_fkey'),
        PrimaryKeyConstraint('id', name='tutor_availability_pkey'),
        UniqueConstraint('tutor_id', name='tutor_availability_tutor_id_key')
    )

    id: Mapped[int] = mapped_column(RowId, primary_key=True)
    tutor_id: Mapped[int] = mapped_column(BigInteger)
    day_of_week: Mapped[list] = mapped_column(JSON, default=list)  # 0=Sunday .. 6=Saturday
    start_time: Mapped[datetime.time] = mapped_column(Time)
    end_time: Mapped[datetime.time] = mapped_column(Time)

    tutor: Mapped['Tutors'] = relationship('Tutors', back_populates='availability')


class TimeOff(Base):
    __tablename__ = 'time_off'
    __table_args__ = (
        ForeignKeyConstraint(['tutor_id'], ['tutors.id'], ondelete='CASCADE', name='time_off_tutor_id_fkey'),
        PrimaryKeyConstraint('id', name='time_off_pkey'),
        UniqueConstraint('tutor_id', 'date', name='time_off_tutor_id_date_key')
    )

    id: Mapped[int] = mapped_column(RowId, primary_key=True)
    tutor_id: Mapped[int] = mapped_column(BigInteger)
    date: Mapped[datetime.date] = mapped_column(Date)

    tutor: Mapped['Tutors'] = relationship('Tutors', back_populates='time_off')


class Sessions(Base):
    __tablename__ = 'sessions'
    __table_args__ = (
        ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE', name='sessions_student_id_fkey'),
        ForeignKeyConstraint(['tutor_id'], ['tutors.id'], ondelete='CASCADE', name='sessions_tutor_id_fkey'),
        PrimaryKeyConstraint('id', name='sessions_pkey'),
        # Last line of defence against two simultaneous bookings of the same slot
        UniqueConstraint('tutor_id', 'session_date', 'start_time', name='sessions_tutor_slot_key'),
        Index('idx_sessions_date_start', 'session_date', 'start_time')
    )

    id: Mapped[int] = mapped_column(RowId, primary_key=True)
    student_id: Mapped[int] = mapped_column(BigInteger)
    tutor_id: Mapped[int] = mapped_column(BigInteger)
    session_date: Mapped[datetime.date] = mapped_column(Date)
    start_time: Mapped[datetime.time] = mapped_column(Time)
    end_time: Mapped[datetime.time] = mapped_column(Time)
    subject: Mapped[str] = mapped_column(Text)
    completed: Mapped[bool] = mapped_column(Boolean, server_default=text('false'), default=False)

    student: Mapped['Students'] = relationship('Students', back_populates='sessions')
    tutor: Mapped['Tutors'] = relationship('Tutors', back_populates='sessions')
