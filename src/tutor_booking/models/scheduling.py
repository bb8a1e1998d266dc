'''
Scheduling API Models

In-memory shapes shared by the decision core, the services and the API.
Weekdays are encoded 0=Sunday .. 6=Saturday everywhere.
'''
from datetime import date, time
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TimeSpan(BaseModel):
    """
    A date plus a start/end time-of-day pair.
    Callers guarantee start_time < end_time; overlap is only defined on equal dates.
    """
    date: date
    start_time: time
    end_time: time

    model_config = ConfigDict(frozen=True)


class RecurringAvailability(BaseModel):
    """
    A weekly-repeating open window. Corresponds to db_models.TutorAvailability.
    """
    tutor_id: int
    days_of_week: set[int] = Field(default_factory=set, description="0=Sunday, 6=Saturday")
    start_time: time
    end_time: time

    model_config = ConfigDict(from_attributes=True)


class DayAvailability(BaseModel):
    """
    The tutor's single active window as exposed to clients.
    Empty days and null times mean "no availability configured".
    """
    days_of_week: list[int] = Field(default_factory=list)
    start_time: Optional[time] = None
    end_time: Optional[time] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.days_of_week) and self.start_time is not None


class AvailabilityUpdate(BaseModel):
    """
    Payload for replacing a tutor's recurring window.
    """
    days_of_week: list[int]
    start_time: time
    end_time: time

    @model_validator(mode="after")
    def check_window(self) -> "AvailabilityUpdate":
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time.")
        invalid = [day for day in self.days_of_week if not 0 <= day <= 6]
        if invalid:
            raise ValueError(f"days_of_week must be between 0 (Sunday) and 6 (Saturday), got {invalid}.")
        return self


class TimeOff(BaseModel):
    tutor_id: int
    date: date

    model_config = ConfigDict(from_attributes=True)


class Session(BaseModel):
    """
    A booked tutoring session. The id is assigned by the persistence layer.
    Corresponds to db_models.Sessions.
    """
    id: Optional[int] = None
    student_id: int
    tutor_id: int
    session_date: date
    start_time: time
    end_time: time
    subject: str
    completed: bool = False

    model_config = ConfigDict(from_attributes=True)

    @property
    def span(self) -> TimeSpan:
        return TimeSpan(date=self.session_date, start_time=self.start_time, end_time=self.end_time)


class StudentProfile(BaseModel):
    student_id: int
    topics: set[str] = Field(default_factory=set)
    grade_level: str

    model_config = ConfigDict(from_attributes=True)


class TutorCandidate(BaseModel):
    """
    A tutor considered for matching. matching_score and common_topics are
    derived by the matcher and stay at their defaults until scored.
    """
    tutor_id: int
    name: str
    topics: set[str] = Field(default_factory=set)
    grade_level: str
    matching_score: int = 0
    common_topics: set[str] = Field(default_factory=set)

    model_config = ConfigDict(from_attributes=True)


# --- Request / Result Models ---

class BookingRequest(BaseModel):
    """
    Start and end may be 12-hour ("10:00 AM") or 24-hour ("10:00:00") strings.
    """
    student_id: int
    tutor_id: int
    session_date: date
    start_time: str
    end_time: str


class SessionCreate(BookingRequest):
    subject: str


class BookingVerdict(BaseModel):
    available: bool
    conflict: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class BookingResult(BaseModel):
    verdict: BookingVerdict
    session: Optional[Session] = None


class OperationResult(BaseModel):
    """
    Outcome of a write that reports failure instead of raising.
    """
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
