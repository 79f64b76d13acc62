"""Manual study record model definitions."""
from datetime import date, datetime, timedelta
from typing import Optional

from pydantic import BaseModel, Field, PositiveInt, field_validator, model_validator

from studytime.config import settings
from studytime.utils.clock import utcnow
from studytime.utils.durations import clock_span_minutes

CLOCK_TIME_PATTERN = r"^([01]\d|2[0-3]):([0-5]\d)$"


class ManualRecord(BaseModel):
    """A user-entered block of study time."""

    id: int
    user_id: int
    subject_id: int
    study_date: date
    start_time: str
    end_time: str
    duration_minutes: int
    description: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class ManualRecordUpdate(BaseModel):
    """
    Manual record update model.

    Same-day intervals only: ``end_time`` must come after ``start_time`` and
    the span must fit the configured manual-record bounds.
    """

    subject_id: PositiveInt
    study_date: date
    start_time: str = Field(pattern=CLOCK_TIME_PATTERN)
    end_time: str = Field(pattern=CLOCK_TIME_PATTERN)
    description: Optional[str] = Field(default=None, max_length=500)

    @field_validator("study_date")
    @classmethod
    def study_date_in_window(cls, value: date) -> date:
        today = utcnow().date()
        if value > today:
            raise ValueError("Study date cannot be in the future")
        if value < today - timedelta(days=settings.max_history_days):
            raise ValueError(
                f"Study date cannot be more than {settings.max_history_days} days ago"
            )
        return value

    @model_validator(mode="after")
    def duration_in_bounds(self):
        duration = clock_span_minutes(self.start_time, self.end_time)
        low = settings.min_manual_record_minutes
        high = settings.max_session_minutes
        if not low <= duration <= high:
            raise ValueError(f"Duration must be between {low} and {high} minutes")
        return self


class ManualRecordCreate(ManualRecordUpdate):
    """Manual record creation model."""

    user_id: PositiveInt
