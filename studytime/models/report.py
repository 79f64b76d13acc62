"""History and statistics model definitions."""
from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, PositiveInt, model_validator

from studytime.config import settings


class HistoryItemKind(str, Enum):
    """Source of a history entry."""

    AUTOMATIC_SESSION = "automatic_session"
    MANUAL_RECORD = "manual_record"


class HistoryItem(BaseModel):
    """One row of the combined study history."""

    id: int
    kind: HistoryItemKind
    subject_id: int
    study_date: date
    duration_minutes: int
    duration_formatted: str
    status: str
    pause_count: Optional[int] = None
    pause_total_formatted: Optional[str] = None


class TimeStatistics(BaseModel):
    """Aggregated study figures for a date range."""

    total_minutes: int
    total_formatted: str
    days_with_study: int
    total_entries: int
    daily_average_minutes: float
    daily_average_formatted: str
    entry_average_minutes: float
    entry_average_formatted: str
    most_studied_subject_id: Optional[int] = None
    consistency_percentage: float


class HistoryQuery(BaseModel):
    """Query parameters for the history listing."""

    user_id: PositiveInt
    subject_id: Optional[PositiveInt] = None
    date_start: Optional[date] = None
    date_end: Optional[date] = None

    @model_validator(mode="after")
    def range_is_valid(self):
        if self.date_start and self.date_end:
            if self.date_start > self.date_end:
                raise ValueError("date_start must not be after date_end")
            if (self.date_end - self.date_start).days > settings.max_history_days:
                raise ValueError(
                    f"History range cannot exceed {settings.max_history_days} days"
                )
        return self


class StatisticsQuery(BaseModel):
    """Query parameters for period statistics."""

    user_id: PositiveInt
    date_start: date
    date_end: date
    subject_id: Optional[PositiveInt] = None

    @model_validator(mode="after")
    def range_is_valid(self):
        if self.date_start > self.date_end:
            raise ValueError("date_start must not be after date_end")
        if (self.date_end - self.date_start).days > settings.max_statistics_days:
            raise ValueError(
                f"Statistics range cannot exceed {settings.max_statistics_days} days"
            )
        return self
