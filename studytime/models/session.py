"""Study session and pause model definitions."""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, PositiveInt


class SessionStatus(str, Enum):
    """Lifecycle states of a live study session."""

    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    INTERRUPTED = "interrupted"


LIVE_STATUSES = (SessionStatus.ACTIVE, SessionStatus.PAUSED)
CLOSED_STATUSES = (SessionStatus.COMPLETED, SessionStatus.INTERRUPTED)


class InterruptionReason(str, Enum):
    """Why a session ended without being finished."""

    USER_STOPPED = "user_stopped"
    TIMEOUT = "timeout"
    SYSTEM_ERROR = "system_error"


class EditReason(str, Enum):
    """Why a recorded session was corrected after the fact."""

    INTERRUPTION_CORRECTION = "interruption_correction"
    TIME_ADJUSTMENT = "time_adjustment"
    SUBJECT_CORRECTION = "subject_correction"


class Session(BaseModel):
    """A timer-driven study interval for one user and subject."""

    id: int
    user_id: int
    subject_id: int
    start_time: datetime
    end_time: Optional[datetime] = None
    status: SessionStatus = SessionStatus.ACTIVE
    total_duration_minutes: Optional[int] = None  # excludes paused time
    interruption_reason: Optional[InterruptionReason] = None
    edit_reason: Optional[EditReason] = None


class Pause(BaseModel):
    """A pause inside a session; open while ``end_time`` is None."""

    id: int
    session_id: int
    start_time: datetime
    end_time: Optional[datetime] = None
    duration_minutes: Optional[int] = None


class SessionDetail(Session):
    """Session together with its pauses."""

    pauses: list[Pause] = []


class SessionStart(BaseModel):
    """Request model for starting a session."""

    user_id: PositiveInt
    subject_id: PositiveInt


class SessionAction(BaseModel):
    """Request model for pause, resume and finish."""

    session_id: PositiveInt


class SessionEdit(BaseModel):
    """Request model for correcting a completed or interrupted session."""

    session_id: PositiveInt
    reason: EditReason
    new_end_time: Optional[datetime] = None
    new_subject_id: Optional[PositiveInt] = None
