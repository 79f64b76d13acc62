"""Business-rule errors raised by the time-tracking services.

Every error is a ``ValueError`` carrying a stable ``code`` and the HTTP
status the routers answer with.
"""
from typing import Any, Optional


class StudyTimeError(ValueError):
    """Base class for time-tracking rule violations."""

    code = "STUDY_TIME_ERROR"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_detail(self) -> dict[str, Any]:
        """Error body used as the ``HTTPException`` detail."""
        return {"code": self.code, "message": self.message}


class NotFoundError(StudyTimeError):
    """Referenced id does not exist."""

    code = "NOT_FOUND"
    status_code = 404


class InvalidStatusError(StudyTimeError):
    """Transition not allowed from the session's current status."""

    code = "INVALID_STATUS"


class ActiveSessionExistsError(StudyTimeError):
    """User already has an active or paused session."""

    code = "ACTIVE_SESSION_EXISTS"


class SessionTooShortError(StudyTimeError):
    """Effective session duration is below the minimum."""

    code = "SESSION_TOO_SHORT"


class PauseTimeoutError(StudyTimeError):
    """
    Pause exceeded the maximum length and the session was interrupted.

    The interruption is already stored when this is raised; ``session``
    holds the interrupted session.
    """

    code = "PAUSE_TIMEOUT"

    def __init__(self, message: str, session: Optional[Any] = None):
        super().__init__(message)
        self.session = session

    def to_detail(self) -> dict[str, Any]:
        detail = super().to_detail()
        if self.session is not None:
            detail["session"] = self.session.model_dump(mode="json")
        return detail


class TimeOverlapError(StudyTimeError):
    """Interval collides with a manual record or a live session."""

    code = "TIME_OVERLAP"


class DailyLimitExceededError(StudyTimeError):
    """Recording would push the day's total past the daily cap."""

    code = "DAILY_LIMIT_EXCEEDED"


class EditPeriodExpiredError(StudyTimeError):
    """Edit attempted after the edit window closed."""

    code = "EDIT_PERIOD_EXPIRED"
