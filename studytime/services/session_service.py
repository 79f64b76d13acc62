"""Session service - live study timer state machine."""
import logging
from datetime import datetime, timedelta
from typing import Optional

from studytime.config import settings
from studytime.exceptions import (
    ActiveSessionExistsError,
    EditPeriodExpiredError,
    InvalidStatusError,
    NotFoundError,
    PauseTimeoutError,
    SessionTooShortError,
)
from studytime.models.session import (
    CLOSED_STATUSES,
    EditReason,
    InterruptionReason,
    Pause,
    Session,
    SessionStatus,
)
from studytime.store import PAUSE, SESSION, RecordStore
from studytime.utils.clock import Clock, to_naive_utc, utcnow
from studytime.utils.durations import minutes_between

logger = logging.getLogger(__name__)


class SessionService:
    """
    Service driving sessions through active, paused, completed and
    interrupted.
    """

    def __init__(self, store: RecordStore, clock: Clock = utcnow):
        """Initialize service with a record store and a clock."""
        self.store = store
        self.clock = clock

    def _require_session(self, session_id: int) -> Session:
        session = self.store.get_session_by_id(session_id)
        if session is None:
            raise NotFoundError("Session not found")
        return session

    def _total_pause_minutes(self, session_id: int) -> int:
        """Sum of closed pause durations; an open pause counts as zero."""
        return sum(
            pause.duration_minutes or 0
            for pause in self.store.get_pauses_by_session(session_id)
        )

    def _effective_minutes(self, session: Session, end_time: datetime) -> int:
        elapsed = minutes_between(session.start_time, end_time)
        return elapsed - self._total_pause_minutes(session.id)

    def get_session(self, session_id: int) -> Session:
        """
        Get a session by id.

        Raises:
            NotFoundError: If the session does not exist
        """
        return self._require_session(session_id)

    def get_current_session(self, user_id: int) -> Optional[Session]:
        """Get the user's active or paused session, or None."""
        return self.store.get_active_session_by_user(user_id)

    def get_pauses(self, session_id: int) -> list[Pause]:
        """List the pauses of a session in creation order."""
        self._require_session(session_id)
        return sorted(self.store.get_pauses_by_session(session_id), key=lambda p: p.id)

    def start_session(self, user_id: int, subject_id: int) -> Session:
        """
        Start a new session.

        Args:
            user_id: User ID
            subject_id: Subject being studied

        Returns:
            Created session, status active

        Raises:
            ActiveSessionExistsError: If the user already has a live session
        """
        if self.store.get_active_session_by_user(user_id) is not None:
            logger.debug("User %s tried to start a second live session", user_id)
            raise ActiveSessionExistsError(
                "You already have an active study session. "
                "Finish or pause it before starting a new one"
            )

        session = Session(
            id=self.store.next_id(SESSION),
            user_id=user_id,
            subject_id=subject_id,
            start_time=self.clock(),
            status=SessionStatus.ACTIVE,
        )
        self.store.add_session(session)
        logger.info("Session %s started for user %s", session.id, user_id)
        return session

    def pause_session(self, session_id: int) -> Session:
        """
        Pause an active session by opening a new pause.

        Raises:
            NotFoundError: If the session does not exist
            InvalidStatusError: If the session is not active
        """
        session = self._require_session(session_id)
        if session.status != SessionStatus.ACTIVE:
            raise InvalidStatusError("Only an active session can be paused")

        self.store.add_pause(
            Pause(
                id=self.store.next_id(PAUSE),
                session_id=session_id,
                start_time=self.clock(),
            )
        )
        updated = self.store.update_session(session_id, status=SessionStatus.PAUSED)
        logger.info("Session %s paused", session_id)
        return updated

    def resume_session(self, session_id: int) -> Session:
        """
        Resume a paused session by closing its open pause.

        A pause longer than the configured maximum ends the session instead:
        the pause is closed and the session is stored as interrupted
        (reason ``timeout``) before ``PauseTimeoutError`` is raised. That
        interruption is the outcome of the call and is not rolled back.

        Raises:
            NotFoundError: If the session does not exist
            InvalidStatusError: If the session is not paused
            PauseTimeoutError: If the pause outlived the maximum; carries the
                interrupted session
        """
        session = self._require_session(session_id)
        if session.status != SessionStatus.PAUSED:
            raise InvalidStatusError("Only a paused session can be resumed")

        now = self.clock()
        open_pause = self.store.get_open_pause_by_session(session_id)

        if open_pause is not None:
            pause_minutes = minutes_between(open_pause.start_time, now)
            self.store.update_pause(
                open_pause.id,
                end_time=now,
                duration_minutes=pause_minutes,
            )

            if pause_minutes > settings.max_pause_minutes:
                interrupted = self.store.update_session(
                    session_id,
                    status=SessionStatus.INTERRUPTED,
                    end_time=now,
                    interruption_reason=InterruptionReason.TIMEOUT,
                    total_duration_minutes=max(self._effective_minutes(session, now), 0),
                )
                logger.warning(
                    "Session %s interrupted after a %s minute pause",
                    session_id,
                    pause_minutes,
                )
                raise PauseTimeoutError(
                    "Session paused for more than "
                    f"{settings.max_pause_minutes // 60} hours was ended automatically",
                    session=interrupted,
                )

        updated = self.store.update_session(session_id, status=SessionStatus.ACTIVE)
        logger.info("Session %s resumed", session_id)
        return updated

    def finish_session(self, session_id: int) -> Session:
        """
        Finish an active session.

        Effective duration is whole elapsed minutes minus all pause time.

        Raises:
            NotFoundError: If the session does not exist
            InvalidStatusError: If the session is not active
            SessionTooShortError: If effective duration is below the minimum
        """
        session = self._require_session(session_id)
        if session.status != SessionStatus.ACTIVE:
            raise InvalidStatusError("Only an active session can be finished")

        now = self.clock()
        effective = self._effective_minutes(session, now)

        if effective < settings.min_session_minutes:
            raise SessionTooShortError(
                f"A session must last at least {settings.min_session_minutes} "
                "minute(s) to count"
            )

        updated = self.store.update_session(
            session_id,
            end_time=now,
            status=SessionStatus.COMPLETED,
            total_duration_minutes=effective,
        )
        logger.info("Session %s completed with %s minutes", session_id, effective)
        return updated

    def edit_completed_session(
        self,
        session_id: int,
        reason: EditReason,
        new_end_time: Optional[datetime] = None,
        new_subject_id: Optional[int] = None,
    ) -> Session:
        """
        Correct a completed or interrupted session after the fact.

        Args:
            session_id: Session ID
            reason: Why the session is being corrected
            new_end_time: Replacement end time; duration is recomputed
            new_subject_id: Replacement subject

        Returns:
            Updated session

        Raises:
            NotFoundError: If the session does not exist
            EditPeriodExpiredError: If the edit window since start has passed
            InvalidStatusError: If the session is still live
            SessionTooShortError: If the new end leaves less than the minimum
        """
        session = self._require_session(session_id)

        window = timedelta(hours=settings.session_edit_hours)
        if self.clock() - session.start_time > window:
            raise EditPeriodExpiredError(
                "This session can no longer be edited, the edit period has expired"
            )

        if session.status not in CLOSED_STATUSES:
            raise InvalidStatusError(
                "Only completed or interrupted sessions can be edited"
            )

        changes = {"edit_reason": reason}

        if new_end_time is not None:
            new_end_time = to_naive_utc(new_end_time)
            effective = self._effective_minutes(session, new_end_time)
            if effective < settings.min_session_minutes:
                raise SessionTooShortError(
                    "The new end time leaves the session shorter than "
                    f"{settings.min_session_minutes} minute(s)"
                )
            changes["end_time"] = new_end_time
            changes["total_duration_minutes"] = effective

        if new_subject_id is not None:
            changes["subject_id"] = new_subject_id

        updated = self.store.update_session(session_id, **changes)
        logger.info("Session %s edited (%s)", session_id, reason.value)
        return updated
