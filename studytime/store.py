"""Record storage for sessions, pauses and manual records."""
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any, Optional

from studytime.exceptions import NotFoundError
from studytime.models.manual_record import ManualRecord
from studytime.models.session import (
    LIVE_STATUSES,
    Pause,
    Session,
    SessionStatus,
)
from studytime.utils.durations import combine

SESSION = "session"
PAUSE = "pause"
MANUAL_RECORD = "manual_record"


def intervals_overlap(
    new_start: datetime,
    new_end: datetime,
    existing_start: datetime,
    existing_end: datetime,
) -> bool:
    """
    Half-open interval overlap test.

    Adjacent intervals (one ends exactly where the other starts) do not
    overlap.
    """
    return new_start < existing_end and new_end > existing_start


class RecordStore(ABC):
    """Storage capabilities the time-tracking services rely on."""

    @abstractmethod
    def next_id(self, kind: str) -> int:
        """Return the next unused id for an entity kind."""

    # Sessions

    @abstractmethod
    def add_session(self, session: Session) -> Session: ...

    @abstractmethod
    def get_session_by_id(self, session_id: int) -> Optional[Session]: ...

    @abstractmethod
    def get_sessions_by_user(self, user_id: int) -> list[Session]: ...

    @abstractmethod
    def update_session(self, session_id: int, **changes: Any) -> Session: ...

    def get_active_session_by_user(self, user_id: int) -> Optional[Session]:
        """Return the user's active or paused session, if any."""
        for session in self.get_sessions_by_user(user_id):
            if session.status in LIVE_STATUSES:
                return session
        return None

    # Pauses

    @abstractmethod
    def add_pause(self, pause: Pause) -> Pause: ...

    @abstractmethod
    def get_pauses_by_session(self, session_id: int) -> list[Pause]: ...

    @abstractmethod
    def update_pause(self, pause_id: int, **changes: Any) -> Pause: ...

    def get_open_pause_by_session(self, session_id: int) -> Optional[Pause]:
        """Return the session's pause that has not ended yet, if any."""
        for pause in self.get_pauses_by_session(session_id):
            if pause.end_time is None:
                return pause
        return None

    # Manual records

    @abstractmethod
    def add_manual_record(self, record: ManualRecord) -> ManualRecord: ...

    @abstractmethod
    def get_manual_record_by_id(self, record_id: int) -> Optional[ManualRecord]: ...

    @abstractmethod
    def get_manual_records_by_user(self, user_id: int) -> list[ManualRecord]: ...

    @abstractmethod
    def update_manual_record(self, record_id: int, **changes: Any) -> ManualRecord: ...

    @abstractmethod
    def delete_manual_record(self, record_id: int) -> bool: ...

    # Queries

    def has_time_overlap(
        self,
        user_id: int,
        study_date: date,
        start_time: str,
        end_time: str,
        now: datetime,
        exclude_record_id: Optional[int] = None,
    ) -> bool:
        """
        Check whether a same-day interval collides with recorded study time.

        The candidate ``[study_date + start_time, study_date + end_time)`` is
        compared against the user's other manual records on that date and
        against the user's active or paused sessions that started on that
        date. A live session is treated as running until ``now``.

        Args:
            user_id: Owner of the candidate interval
            study_date: Date of the candidate interval
            start_time: Start as ``HH:MM``
            end_time: End as ``HH:MM``
            now: Current time, closing the interval of live sessions
            exclude_record_id: Manual record to ignore (the one being edited)

        Returns:
            True if any overlap exists
        """
        new_start = combine(study_date, start_time)
        new_end = combine(study_date, end_time)

        for record in self.get_manual_records_by_user(user_id):
            if record.study_date != study_date or record.id == exclude_record_id:
                continue
            if intervals_overlap(
                new_start,
                new_end,
                combine(record.study_date, record.start_time),
                combine(record.study_date, record.end_time),
            ):
                return True

        for session in self.get_sessions_by_user(user_id):
            if session.status not in LIVE_STATUSES:
                continue
            if session.start_time.date() != study_date:
                continue
            session_end = session.end_time or now
            if intervals_overlap(new_start, new_end, session.start_time, session_end):
                return True

        return False

    def get_total_study_time_for_date(
        self,
        user_id: int,
        study_date: date,
        exclude_record_id: Optional[int] = None,
    ) -> int:
        """
        Minutes already recorded for a user on a date.

        Sums manual records on the date plus completed sessions that started
        on it.
        """
        manual_total = sum(
            record.duration_minutes
            for record in self.get_manual_records_by_user(user_id)
            if record.study_date == study_date and record.id != exclude_record_id
        )
        session_total = sum(
            session.total_duration_minutes or 0
            for session in self.get_sessions_by_user(user_id)
            if session.status == SessionStatus.COMPLETED
            and session.start_time.date() == study_date
        )
        return manual_total + session_total


class InMemoryRecordStore(RecordStore):
    """Process-local store backed by dicts keyed by id."""

    def __init__(self):
        self.clear()

    def clear(self) -> None:
        """Drop every entity and reset id counters."""
        self._sessions: dict[int, Session] = {}
        self._pauses: dict[int, Pause] = {}
        self._manual_records: dict[int, ManualRecord] = {}
        self._counters: dict[str, int] = {}

    def next_id(self, kind: str) -> int:
        self._counters[kind] = self._counters.get(kind, 0) + 1
        return self._counters[kind]

    def add_session(self, session: Session) -> Session:
        self._sessions[session.id] = session
        return session

    def get_session_by_id(self, session_id: int) -> Optional[Session]:
        return self._sessions.get(session_id)

    def get_sessions_by_user(self, user_id: int) -> list[Session]:
        return [s for s in self._sessions.values() if s.user_id == user_id]

    def update_session(self, session_id: int, **changes: Any) -> Session:
        existing = self._sessions.get(session_id)
        if existing is None:
            raise NotFoundError(f"Session {session_id} not found")
        updated = existing.model_copy(update=changes)
        self._sessions[session_id] = updated
        return updated

    def add_pause(self, pause: Pause) -> Pause:
        self._pauses[pause.id] = pause
        return pause

    def get_pauses_by_session(self, session_id: int) -> list[Pause]:
        return [p for p in self._pauses.values() if p.session_id == session_id]

    def update_pause(self, pause_id: int, **changes: Any) -> Pause:
        existing = self._pauses.get(pause_id)
        if existing is None:
            raise NotFoundError(f"Pause {pause_id} not found")
        updated = existing.model_copy(update=changes)
        self._pauses[pause_id] = updated
        return updated

    def add_manual_record(self, record: ManualRecord) -> ManualRecord:
        self._manual_records[record.id] = record
        return record

    def get_manual_record_by_id(self, record_id: int) -> Optional[ManualRecord]:
        return self._manual_records.get(record_id)

    def get_manual_records_by_user(self, user_id: int) -> list[ManualRecord]:
        return [r for r in self._manual_records.values() if r.user_id == user_id]

    def update_manual_record(self, record_id: int, **changes: Any) -> ManualRecord:
        existing = self._manual_records.get(record_id)
        if existing is None:
            raise NotFoundError(f"Manual record {record_id} not found")
        updated = existing.model_copy(update=changes)
        self._manual_records[record_id] = updated
        return updated

    def delete_manual_record(self, record_id: int) -> bool:
        return self._manual_records.pop(record_id, None) is not None
