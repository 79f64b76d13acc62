"""Manual record service - user-entered blocks of study time."""
import logging
from datetime import date, timedelta
from typing import Optional

from studytime.config import settings
from studytime.exceptions import (
    DailyLimitExceededError,
    EditPeriodExpiredError,
    NotFoundError,
    TimeOverlapError,
)
from studytime.models.manual_record import ManualRecord
from studytime.store import MANUAL_RECORD, RecordStore
from studytime.utils.clock import Clock, utcnow
from studytime.utils.durations import clock_span_minutes

logger = logging.getLogger(__name__)


class ManualRecordService:
    """Service for creating, correcting and removing manual records."""

    def __init__(self, store: RecordStore, clock: Clock = utcnow):
        """Initialize service with a record store and a clock."""
        self.store = store
        self.clock = clock

    def _require_record(self, record_id: int) -> ManualRecord:
        record = self.store.get_manual_record_by_id(record_id)
        if record is None:
            raise NotFoundError("Manual record not found")
        return record

    def _check_overlap(
        self,
        user_id: int,
        study_date: date,
        start_time: str,
        end_time: str,
        exclude_record_id: Optional[int] = None,
    ) -> None:
        if self.store.has_time_overlap(
            user_id,
            study_date,
            start_time,
            end_time,
            now=self.clock(),
            exclude_record_id=exclude_record_id,
        ):
            raise TimeOverlapError(
                "A study record or live session already covers this time"
            )

    def _check_daily_limit(
        self,
        user_id: int,
        study_date: date,
        duration: int,
        exclude_record_id: Optional[int] = None,
    ) -> None:
        recorded = self.store.get_total_study_time_for_date(
            user_id, study_date, exclude_record_id=exclude_record_id
        )
        if recorded + duration > settings.daily_limit_minutes:
            raise DailyLimitExceededError(
                f"The daily limit of {settings.daily_limit_hours} hours "
                f"would be exceeded for {study_date.isoformat()}"
            )

    def get_record(self, record_id: int) -> ManualRecord:
        """
        Get a manual record by id.

        Raises:
            NotFoundError: If the record does not exist
        """
        return self._require_record(record_id)

    def list_records(self, user_id: int) -> list[ManualRecord]:
        """List a user's manual records, most recent study date first."""
        records = self.store.get_manual_records_by_user(user_id)
        return sorted(
            records,
            key=lambda r: (r.study_date, r.start_time),
            reverse=True,
        )

    def create_record(
        self,
        user_id: int,
        subject_id: int,
        study_date: date,
        start_time: str,
        end_time: str,
        description: Optional[str] = None,
    ) -> ManualRecord:
        """
        Create a manual record.

        Input shape (time format, duration bounds) is validated by the
        request model before this is called.

        Args:
            user_id: User ID
            subject_id: Subject studied
            study_date: Day of the study block
            start_time: Start as ``HH:MM``
            end_time: End as ``HH:MM``, same day
            description: Optional free text

        Returns:
            Created manual record

        Raises:
            TimeOverlapError: If the block collides with existing study time
            DailyLimitExceededError: If the day's cap would be exceeded
        """
        self._check_overlap(user_id, study_date, start_time, end_time)

        duration = clock_span_minutes(start_time, end_time)
        self._check_daily_limit(user_id, study_date, duration)

        record = ManualRecord(
            id=self.store.next_id(MANUAL_RECORD),
            user_id=user_id,
            subject_id=subject_id,
            study_date=study_date,
            start_time=start_time,
            end_time=end_time,
            duration_minutes=duration,
            description=description,
            created_at=self.clock(),
            updated_at=None,
        )
        self.store.add_manual_record(record)
        logger.info(
            "Manual record %s created for user %s (%s minutes)",
            record.id,
            user_id,
            duration,
        )
        return record

    def update_record(
        self,
        record_id: int,
        subject_id: int,
        study_date: date,
        start_time: str,
        end_time: str,
        description: Optional[str] = None,
    ) -> ManualRecord:
        """
        Replace the contents of a manual record.

        The edit window is measured from the original creation time, so
        earlier edits do not extend it. The daily cap is re-checked for the
        target date without counting the record's previous duration.

        Raises:
            NotFoundError: If the record does not exist
            EditPeriodExpiredError: If the record is past its edit window
            TimeOverlapError: If the new block collides with other study time
            DailyLimitExceededError: If the target day's cap would be exceeded
        """
        existing = self._require_record(record_id)

        now = self.clock()
        if now - existing.created_at > timedelta(days=settings.manual_record_edit_days):
            raise EditPeriodExpiredError(
                "This record can no longer be edited, the edit period has expired"
            )

        self._check_overlap(
            existing.user_id,
            study_date,
            start_time,
            end_time,
            exclude_record_id=record_id,
        )

        duration = clock_span_minutes(start_time, end_time)
        self._check_daily_limit(
            existing.user_id, study_date, duration, exclude_record_id=record_id
        )

        updated = self.store.update_manual_record(
            record_id,
            subject_id=subject_id,
            study_date=study_date,
            start_time=start_time,
            end_time=end_time,
            duration_minutes=duration,
            description=description,
            updated_at=now,
        )
        logger.info("Manual record %s updated", record_id)
        return updated

    def delete_record(self, record_id: int) -> dict:
        """
        Delete a manual record.

        Deletion is allowed at any time; the edit window does not apply.

        Returns:
            Confirmation message

        Raises:
            NotFoundError: If the record does not exist
        """
        self._require_record(record_id)
        self.store.delete_manual_record(record_id)
        logger.info("Manual record %s deleted", record_id)
        return {"message": "Manual record deleted"}
