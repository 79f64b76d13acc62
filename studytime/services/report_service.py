"""Report service - study history and period statistics."""
from collections import defaultdict
from datetime import date
from typing import Optional

from studytime.models.report import HistoryItem, HistoryItemKind, TimeStatistics
from studytime.models.session import SessionStatus
from studytime.store import RecordStore
from studytime.utils.durations import format_minutes, round_half_up

MANUAL_STATUS = "manual"


def _in_range(day: date, start: Optional[date], end: Optional[date]) -> bool:
    if start is not None and day < start:
        return False
    if end is not None and day > end:
        return False
    return True


class ReportService:
    """Read-only aggregation over stored sessions and manual records."""

    def __init__(self, store: RecordStore):
        """Initialize service with a record store."""
        self.store = store

    def compute_history(
        self,
        user_id: int,
        subject_id: Optional[int] = None,
        date_start: Optional[date] = None,
        date_end: Optional[date] = None,
    ) -> list[HistoryItem]:
        """
        Combined list of sessions and manual records, newest date first.

        Sessions of every status are included; a session still running
        shows a zero duration. Date bounds are inclusive.

        Args:
            user_id: User ID
            subject_id: Optional subject filter
            date_start: Optional first day
            date_end: Optional last day

        Returns:
            History items sorted by study date, descending
        """
        items: list[HistoryItem] = []

        for session in sorted(self.store.get_sessions_by_user(user_id), key=lambda s: s.id):
            if subject_id is not None and session.subject_id != subject_id:
                continue
            study_date = session.start_time.date()
            if not _in_range(study_date, date_start, date_end):
                continue

            pauses = self.store.get_pauses_by_session(session.id)
            pause_total = sum(p.duration_minutes or 0 for p in pauses)
            duration = session.total_duration_minutes or 0

            items.append(
                HistoryItem(
                    id=session.id,
                    kind=HistoryItemKind.AUTOMATIC_SESSION,
                    subject_id=session.subject_id,
                    study_date=study_date,
                    duration_minutes=duration,
                    duration_formatted=format_minutes(duration),
                    status=session.status.value,
                    pause_count=len(pauses),
                    pause_total_formatted=format_minutes(pause_total),
                )
            )

        for record in sorted(self.store.get_manual_records_by_user(user_id), key=lambda r: r.id):
            if subject_id is not None and record.subject_id != subject_id:
                continue
            if not _in_range(record.study_date, date_start, date_end):
                continue

            items.append(
                HistoryItem(
                    id=record.id,
                    kind=HistoryItemKind.MANUAL_RECORD,
                    subject_id=record.subject_id,
                    study_date=record.study_date,
                    duration_minutes=record.duration_minutes,
                    duration_formatted=format_minutes(record.duration_minutes),
                    status=MANUAL_STATUS,
                )
            )

        # Stable sort keeps sessions ahead of manual records within a day
        items.sort(key=lambda item: item.study_date, reverse=True)
        return items

    def compute_statistics(
        self,
        user_id: int,
        date_start: date,
        date_end: date,
        subject_id: Optional[int] = None,
    ) -> TimeStatistics:
        """
        Aggregate completed sessions and manual records over a date range.

        The range is inclusive on both ends. The daily average and
        consistency are computed over every day in the range, not only the
        days with study.

        Args:
            user_id: User ID
            date_start: First day of the range
            date_end: Last day of the range
            subject_id: Optional subject filter

        Returns:
            Statistics with averages and percentage rounded to 2 decimals
        """
        minutes_by_subject: dict[int, int] = defaultdict(int)
        study_days: set[date] = set()
        total_minutes = 0
        total_entries = 0

        for session in self.store.get_sessions_by_user(user_id):
            if session.status != SessionStatus.COMPLETED:
                continue
            if subject_id is not None and session.subject_id != subject_id:
                continue
            study_date = session.start_time.date()
            if not _in_range(study_date, date_start, date_end):
                continue

            minutes = session.total_duration_minutes or 0
            minutes_by_subject[session.subject_id] += minutes
            study_days.add(study_date)
            total_minutes += minutes
            total_entries += 1

        for record in self.store.get_manual_records_by_user(user_id):
            if subject_id is not None and record.subject_id != subject_id:
                continue
            if not _in_range(record.study_date, date_start, date_end):
                continue

            minutes_by_subject[record.subject_id] += record.duration_minutes
            study_days.add(record.study_date)
            total_minutes += record.duration_minutes
            total_entries += 1

        days_in_range = (date_end - date_start).days + 1
        daily_average = total_minutes / days_in_range if days_in_range > 0 else 0
        entry_average = total_minutes / total_entries if total_entries > 0 else 0
        consistency = len(study_days) / days_in_range * 100 if days_in_range > 0 else 0

        most_studied = None
        if minutes_by_subject:
            # Ties go to the lowest subject id
            most_studied = min(
                minutes_by_subject,
                key=lambda subject: (-minutes_by_subject[subject], subject),
            )

        return TimeStatistics(
            total_minutes=total_minutes,
            total_formatted=format_minutes(total_minutes),
            days_with_study=len(study_days),
            total_entries=total_entries,
            daily_average_minutes=round_half_up(daily_average),
            daily_average_formatted=format_minutes(daily_average),
            entry_average_minutes=round_half_up(entry_average),
            entry_average_formatted=format_minutes(entry_average),
            most_studied_subject_id=most_studied,
            consistency_percentage=round_half_up(consistency),
        )
