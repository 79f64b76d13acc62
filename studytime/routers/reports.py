"""Report endpoints - history and statistics."""
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from studytime.database import get_database
from studytime.models.report import (
    HistoryItem,
    HistoryQuery,
    StatisticsQuery,
    TimeStatistics,
)
from studytime.services.report_service import ReportService


router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/history", response_model=list[HistoryItem])
async def get_history(
    query: Annotated[HistoryQuery, Query()],
    store=Depends(get_database),
):
    """
    Combined session and manual record history.

    - Optional filters: subject_id, date_start, date_end
    - Results sorted by study date descending (most recent first)
    """
    service = ReportService(store)
    return service.compute_history(
        user_id=query.user_id,
        subject_id=query.subject_id,
        date_start=query.date_start,
        date_end=query.date_end,
    )


@router.get("/statistics", response_model=TimeStatistics)
async def get_statistics(
    query: Annotated[StatisticsQuery, Query()],
    store=Depends(get_database),
):
    """
    Study statistics for an inclusive date range.

    - Counts completed sessions and manual records
    - Optional subject_id filter
    """
    service = ReportService(store)
    return service.compute_statistics(
        user_id=query.user_id,
        date_start=query.date_start,
        date_end=query.date_end,
        subject_id=query.subject_id,
    )
