"""Manual record endpoints - user-entered study time."""
from fastapi import APIRouter, Depends, HTTPException, Query, status

from studytime.database import get_database
from studytime.exceptions import StudyTimeError
from studytime.models.manual_record import (
    ManualRecord,
    ManualRecordCreate,
    ManualRecordUpdate,
)
from studytime.services.manual_record_service import ManualRecordService
from studytime.utils.clock import get_clock


router = APIRouter(prefix="/manual-records", tags=["manual-records"])


def _http_error(error: StudyTimeError) -> HTTPException:
    return HTTPException(status_code=error.status_code, detail=error.to_detail())


@router.post("", response_model=ManualRecord, status_code=status.HTTP_201_CREATED)
async def create_record(
    record_create: ManualRecordCreate,
    store=Depends(get_database),
    clock=Depends(get_clock),
):
    """
    Create a manual record.

    - Must not overlap other records or a live session
    - Must not push the day past the daily limit
    """
    service = ManualRecordService(store, clock)
    try:
        return service.create_record(
            user_id=record_create.user_id,
            subject_id=record_create.subject_id,
            study_date=record_create.study_date,
            start_time=record_create.start_time,
            end_time=record_create.end_time,
            description=record_create.description,
        )
    except StudyTimeError as e:
        raise _http_error(e)


@router.get("", response_model=list[ManualRecord])
async def list_records(
    user_id: int = Query(..., gt=0),
    store=Depends(get_database),
    clock=Depends(get_clock),
):
    """List the user's manual records, most recent first."""
    service = ManualRecordService(store, clock)
    return service.list_records(user_id)


@router.get("/{record_id}", response_model=ManualRecord)
async def get_record(
    record_id: int,
    store=Depends(get_database),
    clock=Depends(get_clock),
):
    """Get a manual record by id."""
    service = ManualRecordService(store, clock)
    try:
        return service.get_record(record_id)
    except StudyTimeError as e:
        raise _http_error(e)


@router.put("/{record_id}", response_model=ManualRecord)
async def update_record(
    record_id: int,
    record_update: ManualRecordUpdate,
    store=Depends(get_database),
    clock=Depends(get_clock),
):
    """
    Update a manual record.

    - Only within the edit window after creation
    """
    service = ManualRecordService(store, clock)
    try:
        return service.update_record(
            record_id=record_id,
            subject_id=record_update.subject_id,
            study_date=record_update.study_date,
            start_time=record_update.start_time,
            end_time=record_update.end_time,
            description=record_update.description,
        )
    except StudyTimeError as e:
        raise _http_error(e)


@router.delete("/{record_id}")
async def delete_record(
    record_id: int,
    store=Depends(get_database),
    clock=Depends(get_clock),
):
    """
    Delete a manual record.

    - Hard delete (permanent)
    """
    service = ManualRecordService(store, clock)
    try:
        return service.delete_record(record_id)
    except StudyTimeError as e:
        raise _http_error(e)
