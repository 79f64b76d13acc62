"""Session endpoints - live study timer operations."""
from fastapi import APIRouter, Depends, HTTPException, Query, status

from studytime.database import get_database
from studytime.exceptions import StudyTimeError
from studytime.models.session import (
    Session,
    SessionAction,
    SessionDetail,
    SessionEdit,
    SessionStart,
)
from studytime.services.session_service import SessionService
from studytime.utils.clock import get_clock


router = APIRouter(prefix="/sessions", tags=["sessions"])


def _http_error(error: StudyTimeError) -> HTTPException:
    return HTTPException(status_code=error.status_code, detail=error.to_detail())


@router.post("/start", response_model=Session, status_code=status.HTTP_201_CREATED)
async def start_session(
    session_start: SessionStart,
    store=Depends(get_database),
    clock=Depends(get_clock),
):
    """
    Start a new study session.

    - Only one active or paused session per user
    """
    service = SessionService(store, clock)
    try:
        return service.start_session(
            user_id=session_start.user_id,
            subject_id=session_start.subject_id,
        )
    except StudyTimeError as e:
        raise _http_error(e)


@router.post("/pause", response_model=Session)
async def pause_session(
    action: SessionAction,
    store=Depends(get_database),
    clock=Depends(get_clock),
):
    """
    Pause an active session.

    - Session must be active
    """
    service = SessionService(store, clock)
    try:
        return service.pause_session(action.session_id)
    except StudyTimeError as e:
        raise _http_error(e)


@router.post("/resume", response_model=Session)
async def resume_session(
    action: SessionAction,
    store=Depends(get_database),
    clock=Depends(get_clock),
):
    """
    Resume a paused session.

    - Session must be paused
    - A pause over the maximum length ends the session as interrupted;
      the 400 response carries the interrupted session
    """
    service = SessionService(store, clock)
    try:
        return service.resume_session(action.session_id)
    except StudyTimeError as e:
        raise _http_error(e)


@router.post("/finish", response_model=Session)
async def finish_session(
    action: SessionAction,
    store=Depends(get_database),
    clock=Depends(get_clock),
):
    """
    Finish an active session.

    - Session must be active
    - Pause time is excluded from the recorded duration
    """
    service = SessionService(store, clock)
    try:
        return service.finish_session(action.session_id)
    except StudyTimeError as e:
        raise _http_error(e)


@router.put("/edit", response_model=Session)
async def edit_session(
    session_edit: SessionEdit,
    store=Depends(get_database),
    clock=Depends(get_clock),
):
    """
    Correct a completed or interrupted session.

    - Only within the edit window after the session started
    """
    service = SessionService(store, clock)
    try:
        return service.edit_completed_session(
            session_id=session_edit.session_id,
            reason=session_edit.reason,
            new_end_time=session_edit.new_end_time,
            new_subject_id=session_edit.new_subject_id,
        )
    except StudyTimeError as e:
        raise _http_error(e)


@router.get("/current", response_model=Session)
async def get_current_session(
    user_id: int = Query(..., gt=0),
    store=Depends(get_database),
    clock=Depends(get_clock),
):
    """
    Get the user's active or paused session.

    - Returns 404 if no session is live
    """
    service = SessionService(store, clock)
    session = service.get_current_session(user_id)

    if session is None:
        raise HTTPException(status_code=404, detail="No session running")

    return session


@router.get("/{session_id}", response_model=SessionDetail)
async def get_session(
    session_id: int,
    store=Depends(get_database),
    clock=Depends(get_clock),
):
    """Get a session with its pauses."""
    service = SessionService(store, clock)
    try:
        session = service.get_session(session_id)
        pauses = service.get_pauses(session_id)
    except StudyTimeError as e:
        raise _http_error(e)

    return SessionDetail(**session.model_dump(), pauses=pauses)
