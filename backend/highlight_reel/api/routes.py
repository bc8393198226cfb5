"""API routes."""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from highlight_reel import __version__
from highlight_reel.config import settings
from highlight_reel.playback.errors import (
    EmptyReelError,
    IntervalNotFoundError,
    PlayerBindError,
    PlayerNotReadyError,
)
from highlight_reel.services.session_service import (
    ReelSession,
    SessionNotFoundError,
    SessionService,
    session_service,
)
from highlight_reel.api.schemas import (
    SessionCreate,
    IntervalsUpdate,
    SeekRequest,
    SeekWithinRequest,
    ProgressResponse,
    StartStatusResponse,
    SessionResponse,
    IntervalChangeEventResponse,
    HealthResponse,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def get_session_service() -> SessionService:
    """Dependency to get the session service."""
    return session_service


def _require_session(service: SessionService) -> ReelSession:
    try:
        return service.get_session()
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


async def _take_control(service: SessionService) -> ReelSession:
    """Get the session and cancel any background reel start."""
    session = _require_session(service)
    await session.runner.cancel()
    return session


def _progress_response(session: ReelSession) -> ProgressResponse:
    reel = session.controller.progress()
    segment = session.controller.segment_progress()
    return ProgressResponse(
        position=reel.position,
        total=reel.total,
        percentage=reel.percentage,
        segment_elapsed=segment.elapsed,
        segment_duration=segment.duration,
        segment_percentage=segment.percentage,
    )


def _session_to_response(session: ReelSession) -> SessionResponse:
    controller = session.controller
    return SessionResponse(
        session_id=session.session_id,
        video_id=session.video_id,
        state=controller.state.value,
        is_playing=controller.is_currently_playing(),
        current_interval=controller.current_interval(),
        current_index=controller.store.current_index,
        intervals=list(controller.store.intervals),
        progress=_progress_response(session),
        start=StartStatusResponse(
            status=session.runner.status.value,
            attempts=session.runner.attempts,
            error=session.runner.error,
        ),
        created_at=session.created_at,
    )


# =============================================================================
# Health & System
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check(service: SessionService = Depends(get_session_service)):
    """Check API health."""
    return HealthResponse(
        status="healthy",
        app=settings.app_name,
        version=__version__,
        session_open=service.session is not None,
    )


# =============================================================================
# Session
# =============================================================================

@router.post("/session", response_model=SessionResponse)
async def open_session(
    data: SessionCreate,
    service: SessionService = Depends(get_session_service)
):
    """Open a playback session, replacing any existing one."""
    try:
        session = await service.open_session(data.video_id, data.intervals, data.autoplay)
    except PlayerBindError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _session_to_response(session)


@router.get("/session", response_model=SessionResponse)
async def get_session(service: SessionService = Depends(get_session_service)):
    """Get the active session."""
    return _session_to_response(_require_session(service))


@router.delete("/session")
async def close_session(service: SessionService = Depends(get_session_service)):
    """Destroy the active session."""
    if not await service.close_session():
        raise HTTPException(status_code=404, detail="No playback session is open")
    return {"status": "closed"}


@router.put("/session/intervals", response_model=SessionResponse)
async def replace_intervals(
    data: IntervalsUpdate,
    service: SessionService = Depends(get_session_service)
):
    """Replace the reel's intervals; playback parks at the first one."""
    _require_session(service)
    try:
        session = await service.replace_intervals(data.intervals)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _session_to_response(session)


@router.get("/session/progress", response_model=ProgressResponse)
async def get_progress(service: SessionService = Depends(get_session_service)):
    """Get reel and current highlight progress."""
    return _progress_response(_require_session(service))


@router.get("/session/events", response_model=List[IntervalChangeEventResponse])
async def get_events(service: SessionService = Depends(get_session_service)):
    """List interval change notifications in the order they were emitted."""
    session = _require_session(service)
    return [IntervalChangeEventResponse(**event.to_dict()) for event in session.events]


# =============================================================================
# Playback Control
# =============================================================================

@router.post("/session/play", response_model=SessionResponse)
async def play_reel(service: SessionService = Depends(get_session_service)):
    """Play the reel from the first highlight."""
    _require_session(service)
    try:
        session = await service.start_reel()
    except (PlayerNotReadyError, EmptyReelError) as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _session_to_response(session)


@router.post("/session/pause", response_model=SessionResponse)
async def pause(service: SessionService = Depends(get_session_service)):
    """Pause the reel."""
    session = await _take_control(service)
    session.controller.pause_all()
    return _session_to_response(session)


@router.post("/session/resume", response_model=SessionResponse)
async def resume(service: SessionService = Depends(get_session_service)):
    """Resume sequencing from the current highlight."""
    session = await _take_control(service)
    try:
        session.controller.resume_or_start_from_current()
    except (PlayerNotReadyError, EmptyReelError) as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _session_to_response(session)


@router.post("/session/skip/next", response_model=SessionResponse)
async def skip_next(service: SessionService = Depends(get_session_service)):
    """Skip to the next highlight."""
    session = await _take_control(service)
    try:
        session.controller.skip_next()
    except PlayerNotReadyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _session_to_response(session)


@router.post("/session/skip/previous", response_model=SessionResponse)
async def skip_previous(service: SessionService = Depends(get_session_service)):
    """Skip to the previous highlight."""
    session = await _take_control(service)
    try:
        session.controller.skip_previous()
    except PlayerNotReadyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _session_to_response(session)


@router.post("/session/seek", response_model=SessionResponse)
async def seek(
    data: SeekRequest,
    service: SessionService = Depends(get_session_service)
):
    """Jump to a highlight by index, optionally sequencing from there."""
    session = await _take_control(service)
    if not session.controller.store.is_valid_index(data.index):
        raise HTTPException(status_code=400, detail=f"Invalid highlight index: {data.index}")
    try:
        if data.play:
            session.controller.seek_to_index_and_play(data.index)
        else:
            session.controller.seek_to_index(data.index)
    except PlayerNotReadyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _session_to_response(session)


@router.post("/session/seek-within", response_model=SessionResponse)
async def seek_within(
    data: SeekWithinRequest,
    service: SessionService = Depends(get_session_service)
):
    """Seek to a fraction of the way through the current highlight."""
    session = await _take_control(service)
    try:
        session.controller.seek_within_current(data.fraction)
    except (PlayerNotReadyError, EmptyReelError) as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _session_to_response(session)


@router.post("/session/intervals/{interval_id}/play", response_model=SessionResponse)
async def play_interval(
    interval_id: str,
    service: SessionService = Depends(get_session_service)
):
    """Play one highlight and stop at its end."""
    session = await _take_control(service)
    try:
        session.controller.play_specific_interval_by_id(interval_id)
    except IntervalNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PlayerNotReadyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _session_to_response(session)
