"""
Session lifecycle and diary export endpoints.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from socrate.api.dependencies import get_session_manager, get_session, get_diary
from socrate.api.schemas import SessionSnapshot
from socrate.core.diary import DiaryExporter
from socrate.session.manager import SessionManager
from socrate.session.state import SessionState, VIEW_DIARY, VIEW_FIND

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("", response_model=SessionSnapshot, status_code=201)
async def create_session(manager: SessionManager = Depends(get_session_manager)):
    """Open a new empty session."""
    return SessionSnapshot.from_state(manager.create())


@router.get("/{session_id}", response_model=SessionSnapshot)
async def read_session(state: SessionState = Depends(get_session)):
    return SessionSnapshot.from_state(state)


@router.delete("/{session_id}", status_code=204)
async def delete_session(
    session_id: str,
    manager: SessionManager = Depends(get_session_manager),
):
    manager.delete(session_id)


@router.post("/{session_id}/view/find", response_model=SessionSnapshot)
async def show_find(state: SessionState = Depends(get_session)):
    """Switch back to the root-cause conversation view."""
    state.active_view = VIEW_FIND
    return SessionSnapshot.from_state(state)


@router.get("/{session_id}/diary", response_class=PlainTextResponse)
async def export_diary(
    state: SessionState = Depends(get_session),
    diary: DiaryExporter = Depends(get_diary),
):
    """Plain-text diary of the whole session."""
    state.active_view = VIEW_DIARY
    return PlainTextResponse(diary.render(state))
