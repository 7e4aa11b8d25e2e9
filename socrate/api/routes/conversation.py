"""
Root-cause conversation and problem list endpoints.
"""

from fastapi import APIRouter, Depends

from socrate.api.dependencies import get_session, get_conversation
from socrate.api.schemas import SessionSnapshot, TextRequest
from socrate.core.conversation import ConversationController
from socrate.session.state import SessionState
from socrate.shared.exceptions import ControllerBusyError

router = APIRouter(prefix="/sessions/{session_id}", tags=["conversation"])


@router.post("/conversation", response_model=SessionSnapshot)
async def submit_message(
    body: TextRequest,
    state: SessionState = Depends(get_session),
    controller: ConversationController = Depends(get_conversation),
):
    """Send a message to the root-cause assistant. Blank text changes nothing."""
    if state.conversation_busy:
        raise ControllerBusyError("A reply is already being generated")
    await controller.submit(state, body.text)
    return SessionSnapshot.from_state(state)


@router.put("/problems/{problem_id}", response_model=SessionSnapshot)
async def edit_problem(
    problem_id: int,
    body: TextRequest,
    state: SessionState = Depends(get_session),
    controller: ConversationController = Depends(get_conversation),
):
    controller.edit_problem(state, problem_id, body.text)
    return SessionSnapshot.from_state(state)


@router.delete("/problems/{problem_id}", response_model=SessionSnapshot)
async def delete_problem(
    problem_id: int,
    state: SessionState = Depends(get_session),
    controller: ConversationController = Depends(get_conversation),
):
    controller.delete_problem(state, problem_id)
    return SessionSnapshot.from_state(state)
