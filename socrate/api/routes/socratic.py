"""
Socratic dialogue endpoints.
"""

from fastapi import APIRouter, Depends

from socrate.api.dependencies import get_session, get_socratic
from socrate.api.schemas import SessionSnapshot, TextRequest, SelectProblemRequest
from socrate.core.socratic import SocraticController
from socrate.session.state import SessionState
from socrate.shared.exceptions import ControllerBusyError

router = APIRouter(prefix="/sessions/{session_id}/socratic", tags=["socratic"])


@router.post("/select", response_model=SessionSnapshot)
async def select_problem(
    body: SelectProblemRequest,
    state: SessionState = Depends(get_session),
    controller: SocraticController = Depends(get_socratic),
):
    """Start a fresh dialogue on one problem."""
    controller.select(state, state.get_problem(body.problem_id))
    return SessionSnapshot.from_state(state)


@router.post("", response_model=SessionSnapshot)
async def respond(
    body: TextRequest,
    state: SessionState = Depends(get_session),
    controller: SocraticController = Depends(get_socratic),
):
    if state.socratic_busy:
        raise ControllerBusyError("Socrates is still thinking")
    await controller.respond(state, body.text)
    return SessionSnapshot.from_state(state)


@router.post("/insight", response_model=SessionSnapshot)
async def save_insight(
    body: TextRequest,
    state: SessionState = Depends(get_session),
    controller: SocraticController = Depends(get_socratic),
):
    controller.save_insight(state, body.text)
    return SessionSnapshot.from_state(state)


@router.delete("/insight", response_model=SessionSnapshot)
async def abandon_insight(
    state: SessionState = Depends(get_session),
    controller: SocraticController = Depends(get_socratic),
):
    """Skip insight capture and free the dialogue."""
    controller.abandon_insight(state)
    return SessionSnapshot.from_state(state)
