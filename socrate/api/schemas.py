"""
Request and response models for the HTTP API.
"""

from typing import List, Optional

from pydantic import BaseModel

from socrate.core.models import Turn, Problem, SocraticTurn, Insight
from socrate.session.state import SessionState


class TextRequest(BaseModel):
    """Free text typed by the user."""
    text: str


class SelectProblemRequest(BaseModel):
    problem_id: int


class ProxyRequest(BaseModel):
    """Body accepted by the model proxy."""
    prompt: str
    model: Optional[str] = None


class SessionSnapshot(BaseModel):
    """Everything the view needs to re-render a session."""
    session_id: str
    active_view: str
    conversation: List[Turn]
    problems: List[Problem]
    socratic: List[SocraticTurn]
    insights: List[Insight]
    selected_problem_id: Optional[int]
    conversation_busy: bool
    socratic_busy: bool
    awaiting_insight: bool

    @classmethod
    def from_state(cls, state: SessionState) -> "SessionSnapshot":
        selected = state.selected_problem
        return cls(
            session_id=state.session_id,
            active_view=state.active_view,
            conversation=list(state.conversation),
            problems=[p.model_copy() for p in state.problems],
            socratic=list(state.socratic),
            insights=list(state.insights),
            selected_problem_id=selected.id if selected else None,
            conversation_busy=state.conversation_busy,
            socratic_busy=state.socratic_busy,
            awaiting_insight=state.awaiting_insight,
        )
