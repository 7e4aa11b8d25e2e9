"""
Pydantic models for conversation, problems, Socratic dialogue and insights.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List, Literal
from datetime import datetime


class Turn(BaseModel):
    """One message of the root-cause conversation."""
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    text: str
    identified_problems: Optional[List[str]] = None
    needs_more_exploration: Optional[bool] = None
    next_question: Optional[str] = None


class Problem(BaseModel):
    """A user difficulty surfaced by the model."""
    id: int
    text: str
    status: str = "pending"
    created_at: datetime = Field(default_factory=datetime.now)


class SocraticTurn(BaseModel):
    """One message of the five-whys dialogue."""
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "socrate"]
    text: str
    dialogue_depth: Optional[int] = None
    core_insight_reached: Optional[bool] = None
    final_reflection: Optional[str] = None
    ask_for_insight: Optional[bool] = None


class Insight(BaseModel):
    """User-authored reflection captured at the end of a dialogue."""
    model_config = ConfigDict(frozen=True)

    id: int
    text: str
    problem_id: int
    problem_text: str
    created_at: datetime = Field(default_factory=datetime.now)


class ConversationReply(BaseModel):
    """Structured reply expected from the root-cause prompt."""
    response: str
    identified_problems: List[str] = Field(default_factory=list)
    needs_more_exploration: bool = False
    next_question: Optional[str] = None

    @field_validator("identified_problems", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value

    @classmethod
    def degraded(
        cls,
        raw_text: str,
        fallback_question: Optional[str] = None
    ) -> "ConversationReply":
        """Reply used when the model output holds no usable JSON."""
        if fallback_question:
            return cls(
                response=raw_text,
                needs_more_exploration=True,
                next_question=fallback_question,
            )
        return cls(response=raw_text)


class SocraticReply(BaseModel):
    """Structured reply expected from the five-whys prompt."""
    response: str
    dialogue_depth: int = 1
    core_insight_reached: bool = False
    final_reflection: Optional[str] = None
    ask_for_insight: bool = False

    @classmethod
    def degraded(cls, raw_text: str) -> "SocraticReply":
        return cls(response=raw_text)
