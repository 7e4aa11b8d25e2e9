"""
Socratic dialogue controller: five-whys questioning on one selected problem.

The dialogue depth is whatever the model reports on each reply. The controller
does not count exchanges itself; ``ask_for_insight`` from the model is what
opens the insight-capture step.
"""

import logging
from typing import Optional

from socrate.core.extraction import parse_reply
from socrate.core.models import Problem, SocraticTurn, SocraticReply, Insight
from socrate.core.prompt.builder import PromptBuilder
from socrate.session.state import SessionState, VIEW_SOCRATIC
from socrate.shared.exceptions import GatewayError, InsightPendingError
from socrate.shared.gateway import ModelGateway
from socrate.shared.logging import get_logger, log_with_context

logger = get_logger(__name__)


INSIGHT_DEPTH = 6

OPENING_TEMPLATE = (
    'Hm... I see. I have read your problem carefully: "{problem_text}". \n\n'
    "I take it seriously. I do not belittle it. \n\n"
    "But tell me one thing... **why** is this a problem for you?"
)

INSIGHT_SAVED_TEXT = (
    "Good. Now that you have written down your awareness, it has become part of you. "
    'Remember: "Wisdom begins in wonder." \n\n'
    "If you like, you can keep talking with me or reflect on what you have discovered."
)

INSIGHT_SAVED_REFLECTION = "A new awareness has been recorded in your inner diary."


class SocraticController:
    """Drives the dialogue state machine for the selected problem."""

    def __init__(
        self,
        gateway: ModelGateway,
        prompt_builder: Optional[PromptBuilder] = None
    ):
        self.gateway = gateway
        self.prompts = prompt_builder or PromptBuilder()

    def select(self, state: SessionState, problem: Problem) -> SocraticTurn:
        """Start a fresh dialogue on a problem. No model call is made."""
        opening = SocraticTurn(
            role="socrate",
            text=OPENING_TEMPLATE.format(problem_text=problem.text),
        )
        state.selected_problem_id = problem.id
        state.active_view = VIEW_SOCRATIC
        state.socratic = [opening]
        state.awaiting_insight = False
        state.touch()

        log_with_context(
            logger, logging.INFO, "Socratic dialogue started",
            session_id=state.session_id, action="dialogue_started", problem_id=problem.id,
        )
        return opening

    async def respond(self, state: SessionState, user_text: str) -> Optional[SocraticTurn]:
        """
        Send one user answer and append Socrates' reply.

        Returns:
            The reply turn, or None for blank input, no selected problem, or
            a reply that arrives after the dialogue was restarted

        Raises:
            InsightPendingError while the dialogue waits for the insight text
        """
        problem = state.selected_problem
        if not user_text or not user_text.strip() or problem is None:
            return None

        if state.awaiting_insight:
            raise InsightPendingError("Write down your insight before continuing the dialogue")

        state.socratic.append(SocraticTurn(role="user", text=user_text))
        state.socratic_busy = True
        state.touch()
        dialogue = state.socratic

        try:
            prompt = self.prompts.socratic(problem.text, dialogue)
            raw_text = await self.gateway.generate(prompt)
            reply = parse_reply(raw_text, SocraticReply, SocraticReply.degraded)

            reply_turn = SocraticTurn(
                role="socrate",
                text=reply.response,
                dialogue_depth=reply.dialogue_depth,
                core_insight_reached=reply.core_insight_reached,
                final_reflection=reply.final_reflection,
                ask_for_insight=reply.ask_for_insight,
            )

        except GatewayError as e:
            log_with_context(
                logger, logging.ERROR, f"Error talking to Socrates: {str(e)}",
                session_id=state.session_id, action="socratic_gateway_error",
            )
            reply_turn = SocraticTurn(
                role="socrate",
                text=f"Sorry, something went wrong: {str(e)}",
                dialogue_depth=1,
                core_insight_reached=False,
            )

        finally:
            state.socratic_busy = False

        if state.socratic is not dialogue or state.selected_problem_id != problem.id:
            # Another problem was selected while the call was outstanding
            log_with_context(
                logger, logging.WARNING, "Dropping reply for a replaced dialogue",
                session_id=state.session_id, action="stale_reply_dropped", problem_id=problem.id,
            )
            return None

        dialogue.append(reply_turn)
        if reply_turn.ask_for_insight:
            state.awaiting_insight = True

        return reply_turn

    def save_insight(self, state: SessionState, text: str) -> Optional[Insight]:
        """Record the user's insight and close the dialogue round."""
        problem = state.selected_problem
        if not text or not text.strip() or problem is None:
            return None

        insight = state.add_insight(text, problem)
        state.awaiting_insight = False
        state.socratic.append(SocraticTurn(
            role="socrate",
            text=INSIGHT_SAVED_TEXT,
            dialogue_depth=INSIGHT_DEPTH,
            core_insight_reached=True,
            final_reflection=INSIGHT_SAVED_REFLECTION,
        ))
        state.touch()

        log_with_context(
            logger, logging.INFO, "Insight recorded",
            session_id=state.session_id, action="insight_saved", problem_id=problem.id,
        )
        return insight

    def abandon_insight(self, state: SessionState) -> bool:
        """Leave insight capture without recording anything."""
        was_awaiting = state.awaiting_insight
        state.awaiting_insight = False
        return was_awaiting
