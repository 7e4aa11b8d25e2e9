"""
Conversation controller: the "find your problem" root-cause chat.
"""

import logging
from typing import Optional

from socrate.core.extraction import parse_reply
from socrate.core.models import Turn, ConversationReply
from socrate.core.prompt.builder import PromptBuilder
from socrate.session.state import SessionState
from socrate.shared.config import settings
from socrate.shared.exceptions import GatewayError
from socrate.shared.gateway import ModelGateway
from socrate.shared.logging import get_logger, log_with_context

logger = get_logger(__name__)


class ConversationController:
    """Appends turns, calls the model and derives problems from its reply."""

    def __init__(
        self,
        gateway: ModelGateway,
        prompt_builder: Optional[PromptBuilder] = None,
        fallback_question: Optional[str] = None
    ):
        self.gateway = gateway
        self.prompts = prompt_builder or PromptBuilder()
        self.fallback_question = fallback_question or settings.conversation.fallback_question

    async def submit(self, state: SessionState, user_text: str) -> Optional[Turn]:
        """
        Send one user message through the root-cause prompt.

        Args:
            state: Session to update
            user_text: Message typed by the user

        Returns:
            The assistant turn appended, or None for blank input
        """
        if not user_text or not user_text.strip():
            return None

        state.conversation.append(Turn(role="user", text=user_text))
        state.conversation_busy = True
        state.touch()

        try:
            prompt = self.prompts.root_cause(state.conversation)
            raw_text = await self.gateway.generate(prompt)
            reply = parse_reply(
                raw_text,
                ConversationReply,
                lambda raw: ConversationReply.degraded(raw, self.fallback_question),
            )

            assistant_turn = Turn(
                role="assistant",
                text=reply.response,
                identified_problems=list(reply.identified_problems),
                needs_more_exploration=reply.needs_more_exploration,
                next_question=reply.next_question,
            )
            state.conversation.append(assistant_turn)

            for problem_text in reply.identified_problems:
                state.add_problem(problem_text)

            if reply.identified_problems:
                log_with_context(
                    logger, logging.INFO, "Problems identified",
                    session_id=state.session_id, action="problems_identified",
                    count=len(reply.identified_problems),
                )

        except GatewayError as e:
            log_with_context(
                logger, logging.ERROR, f"Gateway call failed: {str(e)}",
                session_id=state.session_id, action="conversation_gateway_error",
            )
            assistant_turn = Turn(
                role="assistant",
                text=f"Sorry, an error occurred: {str(e)}. Check your API key and try again.",
                identified_problems=[],
                needs_more_exploration=False,
            )
            state.conversation.append(assistant_turn)

        finally:
            state.conversation_busy = False

        return assistant_turn

    def edit_problem(self, state: SessionState, problem_id: int, text: str):
        """Replace a problem's text; blank text is ignored."""
        if not text or not text.strip():
            return state.get_problem(problem_id)
        return state.edit_problem(problem_id, text)

    def delete_problem(self, state: SessionState, problem_id: int):
        """Remove a problem. Insights keep their copy of its text."""
        problem = state.delete_problem(problem_id)
        log_with_context(
            logger, logging.INFO, "Problem deleted",
            session_id=state.session_id, action="problem_deleted", problem_id=problem_id,
        )
        return problem
