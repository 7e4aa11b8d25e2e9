"""
Diary export: plain-text projection of a session.
"""

import time
from datetime import datetime
from typing import Callable, List, Optional, Protocol

from socrate.session.state import SessionState
from socrate.shared.config import settings, DiaryConfig
from socrate.shared.exceptions import ClipboardError
from socrate.shared.logging import get_logger

logger = get_logger(__name__)


class ClipboardWriter(Protocol):
    def write(self, text: str) -> None: ...


class DiaryExporter:
    """Renders problems, transcripts and insights. Never mutates the session
    except for the transient copied flag."""

    def __init__(
        self,
        config: Optional[DiaryConfig] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self.config = config or settings.diary
        self.clock = clock

    def _fmt(self, value: datetime) -> str:
        return value.strftime(self.config.timestamp_format)

    def render(self, state: SessionState, now: Optional[datetime] = None) -> str:
        """Build the diary text in fixed section order."""
        now = now or datetime.now()
        lines: List[str] = [
            "SOCRATE - SELF-REFLECTION DIARY",
            f"Date: {now.strftime(self.config.date_format)} - Time: {now.strftime(self.config.time_format)}",
            "=" * 50,
            "",
        ]

        lines.append(f"📋 IDENTIFIED PROBLEMS ({len(state.problems)})")
        lines.append("=" * 30)
        lines.append("")
        if not state.problems:
            lines.append("No problems identified yet.")
            lines.append("")
        for index, problem in enumerate(state.problems, start=1):
            lines.append(f"{index}. {problem.text}")
            lines.append(f"   Status: {problem.status}")
            lines.append(f"   Created: {self._fmt(problem.created_at)}")
            lines.append("")

        if state.conversation:
            lines.append("💭 CONVERSATION - FIND THE PROBLEM")
            lines.append("=" * 40)
            lines.append("")
            for turn in state.conversation:
                speaker = "YOU" if turn.role == "user" else "ASSISTANT (Root Cause Analysis)"
                lines.append(f"[{speaker}]: {turn.text}")
                if turn.identified_problems:
                    lines.append(f"   → Problems identified: {', '.join(turn.identified_problems)}")
                lines.append("")

        if state.socratic:
            lines.append("🏛️ DIALOGUE WITH SOCRATES")
            lines.append("=" * 25)
            lines.append("")
            selected = state.selected_problem
            if selected is not None:
                lines.append(f'Problem discussed: "{selected.text}"')
                lines.append("")
            for turn in state.socratic:
                speaker = "YOU" if turn.role == "user" else "SOCRATES"
                lines.append(f"[{speaker}]: {turn.text}")
                if turn.final_reflection:
                    lines.append(f"   💡 FINAL REFLECTION: {turn.final_reflection}")
                lines.append("")

        if state.insights:
            lines.append(f"✨ INSIGHTS REACHED ({len(state.insights)})")
            lines.append("=" * 35)
            lines.append("")
            for index, insight in enumerate(state.insights, start=1):
                lines.append(f'{index}. "{insight.text}"')
                lines.append(f"   Problem: {insight.problem_text}")
                lines.append(f"   Date: {self._fmt(insight.created_at)}")
                lines.append("")

        lines.append("")
        lines.append("=" * 50)
        lines.append("End of diary - Keep going on your journey of self-knowledge.")
        lines.append('"The unexamined life is not worth living" - Socrates')

        return "\n".join(lines) + "\n"

    def copy_to_clipboard(self, state: SessionState, writer: ClipboardWriter) -> bool:
        """Write the diary to the clipboard; failures are logged, not raised."""
        try:
            writer.write(self.render(state))
        except ClipboardError as e:
            logger.error(
                f"Diary copy failed: {str(e)}",
                extra={"session_id": state.session_id, "action": "diary_copy_failed"},
            )
            return False

        state.copied_until = self.clock() + self.config.copied_flash_seconds
        return True

    def is_copied(self, state: SessionState) -> bool:
        """True until the flash delay after a successful copy has elapsed."""
        if state.copied_until is None:
            return False
        if self.clock() >= state.copied_until:
            state.copied_until = None
            return False
        return True
