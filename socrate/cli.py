"""
Interactive terminal front-end for Socrate.
"""

import asyncio
import argparse
import sys
from typing import Callable, Optional

from socrate.core.conversation import ConversationController
from socrate.core.diary import DiaryExporter
from socrate.core.prompt.builder import PromptBuilder
from socrate.core.socratic import SocraticController
from socrate.session.manager import SessionManager
from socrate.session.state import SessionState, VIEW_FIND, VIEW_SOCRATIC, VIEW_DIARY
from socrate.shared.clipboard import SystemClipboard
from socrate.shared.config import settings
from socrate.shared.exceptions import SocrateError
from socrate.shared.gateway import ModelGateway
from socrate.shared.llm import VendorProxy
from socrate.shared.logging import setup_logging


HELP_TEXT = """Commands:
  /find              back to the root-cause conversation
  /problems          list identified problems
  /edit N TEXT       replace the text of problem N
  /delete N          delete problem N
  /select N          start a Socratic dialogue on problem N
  /insight TEXT      record your insight when Socrates asks for it
  /skip              leave insight capture without recording
  /diary             print the diary
  /copy              copy the diary to the clipboard
  /help              show this help
  /quit              exit
Anything else is sent to the active conversation."""


class TerminalSession:
    """Routes terminal input to the controllers and prints their replies."""

    def __init__(
        self,
        state: SessionState,
        conversation: ConversationController,
        socratic: SocraticController,
        diary: DiaryExporter,
        clipboard: Optional[SystemClipboard] = None,
        out: Callable[[str], None] = print
    ):
        self.state = state
        self.conversation = conversation
        self.socratic = socratic
        self.diary = diary
        self.clipboard = clipboard or SystemClipboard()
        self.out = out

    def _problem_by_number(self, arg: str):
        """Problems are addressed by their 1-based position in the list."""
        try:
            index = int(arg) - 1
        except ValueError:
            return None
        if 0 <= index < len(self.state.problems):
            return self.state.problems[index]
        return None

    def show_problems(self):
        if not self.state.problems:
            self.out("No problems identified yet.")
            return
        for index, problem in enumerate(self.state.problems, start=1):
            self.out(f"  {index}. {problem.text} [{problem.status}]")

    async def handle(self, line: str) -> bool:
        """Process one input line. Returns False when the user quits."""
        line = line.strip()
        if not line:
            return True

        if not line.startswith("/"):
            await self._send(line)
            return True

        command, _, arg = line.partition(" ")
        arg = arg.strip()

        if command == "/quit":
            return False
        elif command == "/help":
            self.out(HELP_TEXT)
        elif command == "/find":
            self.state.active_view = VIEW_FIND
            self.out("Back to the root-cause conversation.")
        elif command == "/problems":
            self.show_problems()
        elif command == "/edit":
            number, _, text = arg.partition(" ")
            problem = self._problem_by_number(number)
            if problem is None:
                self.out("No such problem.")
            else:
                self.conversation.edit_problem(self.state, problem.id, text)
                self.show_problems()
        elif command == "/delete":
            problem = self._problem_by_number(arg)
            if problem is None:
                self.out("No such problem.")
            else:
                self.conversation.delete_problem(self.state, problem.id)
                self.show_problems()
        elif command == "/select":
            problem = self._problem_by_number(arg)
            if problem is None:
                self.out("No such problem.")
            else:
                opening = self.socratic.select(self.state, problem)
                self.out(f"SOCRATES: {opening.text}")
        elif command == "/insight":
            insight = self.socratic.save_insight(self.state, arg)
            if insight is None:
                self.out("Write your insight after /insight, with a problem selected.")
            else:
                self.out(f"SOCRATES: {self.state.socratic[-1].text}")
        elif command == "/skip":
            if self.socratic.abandon_insight(self.state):
                self.out("Insight capture skipped.")
        elif command == "/diary":
            self.state.active_view = VIEW_DIARY
            self.out(self.diary.render(self.state))
        elif command == "/copy":
            if self.diary.copy_to_clipboard(self.state, self.clipboard):
                self.out("Diary copied to the clipboard.")
            else:
                self.out("Could not copy the diary.")
        else:
            self.out(f"Unknown command {command}. Type /help.")

        return True

    async def _send(self, text: str):
        if self.state.active_view == VIEW_SOCRATIC and self.state.selected_problem is not None:
            try:
                turn = await self.socratic.respond(self.state, text)
            except SocrateError as e:
                self.out(str(e))
                return
            if turn is not None:
                self.out(f"SOCRATES: {turn.text}")
                if turn.final_reflection:
                    self.out(f"  💡 {turn.final_reflection}")
                if self.state.awaiting_insight:
                    self.out("(Write your insight with /insight TEXT, or /skip)")
            return

        self.state.active_view = VIEW_FIND
        turn = await self.conversation.submit(self.state, text)
        if turn is None:
            return
        self.out(f"ASSISTANT: {turn.text}")
        if turn.next_question:
            self.out(f"  → {turn.next_question}")
        if turn.identified_problems:
            self.out("New problems:")
            for problem_text in turn.identified_problems:
                self.out(f"  • {problem_text}")
            self.out("(Use /problems and /select N to start a Socratic dialogue)")


async def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Socrate self-reflection chat")
    parser.add_argument(
        "--model",
        default=settings.gateway.default_model,
        help="Vendor model name"
    )
    parser.add_argument(
        "--proxy-url",
        default=settings.gateway.proxy_url,
        help="Model proxy URL; empty calls the vendor in-process"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level"
    )

    args = parser.parse_args()

    setup_logging(log_level=args.log_level)

    gateway = ModelGateway(
        proxy_url=args.proxy_url or None,
        model=args.model,
        proxy=None if args.proxy_url else VendorProxy(default_model=args.model),
        timeout=settings.gateway.timeout_seconds,
    )
    prompt_builder = PromptBuilder()
    terminal = TerminalSession(
        state=SessionManager().create(),
        conversation=ConversationController(gateway, prompt_builder),
        socratic=SocraticController(gateway, prompt_builder),
        diary=DiaryExporter(),
    )

    print("Socrate - tell me what is weighing on you. Type /help for commands.")
    while True:
        try:
            line = await asyncio.to_thread(input, "> ")
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if not await terminal.handle(line):
            break

    return 0


def run():
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
