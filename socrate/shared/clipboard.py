"""
System clipboard writer using the platform's copy command.
"""

import shutil
import subprocess
import sys
from typing import List, Optional

from socrate.shared.exceptions import ClipboardError

_IS_WINDOWS = sys.platform == "win32"
_IS_MACOS = sys.platform == "darwin"

# Tried in order; the first one found on PATH wins
LINUX_COMMANDS = [
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
]


class SystemClipboard:
    """Pipes text into pbcopy, clip or the first available X11/Wayland tool."""

    def __init__(self, command: Optional[List[str]] = None, timeout: int = 5):
        self.command = command
        self.timeout = timeout

    def _resolve_command(self) -> List[str]:
        if self.command:
            return self.command
        if _IS_MACOS:
            return ["pbcopy"]
        if _IS_WINDOWS:
            return ["clip"]
        for candidate in LINUX_COMMANDS:
            if shutil.which(candidate[0]):
                return candidate
        raise ClipboardError("No clipboard command available (install wl-clipboard or xclip)")

    def write(self, text: str) -> None:
        command = self._resolve_command()
        try:
            process = subprocess.run(
                command,
                input=text,
                text=True,
                capture_output=True,
                timeout=self.timeout,
                shell=False,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise ClipboardError(f"{command[0]} failed: {str(e)}") from e

        if process.returncode != 0:
            raise ClipboardError(
                f"{command[0]} exited with {process.returncode}: {process.stderr.strip()}"
            )
