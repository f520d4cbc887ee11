"""Interactive instruction entry."""

from __future__ import annotations

from prompt_toolkit import PromptSession
from prompt_toolkit.patch_stdout import patch_stdout


class TerminalPrompt:
    """Ask for an instruction on the terminal; cancel yields None."""

    def __init__(self, session: PromptSession[str] | None = None) -> None:
        self._session = session

    def ask(self, message: str) -> str | None:
        if self._session is None:
            self._session = PromptSession()
        try:
            with patch_stdout(raw=True):
                return self._session.prompt(message)
        except (KeyboardInterrupt, EOFError):
            return None
