"""Application-level exception types for opencode-inline."""

from __future__ import annotations

from pathlib import Path


class InlineError(Exception):
    """Base exception for opencode-inline."""


class ConfigurationError(InlineError):
    """Raised when the configuration file or values are invalid."""


class ScriptResolutionError(InlineError):
    """Base exception for wrapper executable lookup failures."""


class ScriptNotFoundError(ScriptResolutionError):
    """Raised when no wrapper executable resolves from any candidate location."""

    def __init__(self, name: str) -> None:
        super().__init__(f"unable to locate {name} script")
        self.name = name


class ScriptNotExecutableError(ScriptResolutionError):
    """Raised when the resolved wrapper path lacks execute permission."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"script not executable at {path}")
        self.path = path


class InvalidRangeError(InlineError):
    """Raised when a line range does not fit the buffer."""


class FilterFailedError(InlineError):
    """Raised when the range filter command exits with a failure."""

    def __init__(self, returncode: int, stderr: str = "") -> None:
        detail = stderr.strip() or "(empty)"
        super().__init__(f"filter exited with {returncode}: {detail}")
        self.returncode = returncode
        self.stderr = stderr


class ExternalToolError(InlineError):
    """Raised when the underlying AI tool fails or cannot be spawned."""

    def __init__(self, command: str, returncode: int, detail: str = "") -> None:
        message = f"{command} exited with {returncode}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.command = command
        self.returncode = returncode
