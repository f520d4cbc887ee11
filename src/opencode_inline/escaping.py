"""Shell quoting for every token that reaches a command line."""

from __future__ import annotations

import shlex
from collections.abc import Iterable


def shell_escape(value: str) -> str:
    """Quote one string so a POSIX shell reads it back as exactly one word.

    Quotes, backslashes, newlines, `$`, backticks and glob characters all
    survive unchanged; the empty string becomes `''`.
    """

    return shlex.quote(value)


def env_assignment(name: str, value: str) -> str:
    """Render `NAME=value` with only the value quoted."""

    return f"{name}={shell_escape(value)}"


def escape_all(values: Iterable[str]) -> list[str]:
    return [shell_escape(value) for value in values]
