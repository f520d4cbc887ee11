"""Prompt framing for the AI tool."""

from __future__ import annotations

import re

GENERIC_TAG = "text"
SYSTEM_FRAMING = (
    "You are an inline code transformation tool. "
    "Apply the instruction to the code below and respond with only the resulting code "
    "in a single fenced code block, without explanations before or after it."
)

_BACKTICK_RUN_RE = re.compile(r"`+")


def fence_for(body: str) -> str:
    """Backtick fence longer than any backtick run inside `body`."""

    longest = max((len(run) for run in _BACKTICK_RUN_RE.findall(body)), default=0)
    return "`" * max(3, longest + 1)


def frame_prompt(instruction: str, body: str, filetype: str = "") -> str:
    """Build the request text; identical inputs always give identical output."""

    tag = filetype.strip() or GENERIC_TAG
    fence = fence_for(body)
    if body and not body.endswith("\n"):
        body += "\n"
    return f"{SYSTEM_FRAMING}\n\nInstruction:\n{instruction}\n\n{fence}{tag}\n{body}{fence}\n"
