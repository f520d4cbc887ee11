"""First fenced block extraction from AI responses."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

from loguru import logger

OPEN_FENCE_RE = re.compile(r"^ {0,3}(?P<fence>`{3,}|~{3,})(?P<info>.*)$")
CLOSE_FENCE_RE = re.compile(r"^ {0,3}(?P<fence>`{3,}|~{3,})[ \t]*$")


@dataclass(frozen=True)
class Extraction:
    """Either the body of the first fenced block or the response as given."""

    payload: str
    kind: Literal["block", "verbatim"]

    @property
    def matched(self) -> bool:
        return self.kind == "block"


def _opens(line: str) -> str | None:
    match = OPEN_FENCE_RE.match(line)
    if match is None:
        return None
    fence = match.group("fence")
    # Backtick fences cannot carry backticks in their info string.
    if fence[0] == "`" and "`" in match.group("info"):
        return None
    return fence


def _closes(line: str, fence: str) -> bool:
    match = CLOSE_FENCE_RE.match(line)
    if match is None:
        return False
    candidate = match.group("fence")
    return candidate[0] == fence[0] and len(candidate) >= len(fence)


def extract_first_block(text: str) -> Extraction:
    """Return the body lines of the first closed fenced block in `text`."""

    lines = text.splitlines(keepends=True)
    fence: str | None = None
    start = 0
    for index, raw in enumerate(lines):
        line = raw.rstrip("\r\n")
        if fence is None:
            fence = _opens(line)
            start = index + 1
            continue
        if _closes(line, fence):
            return Extraction(payload="".join(lines[start:index]), kind="block")
    return Extraction(payload=text, kind="verbatim")


def reduce_response(text: str, *, strip_codeblock: bool) -> Extraction:
    """Apply the strip flag to one raw response."""

    if not strip_codeblock:
        return Extraction(payload=text, kind="verbatim")
    extraction = extract_first_block(text)
    if not extraction.matched:
        logger.debug("extract.fallback reason=no_fenced_block chars={}", len(text))
    return extraction
