"""Range filter: pipe buffer lines through a shell command and substitute its output."""

from __future__ import annotations

import re
import shutil
import subprocess
from dataclasses import dataclass

from loguru import logger

from .buffer import TextBuffer
from .errors import FilterFailedError, InvalidRangeError
from .types import VISUAL_RANGE, CommandLine, LineRange

RANGE_FILTER_RE = re.compile(r"^(?:(?P<start>\d+),(?P<end>\d+)|'<,'>)!\s?(?P<command>.*)$", re.DOTALL)


@dataclass(frozen=True)
class FilterResult:
    """Outcome of one successful filter run."""

    line_range: LineRange
    output_lines: list[str]
    stderr: str = ""


def parse_range_filter(text: str) -> tuple[str, str]:
    """Split `<a>,<b>!<cmd>` or `'<,'>!<cmd>` into range spec and command."""

    match = RANGE_FILTER_RE.match(text)
    if match is None:
        raise InvalidRangeError(f"not a range filter: {text[:40]!r}")
    if match.group("start") is None:
        return VISUAL_RANGE, match.group("command")
    return f"{match.group('start')},{match.group('end')}", match.group("command")


def resolve_range(buffer: TextBuffer, spec: str) -> LineRange:
    """Turn a range spec into a validated line range of `buffer`."""

    if spec == VISUAL_RANGE:
        if buffer.selection is None:
            raise InvalidRangeError("no visual selection")
        return buffer.validate_range(buffer.selection)

    start_text, _, end_text = spec.partition(",")
    try:
        line_range = LineRange(int(start_text), int(end_text))
    except ValueError as exc:
        raise InvalidRangeError(str(exc)) from exc
    return buffer.validate_range(line_range)


def _output_lines(stdout: str) -> list[str]:
    if not stdout:
        return []
    if stdout.endswith("\n"):
        stdout = stdout[:-1]
    return stdout.split("\n")


def run_range_filter(buffer: TextBuffer, command: CommandLine | str) -> FilterResult:
    """Run one filter command over its range and replace the range in place.

    The buffer is left untouched when the command exits non-zero.
    """

    if isinstance(command, CommandLine):
        spec, shell_command = command.range_spec, command.shell_command
    else:
        spec, shell_command = parse_range_filter(command)
    line_range = resolve_range(buffer, spec)

    payload = "".join(f"{line}\n" for line in buffer.get_lines(line_range))
    shell = shutil.which("sh") or "/bin/sh"
    logger.info("filter.run range={} lines={}", line_range, line_range.end - line_range.start + 1)
    # The command line is built from escaped tokens only. Output is split on "\n" alone.
    completed = subprocess.run(  # noqa: S603
        [shell, "-c", shell_command],
        input=payload.encode("utf-8"),
        capture_output=True,
        check=False,
    )
    stderr = (completed.stderr or b"").decode("utf-8", "replace")
    if completed.returncode != 0:
        logger.error("filter.failed range={} exit={}", line_range, completed.returncode)
        raise FilterFailedError(completed.returncode, stderr)

    output_lines = _output_lines((completed.stdout or b"").decode("utf-8", "replace"))
    buffer.replace_lines(line_range, output_lines)
    return FilterResult(line_range=line_range, output_lines=output_lines, stderr=stderr)
