"""Range-filter command construction."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from .escaping import env_assignment, escape_all, shell_escape
from .script import ensure_script
from .types import VISUAL_RANGE, CommandLine, ExecutionRequest, LineRange

FILETYPE_ENV = "NVIM_FILETYPE"
STRIP_CODEBLOCK_ENV = "CLAUDE_STRIP_CODEBLOCK"


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def env_value(value: object) -> str:
    """Render an override value; booleans as `true`/`false`."""

    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def range_spec(line_range: LineRange | None) -> str:
    """Explicit `start,end`, or the visual selection marks."""

    if line_range is None:
        return VISUAL_RANGE
    return f"{line_range.start:d},{line_range.end:d}"


def assemble_command(request: ExecutionRequest, script_path: Path) -> CommandLine:
    """Lay out env assignments, script, instruction and args; every value escaped once."""

    tokens = [
        env_assignment(FILETYPE_ENV, request.filetype),
        env_assignment(STRIP_CODEBLOCK_ENV, "1" if request.strip_codeblock else "0"),
    ]
    for key, value in request.env_overrides.items():
        # Keys are identifiers by contract and are not quoted.
        if is_blank(key) or value is None:
            continue
        tokens.append(env_assignment(key, env_value(value)))

    tokens.append(shell_escape(str(script_path)))
    tokens.append(shell_escape(request.instruction))
    tokens.extend(escape_all(request.default_args))
    tokens.extend(escape_all(request.extra_args))
    return CommandLine(range_spec=range_spec(request.line_range), tokens=tuple(tokens))


def build_command(request: ExecutionRequest, script_path: Path | None) -> CommandLine | None:
    """Build the range-filter command, or None for a blank instruction.

    Raises:
        ScriptNotFoundError: no wrapper was resolved.
        ScriptNotExecutableError: the wrapper lacks execute permission.
    """

    if is_blank(request.instruction):
        return None

    script = ensure_script(script_path)
    command = assemble_command(request, script)
    logger.info(
        "command.build range={} script={} filetype={} strip={} args={}",
        command.range_spec,
        script,
        request.filetype,
        request.strip_codeblock,
        len(request.default_args) + len(request.extra_args),
    )
    return command
