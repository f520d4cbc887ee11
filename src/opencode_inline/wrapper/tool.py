"""Underlying AI tool invocation."""

from __future__ import annotations

import shlex
import subprocess
from collections.abc import Sequence

from loguru import logger

from ..errors import ExternalToolError
from .settings import WrapperSettings

EXIT_NOT_EXECUTABLE = 126
EXIT_NOT_FOUND = 127

# Bytes the AI tool or the host send that are not UTF-8 survive the round trip.
ENCODING_ERRORS = "surrogateescape"


def tool_argv(settings: WrapperSettings, prompt: str, forwarded_args: Sequence[str]) -> list[str]:
    argv = [*shlex.split(settings.tool), *forwarded_args]
    if settings.prompt_mode == "argument":
        argv.append(prompt)
    return argv


def invoke_tool(settings: WrapperSettings, prompt: str, forwarded_args: Sequence[str]) -> str:
    """Run the AI tool once and return its stdout, line endings untouched.

    Raises:
        ExternalToolError: the tool could not be spawned or exited non-zero.
    """

    argv = tool_argv(settings, prompt, forwarded_args)
    if not argv:
        raise ExternalToolError("(empty tool command)", EXIT_NOT_FOUND)
    name = argv[0]
    logger.info("wrapper.tool.start tool={} args={} mode={}", name, len(forwarded_args), settings.prompt_mode)
    stdin_payload = prompt.encode("utf-8", ENCODING_ERRORS) if settings.prompt_mode == "stdin" else None
    try:
        # stderr is inherited so tool diagnostics reach the caller unchanged.
        completed = subprocess.run(  # noqa: S603
            argv,
            input=stdin_payload,
            stdin=subprocess.DEVNULL if stdin_payload is None else None,
            stdout=subprocess.PIPE,
            check=False,
        )
    except FileNotFoundError as exc:
        raise ExternalToolError(name, EXIT_NOT_FOUND, str(exc)) from exc
    except PermissionError as exc:
        raise ExternalToolError(name, EXIT_NOT_EXECUTABLE, str(exc)) from exc

    if completed.returncode != 0:
        raise ExternalToolError(name, completed.returncode)
    return (completed.stdout or b"").decode("utf-8", ENCODING_ERRORS)
