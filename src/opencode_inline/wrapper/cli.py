"""`opencode-stdin` entry point.

Positional argument 1 is the instruction; every further argument is
forwarded to the AI tool unchanged. The selection arrives on stdin and
the replacement text leaves on stdout.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import BinaryIO

from loguru import logger

from ..errors import ExternalToolError
from ..logging_utils import configure_logging
from .extract import reduce_response
from .framing import frame_prompt
from .settings import WrapperSettings
from .tool import ENCODING_ERRORS, invoke_tool

EXIT_USAGE = 2
USAGE = "usage: opencode-stdin INSTRUCTION [TOOL_ARGS...] < selection"


def run_wrapper(
    instruction: str,
    body: str,
    forwarded_args: Sequence[str],
    settings: WrapperSettings,
    stdout: BinaryIO,
) -> int:
    """Frame, invoke, extract, write. Returns the process exit code."""

    prompt = frame_prompt(instruction, body, settings.filetype)
    try:
        response = invoke_tool(settings, prompt, forwarded_args)
    except ExternalToolError as exc:
        logger.error("wrapper.tool.failed exit={} detail={}", exc.returncode, exc)
        return exc.returncode

    extraction = reduce_response(response, strip_codeblock=settings.strip_codeblock)
    stdout.write(extraction.payload.encode("utf-8", ENCODING_ERRORS))
    stdout.flush()
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    settings = WrapperSettings()
    configure_logging(level=settings.log_level)
    if not args:
        sys.stderr.write(f"{USAGE}\n")
        return EXIT_USAGE

    instruction, forwarded_args = args[0], args[1:]
    body = sys.stdin.buffer.read().decode("utf-8", ENCODING_ERRORS)
    return run_wrapper(instruction, body, forwarded_args, settings, sys.stdout.buffer)


def run() -> None:
    sys.exit(main())
