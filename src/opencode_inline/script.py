"""Wrapper executable lookup."""

from __future__ import annotations

import os
import shutil
import sysconfig
from pathlib import Path

from loguru import logger

from .errors import ScriptNotExecutableError, ScriptNotFoundError

SCRIPT_NAME = "opencode-stdin"


def bundled_script_path() -> Path:
    """Location pip installs the wrapper to for the running interpreter."""

    return Path(sysconfig.get_path("scripts")) / SCRIPT_NAME


def resolve_script_path(
    configured: Path | str | None = None,
    *,
    search_path: str | None = None,
    bundled: Path | None = None,
) -> Path | None:
    """Resolve the wrapper: configured path, then `PATH`, then the bundled location."""

    if configured is not None and str(configured).strip():
        candidate = Path(configured).expanduser().absolute()
        if candidate.is_file():
            logger.debug("script.resolve source=configured path={}", candidate)
            return candidate

    in_path = shutil.which(SCRIPT_NAME, path=search_path)
    if in_path:
        logger.debug("script.resolve source=path path={}", in_path)
        return Path(in_path)

    fallback = bundled if bundled is not None else bundled_script_path()
    if fallback.is_file():
        logger.debug("script.resolve source=bundled path={}", fallback)
        return fallback

    return None


def ensure_script(path: Path | None) -> Path:
    """Return `path` when it is an executable file, raise otherwise."""

    if path is None:
        raise ScriptNotFoundError(SCRIPT_NAME)
    if not os.access(path, os.X_OK):
        raise ScriptNotExecutableError(path)
    return path
