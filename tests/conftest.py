from __future__ import annotations

import stat
from collections.abc import Callable
from pathlib import Path

import pytest

ScriptWriter = Callable[..., Path]

_ISOLATED_ENV = (
    "NVIM_FILETYPE",
    "CLAUDE_STRIP_CODEBLOCK",
    "OPENCODE_INLINE_LOG_LEVEL",
    "OPENCODE_INLINE_PRESETS",
    "OPENCODE_INLINE_SCRIPT_PATH",
    "OPENCODE_INLINE_STRIP_CODEBLOCK",
    "OPENCODE_STDIN_TOOL",
    "OPENCODE_STDIN_PROMPT_MODE",
    "OPENCODE_STDIN_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    for name in _ISOLATED_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def write_script(tmp_path: Path) -> ScriptWriter:
    """Write an `sh` script into tmp_path/bin and make it executable."""

    def _write(name: str, body: str, *, executable: bool = True) -> Path:
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir(exist_ok=True)
        path = bin_dir / name
        path.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
        mode = path.stat().st_mode
        if executable:
            path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        else:
            path.chmod(mode & ~(stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH))
        return path

    return _write


@pytest.fixture
def recording_wrapper(write_script: ScriptWriter) -> Path:
    """Fake wrapper: records argv and protocol env vars, upper-cases stdin."""

    return write_script(
        "opencode-stdin",
        'printf \'%s\\n\' "$@" > "$0.args"\n'
        'printf \'%s\\n\' "$NVIM_FILETYPE" "$CLAUDE_STRIP_CODEBLOCK" "${MY_FLAG:-}" > "$0.env"\n'
        "tr a-z A-Z",
    )
