import shlex
import subprocess
from pathlib import Path

import pytest

from opencode_inline.escaping import env_assignment, escape_all, shell_escape

TRICKY_VALUES = [
    "",
    "plain",
    "two words",
    "it's",
    'say "hi"',
    "back\\slash",
    "line one\nline two",
    "$HOME and ${PATH}",
    "`uname`",
    "a; b | c & d",
    "*.py ?x [ab]",
    "$(rm -rf /)",
    "tab\there",
    "unicode → ✓",
    "'",
    "''",
]


@pytest.mark.parametrize("value", TRICKY_VALUES)
def test_escaped_value_tokenizes_back_to_one_word(value: str) -> None:
    assert shlex.split(shell_escape(value)) == [value]


@pytest.mark.parametrize("value", TRICKY_VALUES)
def test_escaped_value_survives_a_real_shell(value: str) -> None:
    completed = subprocess.run(
        ["sh", "-c", f"printf '%s' {shell_escape(value)}"],
        capture_output=True,
        text=True,
        check=True,
    )
    assert completed.stdout == value


def test_command_substitution_is_never_executed(tmp_path: Path) -> None:
    sentinel = tmp_path / "pwned"
    value = f"$(touch {sentinel}) `touch {sentinel}`"

    completed = subprocess.run(
        ["sh", "-c", f"printf '%s' {shell_escape(value)}"],
        capture_output=True,
        text=True,
        check=True,
    )

    assert completed.stdout == value
    assert not sentinel.exists()


def test_empty_string_is_an_empty_word() -> None:
    assert shell_escape("") == "''"


def test_env_assignment_quotes_only_the_value() -> None:
    rendered = env_assignment("NVIM_FILETYPE", "c++ header")
    assert rendered.startswith("NVIM_FILETYPE=")
    assert shlex.split(rendered) == ["NVIM_FILETYPE=c++ header"]


def test_escape_all_keeps_order() -> None:
    assert shlex.split(" ".join(escape_all(["--model", "a b", ""]))) == ["--model", "a b", ""]
