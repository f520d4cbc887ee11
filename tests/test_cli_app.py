import shlex
from pathlib import Path

import pytest
from typer.testing import CliRunner

from opencode_inline.cli.app import app, parse_line_range
from opencode_inline.types import LineRange

runner = CliRunner()


@pytest.fixture(autouse=True)
def _quiet_logs(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENCODE_INLINE_LOG_LEVEL", "CRITICAL")


@pytest.fixture
def config_file(tmp_path: Path, recording_wrapper: Path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(
        f"script_path: {recording_wrapper}\n"
        "presets:\n"
        "  shout:\n"
        "    key: <leader>ks\n"
        "    instruction: Shout it\n"
        "    args: [--agent, loud]\n",
        encoding="utf-8",
    )
    return path


def test_command_prints_range_filter(config_file: Path, recording_wrapper: Path) -> None:
    result = runner.invoke(
        app,
        ["command", "-i", "Add $(types)", "-r", "2,5", "--filetype", "python", "-c", str(config_file), "--", "--model", "m"],
    )

    assert result.exit_code == 0, result.output
    rendered = result.output.strip()
    assert rendered.startswith("2,5! ")
    assert shlex.split(rendered.split("! ", 1)[1]) == [
        "NVIM_FILETYPE=python",
        "CLAUDE_STRIP_CODEBLOCK=1",
        str(recording_wrapper),
        "Add $(types)",
        "--model",
        "m",
    ]


def test_command_without_range_targets_visual_selection(config_file: Path) -> None:
    result = runner.invoke(app, ["command", "-i", "Explain", "-c", str(config_file)])
    assert result.exit_code == 0, result.output
    assert result.output.startswith("'<,'>! ")


def test_command_with_blank_instruction_fails(config_file: Path) -> None:
    result = runner.invoke(app, ["command", "-i", "  ", "-c", str(config_file)])
    assert result.exit_code == 1


def test_run_rewrites_file_in_place(tmp_path: Path, config_file: Path, recording_wrapper: Path) -> None:
    source = tmp_path / "demo.py"
    source.write_text("a = 1\nb = 2\nc = 3\n", encoding="utf-8")

    result = runner.invoke(app, ["run", str(source), "-p", "shout", "-r", "2,3", "-c", str(config_file)])

    assert result.exit_code == 0, result.output
    assert source.read_text(encoding="utf-8") == "a = 1\nB = 2\nC = 3\n"
    assert Path(f"{recording_wrapper}.args").read_text(encoding="utf-8").splitlines() == [
        "Shout it",
        "--agent",
        "loud",
    ]


def test_run_stdout_leaves_file_alone(tmp_path: Path, config_file: Path) -> None:
    source = tmp_path / "notes.md"
    source.write_text("hello\n", encoding="utf-8")

    result = runner.invoke(app, ["run", str(source), "-i", "upper", "--stdout", "-c", str(config_file)])

    assert result.exit_code == 0, result.output
    assert result.stdout == "HELLO\n"
    assert source.read_text(encoding="utf-8") == "hello\n"


def test_run_reports_filter_failure(tmp_path: Path, write_script) -> None:
    failing = write_script("broken-wrapper", "exit 5")
    config = tmp_path / "broken.yaml"
    config.write_text(f"script_path: {failing}\n", encoding="utf-8")
    source = tmp_path / "a.txt"
    source.write_text("keep me\n", encoding="utf-8")

    result = runner.invoke(app, ["run", str(source), "-i", "anything", "-c", str(config)])

    assert result.exit_code == 1
    assert source.read_text(encoding="utf-8") == "keep me\n"


def test_run_rejects_unknown_preset(tmp_path: Path, config_file: Path) -> None:
    source = tmp_path / "a.txt"
    source.write_text("x\n", encoding="utf-8")
    result = runner.invoke(app, ["run", str(source), "-p", "nope", "-c", str(config_file)])
    assert result.exit_code != 0


def test_presets_lists_defaults_and_custom(config_file: Path) -> None:
    result = runner.invoke(app, ["presets", "-c", str(config_file)])

    assert result.exit_code == 0
    assert "explain: trigger=<leader>ke desc=AI: Explain in comments" in result.output
    assert "shout: trigger=<leader>ks desc=- args=--agent loud" in result.output


def test_triggers_lists_registered_entries(config_file: Path) -> None:
    result = runner.invoke(app, ["triggers", "-c", str(config_file)])

    assert result.exit_code == 0
    assert "v <leader>k: AI: Transform with Claude" in result.output
    assert "v <leader>ks: Claude preset: shout" in result.output
    assert ":OpencodeInline:" in result.output


def test_parse_line_range() -> None:
    assert parse_line_range("3,7") == LineRange(3, 7)
    assert parse_line_range("4") == LineRange(4, 4)
    assert parse_line_range(None) is None
