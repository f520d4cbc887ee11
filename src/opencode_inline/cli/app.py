"""Command-line host for opencode-inline: run instructions over files."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
from pathlib import Path

import typer
from loguru import logger

from opencode_inline.buffer import DEFAULT_FILETYPE, TextBuffer
from opencode_inline.config import load_settings
from opencode_inline.errors import InlineError
from opencode_inline.logging_utils import configure_logging
from opencode_inline.plugin import InlinePlugin
from opencode_inline.prompting import TerminalPrompt
from opencode_inline.types import LineRange

app = typer.Typer(
    name="opencode-inline",
    help="Rewrite a range of lines with an instruction sent to an AI command-line tool.",
    add_completion=False,
)

EXTRA_ARGS_SETTINGS = {"allow_extra_args": True, "ignore_unknown_options": True}


@dataclass
class FileHost:
    """Editor host backed by one file buffer and the terminal."""

    buffer: TextBuffer = field(default_factory=TextBuffer)
    prompt: TerminalPrompt = field(default_factory=TerminalPrompt)

    def current_buffer(self) -> TextBuffer:
        return self.buffer

    def ask(self, message: str) -> str | None:
        return self.prompt.ask(message)


def parse_line_range(value: str | None) -> LineRange | None:
    """Parse `START,END` or a single line number."""

    if value is None or not value.strip():
        return None
    start_text, _, end_text = value.partition(",")
    try:
        start = int(start_text)
        end = int(end_text) if end_text else start
        return LineRange(start, end)
    except ValueError as exc:
        raise typer.BadParameter(f"invalid range {value!r}, expected START,END") from exc


def _load_plugin(host: FileHost, config: Path | None) -> InlinePlugin:
    plugin = InlinePlugin(host, settings_loader=partial(load_settings, config))
    plugin.setup()
    return plugin


def _resolve_instruction(
    plugin: InlinePlugin,
    instruction: str | None,
    preset: str | None,
    extra_args: list[str],
) -> tuple[str | None, list[str]]:
    if preset is None:
        return instruction, extra_args
    selected = plugin.settings.presets.get(preset)
    if selected is None:
        raise typer.BadParameter(f"unknown preset {preset!r}", param_hint="--preset")
    return selected.instruction, [*selected.extra_args, *extra_args]


@app.callback()
def main_callback(
    log_level: str | None = typer.Option(None, "--log-level", help="Log level for diagnostics"),
) -> None:
    configure_logging(profile="cli", level=log_level)


@app.command("run", context_settings=EXTRA_ARGS_SETTINGS)
def run(
    ctx: typer.Context,
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="File to edit"),  # noqa: B008
    instruction: str | None = typer.Option(None, "--instruction", "-i", help="Instruction for the AI tool"),
    preset: str | None = typer.Option(None, "--preset", "-p", help="Use a configured preset"),
    line_range: str | None = typer.Option(None, "--range", "-r", help="Lines START,END; whole file when omitted"),
    filetype: str | None = typer.Option(None, "--filetype", help="Override the detected filetype"),
    to_stdout: bool = typer.Option(False, "--stdout", help="Print the result instead of writing the file"),
    config: Path | None = typer.Option(None, "--config", "-c", help="YAML config file"),  # noqa: B008
) -> None:
    """Run one instruction over a range of FILE. Arguments after `--` go to the AI tool."""

    buffer = TextBuffer.from_file(file, filetype=filetype)
    host = FileHost(buffer=buffer)
    explicit_range = parse_line_range(line_range)
    try:
        plugin = _load_plugin(host, config)
        text, extra_args = _resolve_instruction(plugin, instruction, preset, list(ctx.args))
        if explicit_range is None:
            buffer.select_all()
        if text is None:
            result = plugin.prompt_for_instruction(explicit_range)
        else:
            result = plugin.apply_filter(text, extra_args, explicit_range)
    except InlineError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(1) from exc

    if result is None:
        logger.info("filter.skipped reason=blank_instruction")
        return
    if to_stdout:
        typer.echo(buffer.text(), nl=False)
        return
    buffer.save()
    logger.info("filter.done file={} range={} lines={}", file, result.line_range, len(result.output_lines))


@app.command("command", context_settings=EXTRA_ARGS_SETTINGS)
def show_command(
    ctx: typer.Context,
    instruction: str | None = typer.Option(None, "--instruction", "-i", help="Instruction for the AI tool"),
    preset: str | None = typer.Option(None, "--preset", "-p", help="Use a configured preset"),
    line_range: str | None = typer.Option(None, "--range", "-r", help="Lines START,END; visual marks when omitted"),
    filetype: str = typer.Option(DEFAULT_FILETYPE, "--filetype", help="Filetype hint"),
    config: Path | None = typer.Option(None, "--config", "-c", help="YAML config file"),  # noqa: B008
) -> None:
    """Print the range-filter command without running it."""

    try:
        plugin = _load_plugin(FileHost(), config)
        text, extra_args = _resolve_instruction(plugin, instruction, preset, list(ctx.args))
        command = plugin.build_command(text, extra_args, parse_line_range(line_range), filetype=filetype)
    except InlineError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(1) from exc
    if command is None:
        typer.echo("error: instruction is blank", err=True)
        raise typer.Exit(1)
    typer.echo(str(command))


@app.command("presets")
def list_presets(
    config: Path | None = typer.Option(None, "--config", "-c", help="YAML config file"),  # noqa: B008
) -> None:
    """Show configured presets."""

    try:
        settings = load_settings(config)
    except InlineError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(1) from exc
    if not settings.presets:
        typer.echo("(no presets)")
        return
    for name, preset in settings.presets.items():
        trigger = preset.trigger or "(inert)"
        rendered = f"{name}: trigger={trigger} desc={preset.description or '-'}"
        if preset.extra_args:
            rendered += f" args={' '.join(preset.extra_args)}"
        typer.echo(rendered)
        typer.echo(f"  {preset.instruction}")


@app.command("triggers")
def list_triggers(
    config: Path | None = typer.Option(None, "--config", "-c", help="YAML config file"),  # noqa: B008
) -> None:
    """Show triggers and commands registered by setup."""

    try:
        plugin = _load_plugin(FileHost(), config)
    except InlineError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(1) from exc
    for trigger in plugin.registry.triggers():
        typer.echo(f"{trigger.mode} {trigger.lhs}: {trigger.description}")
    for command in plugin.registry.commands():
        typer.echo(f":{command.name}: {command.description}")

