"""Editor-facing session: setup, triggers, user command and filter runs."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any, Protocol

from loguru import logger

from .buffer import TextBuffer
from .command import build_command, is_blank
from .config import InlineSettings, Preset, load_settings
from .errors import InlineError, InvalidRangeError
from .filter import FilterResult, run_range_filter
from .script import ensure_script, resolve_script_path
from .triggers import CommandInvocation, TriggerBinder, TriggerRegistry
from .types import CommandLine, ExecutionRequest, LineRange

USER_COMMAND = "OpencodeInline"
VISUAL_MODE = "v"


class EditorHost(Protocol):
    """What the plugin needs from the editing surface."""

    def current_buffer(self) -> TextBuffer: ...

    def ask(self, message: str) -> str | None: ...


class InlinePlugin:
    """Holds one frozen settings value and the triggers registered from it."""

    def __init__(
        self,
        host: EditorHost,
        *,
        binder: TriggerBinder | None = None,
        settings_loader: Callable[..., InlineSettings] = load_settings,
    ) -> None:
        self.host = host
        self.registry = TriggerRegistry(binder)
        self._settings_loader = settings_loader
        self._settings: InlineSettings | None = None

    @property
    def settings(self) -> InlineSettings:
        """Current settings; defaults are loaded lazily before the first setup."""

        if self._settings is None:
            settings = self._settings_loader()
            self._settings = settings.model_copy(update={"script_path": resolve_script_path(settings.script_path)})
        return self._settings

    def setup(self, opts: Mapping[str, Any] | None = None) -> InlineSettings:
        """Replace the configuration and re-register every trigger."""

        settings = self._settings_loader(overrides=opts or None)
        settings = settings.model_copy(update={"script_path": resolve_script_path(settings.script_path)})
        self._settings = settings
        self._report(self.script_path)

        self.registry.begin_generation()
        self._register_prompt_mapping(settings)
        for name, preset in settings.presets.items():
            self._register_preset(name, preset)
        self._register_cmd_mapping(settings)
        self.registry.register_command(
            USER_COMMAND,
            lambda invocation: self._report(lambda: self.run_user_command(invocation)),
            description="Send selected lines through the AI tool",
        )
        return settings

    def script_path(self) -> Path:
        """Resolved wrapper, re-resolving when setup found none."""

        settings = self.settings
        if settings.script_path is None:
            script = resolve_script_path()
            if script is not None:
                settings = settings.model_copy(update={"script_path": script})
                self._settings = settings
        return ensure_script(settings.script_path)

    def build_request(
        self,
        instruction: str,
        extra_args: Sequence[str] = (),
        line_range: LineRange | None = None,
        *,
        filetype: str,
    ) -> ExecutionRequest:
        settings = self.settings
        return ExecutionRequest(
            instruction=instruction,
            filetype=filetype,
            extra_args=tuple(extra_args),
            default_args=tuple(settings.default_args),
            env_overrides=dict(settings.env),
            line_range=line_range,
            strip_codeblock=settings.strip_codeblock,
        )

    def build_command(
        self,
        instruction: str | None,
        extra_args: Sequence[str] = (),
        line_range: LineRange | None = None,
        *,
        filetype: str,
    ) -> CommandLine | None:
        """Command for one run, or None when the instruction is blank."""

        if instruction is None or is_blank(instruction):
            return None
        request = self.build_request(instruction, extra_args, line_range, filetype=filetype)
        return build_command(request, self.script_path())

    def apply_filter(
        self,
        instruction: str | None,
        extra_args: Sequence[str] = (),
        line_range: LineRange | None = None,
    ) -> FilterResult | None:
        buffer = self.host.current_buffer()
        command = self.build_command(instruction, extra_args, line_range, filetype=buffer.effective_filetype)
        if command is None:
            return None
        return run_range_filter(buffer, command)

    def prompt_for_instruction(self, line_range: LineRange | None = None) -> FilterResult | None:
        instruction = self.host.ask(self.settings.input_prompt)
        if instruction is None or is_blank(instruction):
            return None
        return self.apply_filter(instruction, (), line_range)

    def apply_visual(self, instruction: str, extra_args: Sequence[str] = ()) -> FilterResult | None:
        return self.apply_filter(instruction, extra_args)

    def prompt_visual(self) -> FilterResult | None:
        return self.prompt_for_instruction()

    def run_user_command(self, invocation: CommandInvocation) -> FilterResult | None:
        line_range = None
        if invocation.range_count == 2:
            try:
                line_range = LineRange(invocation.line1, invocation.line2)
            except ValueError as exc:
                raise InvalidRangeError(str(exc)) from exc
        if is_blank(invocation.args):
            return self.prompt_for_instruction(line_range)
        return self.apply_filter(invocation.args, (), line_range)

    def _register_prompt_mapping(self, settings: InlineSettings) -> None:
        lhs = settings.mappings.prompt
        if not lhs:
            return
        self.registry.register(
            VISUAL_MODE,
            lhs,
            lambda: self._report(self.prompt_visual),
            description=settings.mappings.prompt_desc or "AI: Transform with Claude",
        )

    def _register_preset(self, name: str, preset: Preset) -> None:
        if preset.is_inert or preset.trigger is None:
            return
        self.registry.register(
            VISUAL_MODE,
            preset.trigger,
            lambda: self._report(lambda: self.apply_visual(preset.instruction, preset.extra_args)),
            description=preset.description or f"Claude preset: {name}",
        )

    def _register_cmd_mapping(self, settings: InlineSettings) -> None:
        prompt_lhs = settings.mappings.prompt
        if not settings.cmd_map or not prompt_lhs or settings.cmd_map == prompt_lhs:
            return
        self.registry.register(
            VISUAL_MODE,
            settings.cmd_map,
            lambda: self.registry.fire(VISUAL_MODE, prompt_lhs),
            description="Cmd+K -> Claude inline",
        )

    @staticmethod
    def _report(action: Callable[[], Any]) -> Any:
        """Run `action`, turning plugin errors into diagnostics."""

        try:
            return action()
        except InlineError as exc:
            logger.error("opencode-inline: {}", exc)
            return None
