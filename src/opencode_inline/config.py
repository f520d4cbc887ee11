"""Configuration management for opencode-inline."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, SettingsError

from .errors import ConfigurationError

CONFIG_FILE_NAME = ".opencode-inline.yaml"
USER_CONFIG_PATH = Path("~/.config/opencode-inline/config.yaml")

DEFAULT_PRESETS: dict[str, dict[str, Any]] = {
    "explain": {
        "key": "<leader>ke",
        "instruction": "Explain the selected code succinctly as comments directly in the code. Return only code.",
        "desc": "AI: Explain in comments",
        "args": [],
    },
    "refactor": {
        "key": "<leader>kr",
        "instruction": "Refactor the code to be more readable and idiomatic. Keep behavior the same.",
        "desc": "AI: Refactor",
        "args": [],
    },
    "tests": {
        "key": "<leader>kt",
        "instruction": "Write unit tests for the selected code. Match the project's typical testing style.",
        "desc": "AI: Generate tests",
        "args": [],
    },
}


class Preset(BaseModel):
    """Named instruction bound to a trigger."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    instruction: str
    trigger: str | None = Field(default=None, validation_alias=AliasChoices("trigger", "key"))
    description: str | None = Field(default=None, validation_alias=AliasChoices("description", "desc"))
    extra_args: tuple[str, ...] = Field(default=(), validation_alias=AliasChoices("extra_args", "args"))

    @property
    def is_inert(self) -> bool:
        return not self.trigger


class Mappings(BaseModel):
    """Triggers for the interactive prompt."""

    model_config = ConfigDict(frozen=True)

    prompt: str | None = "<leader>k"
    prompt_desc: str = "AI: Transform with Claude"


class InlineSettings(BaseSettings):
    """Plugin settings.

    Values come from explicit overrides, then the YAML config file, then
    `OPENCODE_INLINE_*` environment variables, then the defaults below.
    """

    script_path: Path | None = Field(default=None, description="Explicit wrapper executable path")
    strip_codeblock: bool = Field(default=True, description="Reduce responses to their first fenced block")
    default_args: tuple[str, ...] = Field(default=(), description="Arguments forwarded on every run")
    input_prompt: str = Field(default="AI instruction: ", description="Interactive prompt text")
    mappings: Mappings = Field(default_factory=Mappings)
    presets: dict[str, Preset] = Field(default_factory=dict)
    cmd_map: str | None = Field(default=None, description="Alias trigger that fires the prompt trigger")
    env: dict[str, Any] = Field(default_factory=dict, description="Extra environment assignments")

    model_config = SettingsConfigDict(
        env_prefix="OPENCODE_INLINE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        frozen=True,
    )

    @field_validator("presets", mode="before")
    @classmethod
    def _drop_disabled_presets(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            return {name: preset for name, preset in value.items() if preset is not None}
        return value

    @field_validator("script_path", mode="before")
    @classmethod
    def _blank_script_path(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class _EnvironmentPresets(BaseSettings):
    """Raw `OPENCODE_INLINE_PRESETS` value, merged over the defaults before validation."""

    presets: dict[str, Any] = Field(default_factory=dict)

    model_config = SettingsConfigDict(
        env_prefix="OPENCODE_INLINE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge `override` into a copy of `base`; nested mappings merge, everything else is replaced."""

    merged = copy.deepcopy(dict(base))
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def find_config_file(workspace: Path | None = None) -> Path | None:
    """Return the first existing config file: workspace, then user config."""

    candidates = [(workspace or Path.cwd()) / CONFIG_FILE_NAME, USER_CONFIG_PATH.expanduser()]
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def read_config_file(path: Path) -> dict[str, Any]:
    """Load one YAML config file as a mapping."""

    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationError(f"cannot read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"invalid YAML in {path}: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ConfigurationError(f"config file {path} must contain a mapping")
    return payload


def load_settings(
    config_file: Path | None = None,
    overrides: Mapping[str, Any] | None = None,
    *,
    workspace: Path | None = None,
) -> InlineSettings:
    """Build a fresh, frozen settings value.

    Args:
        config_file: Explicit YAML file; discovered from `workspace` when omitted.
        overrides: Options that win over the file, merged the same way.
        workspace: Directory searched for `.opencode-inline.yaml`.

    Returns:
        InlineSettings instance
    """

    try:
        environment_presets = _EnvironmentPresets().presets
    except (SettingsError, ValidationError) as exc:
        raise ConfigurationError(str(exc)) from exc

    payload: dict[str, Any] = {"presets": deep_merge(DEFAULT_PRESETS, environment_presets)}
    path = config_file or find_config_file(workspace)
    if path is not None:
        payload = deep_merge(payload, read_config_file(path))
    if overrides:
        payload = deep_merge(payload, overrides)

    try:
        return InlineSettings(**payload)
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc
