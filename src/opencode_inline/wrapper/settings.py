"""Wrapper settings read from the environment."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..command import FILETYPE_ENV, STRIP_CODEBLOCK_ENV


class WrapperSettings(BaseSettings):
    """Settings for one `opencode-stdin` process."""

    tool: str = Field(default="opencode run", description="AI tool command line, shell-split")
    prompt_mode: Literal["argument", "stdin"] = Field(
        default="argument", description="Pass the prompt as the last argument or on the tool's stdin"
    )
    log_level: str = Field(default="WARNING", description="Log level")

    # Wire names shared with the command builder, not prefixed.
    filetype: str = Field(default="", validation_alias=FILETYPE_ENV)
    strip_codeblock: bool = Field(default=True, validation_alias=STRIP_CODEBLOCK_ENV)

    model_config = SettingsConfigDict(
        env_prefix="OPENCODE_STDIN_",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    @field_validator("strip_codeblock", mode="before")
    @classmethod
    def _blank_strip_flag(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return True
        return value
