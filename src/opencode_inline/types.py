"""Shared core dataclasses."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

VISUAL_RANGE = "'<,'>"


@dataclass(frozen=True)
class LineRange:
    """Inclusive 1-based line range."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 1 or self.end < self.start:
            raise ValueError(f"invalid line range {self.start},{self.end}")

    def __str__(self) -> str:
        return f"{self.start},{self.end}"


@dataclass(frozen=True)
class ExecutionRequest:
    """One instruction run, built fresh per invocation."""

    instruction: str
    filetype: str
    extra_args: tuple[str, ...] = ()
    default_args: tuple[str, ...] = ()
    env_overrides: Mapping[str, object | None] = field(default_factory=dict)
    line_range: LineRange | None = None
    strip_codeblock: bool = True


@dataclass(frozen=True)
class CommandLine:
    """Escaped range-filter command ready for the host."""

    range_spec: str
    tokens: tuple[str, ...]

    @property
    def shell_command(self) -> str:
        """The command part after `!`."""

        return " ".join(self.tokens)

    def __str__(self) -> str:
        return f"{self.range_spec}! {self.shell_command}"
