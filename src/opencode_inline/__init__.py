"""opencode-inline - rewrite text selections through an AI command-line tool."""

from .command import build_command
from .config import InlineSettings, Preset, load_settings
from .escaping import shell_escape
from .plugin import InlinePlugin
from .types import CommandLine, ExecutionRequest, LineRange

__version__ = "0.1.0"

__all__ = [
    "CommandLine",
    "ExecutionRequest",
    "InlinePlugin",
    "InlineSettings",
    "LineRange",
    "Preset",
    "build_command",
    "load_settings",
    "shell_escape",
]
