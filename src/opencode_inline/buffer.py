"""In-memory text buffer with a visual selection."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .errors import InvalidRangeError
from .types import LineRange

DEFAULT_FILETYPE = "text"

SUFFIX_FILETYPES = {
    ".c": "c",
    ".cc": "cpp",
    ".cpp": "cpp",
    ".css": "css",
    ".go": "go",
    ".h": "c",
    ".hpp": "cpp",
    ".html": "html",
    ".java": "java",
    ".js": "javascript",
    ".json": "json",
    ".jsx": "javascriptreact",
    ".kt": "kotlin",
    ".lua": "lua",
    ".md": "markdown",
    ".php": "php",
    ".py": "python",
    ".rb": "ruby",
    ".rs": "rust",
    ".sh": "sh",
    ".sql": "sql",
    ".toml": "toml",
    ".ts": "typescript",
    ".tsx": "typescriptreact",
    ".txt": "text",
    ".vim": "vim",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".zig": "zig",
}


def filetype_for_path(path: Path) -> str:
    suffix = path.suffix.lower()
    if not suffix:
        return ""
    return SUFFIX_FILETYPES.get(suffix, suffix[1:])


@dataclass
class TextBuffer:
    """Lines of text plus the `'<`/`'>` selection marks."""

    lines: list[str] = field(default_factory=list)
    filetype: str = ""
    path: Path | None = None
    trailing_newline: bool = True
    selection: LineRange | None = None

    @classmethod
    def from_text(cls, text: str, *, filetype: str = "", path: Path | None = None) -> TextBuffer:
        trailing_newline = text.endswith("\n")
        lines = text.split("\n")
        if trailing_newline:
            lines.pop()
        return cls(lines=lines, filetype=filetype, path=path, trailing_newline=trailing_newline)

    @classmethod
    def from_file(cls, path: Path, *, filetype: str | None = None) -> TextBuffer:
        text = path.read_text(encoding="utf-8")
        resolved_filetype = filetype if filetype is not None else filetype_for_path(path)
        return cls.from_text(text, filetype=resolved_filetype, path=path)

    @property
    def line_count(self) -> int:
        return len(self.lines)

    @property
    def effective_filetype(self) -> str:
        """Filetype hint sent to the wrapper; never empty."""

        return self.filetype.strip() or DEFAULT_FILETYPE

    def text(self) -> str:
        body = "\n".join(self.lines)
        if self.trailing_newline and self.lines:
            body += "\n"
        return body

    def validate_range(self, line_range: LineRange) -> LineRange:
        if line_range.end > self.line_count:
            raise InvalidRangeError(f"line range {line_range} exceeds buffer of {self.line_count} lines")
        return line_range

    def select(self, start: int, end: int) -> LineRange:
        """Mark lines `start..end` as the visual selection."""

        try:
            line_range = LineRange(start, end)
        except ValueError as exc:
            raise InvalidRangeError(str(exc)) from exc
        self.selection = self.validate_range(line_range)
        return self.selection

    def select_all(self) -> LineRange | None:
        if not self.lines:
            return None
        return self.select(1, self.line_count)

    def get_lines(self, line_range: LineRange) -> list[str]:
        self.validate_range(line_range)
        return self.lines[line_range.start - 1 : line_range.end]

    def replace_lines(self, line_range: LineRange, new_lines: list[str]) -> None:
        self.validate_range(line_range)
        self.lines[line_range.start - 1 : line_range.end] = new_lines
        if new_lines:
            self.selection = LineRange(line_range.start, line_range.start + len(new_lines) - 1)
        else:
            self.selection = None

    def save(self, path: Path | None = None) -> Path:
        target = path or self.path
        if target is None:
            raise ValueError("buffer has no path")
        target.write_text(self.text(), encoding="utf-8")
        return target
