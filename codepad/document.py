"""One open document: its text, file path, dirty flag, scroll offset and find bar."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from codepad.find import FindBar
from codepad.git import GitLineStatus

_DEFAULT_INDENT_UNIT = 4
_INDENT_SCAN_LINES = 500


def _lines(text: str) -> list[str]:
    """Split on newlines, dropping a trailing empty piece and any ``\\r`` ending."""
    if not text:
        return []
    pieces = text.split("\n")
    if pieces[-1] == "":
        pieces.pop()
    return [p[:-1] if p.endswith("\r") else p for p in pieces]


def detect_indent_unit(text: str) -> int:
    """Guess the leading-space indent width of ``text``.

    Looks at the first 500 lines; the smallest non-zero run of leading spaces
    on a non-blank, non-tab-indented line wins. Defaults to 4.
    """
    smallest: int | None = None
    for line in _lines(text)[:_INDENT_SCAN_LINES]:
        if line.startswith("\t"):
            continue
        leading = len(line) - len(line.lstrip(" "))
        if leading == 0:
            continue
        if not line[leading:].strip():
            continue
        if smallest is None or leading < smallest:
            smallest = leading
    return smallest if smallest else _DEFAULT_INDENT_UNIT


def _filename(path: Path) -> str:
    return path.name or str(path)


@dataclass
class Document:
    """A buffer plus the per-tab state kept while it is not active."""

    text: str = ""
    file_path: Path | None = None
    dirty: bool = False
    scroll_y: float = 0.0
    find: FindBar | None = None
    indent_unit: int = _DEFAULT_INDENT_UNIT
    git_status: dict[int, GitLineStatus] = field(default_factory=dict)
    git_status_revision: int | None = None

    @classmethod
    def new_scratch(cls, initial_text: str) -> Document:
        """An untitled, unsaved document holding ``initial_text``."""
        return cls(text=initial_text, indent_unit=detect_indent_unit(initial_text))

    @classmethod
    def from_file(cls, path: str | Path, content: str) -> Document:
        """A document backed by ``path`` with ``content`` already read."""
        return cls(
            text=content,
            file_path=Path(path),
            indent_unit=detect_indent_unit(content),
        )

    def label(self) -> str:
        """File name, or ``"untitled"`` for a scratch buffer."""
        if self.file_path is None:
            return "untitled"
        return _filename(self.file_path)

    def is_pristine_scratch(self) -> bool:
        """True for a never-saved, never-edited scratch buffer."""
        return self.file_path is None and not self.dirty