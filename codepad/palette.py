"""Command palette state: the fuzzy-filtered list of commands and its selection.

Entries are given at construction, so built-in commands can be mixed with
dynamic ones such as workspace scripts or discovered themes.
"""

from __future__ import annotations

import enum
import re
import unicodedata
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path


class CommandId(enum.Enum):
    """What a palette entry does when chosen."""

    NEW_FILE = "new_file"
    OPEN_FILE = "open_file"
    SAVE_FILE = "save_file"
    SAVE_FILE_AS = "save_file_as"
    SAVE_ALL = "save_all"
    CLOSE_OTHER_TABS = "close_other_tabs"
    CLOSE_ALL_TABS = "close_all_tabs"
    THEME_DEFAULT = "theme_default"
    THEME_SOLARIZED_DARK = "theme_solarized_dark"
    THEME_SOLARIZED_LIGHT = "theme_solarized_light"
    THEME_MONOKAI = "theme_monokai"
    THEME_GRUVBOX_DARK = "theme_gruvbox_dark"
    THEME_NORD = "theme_nord"
    THEME_TOKYO_NIGHT = "theme_tokyo_night"
    BROWSE_THEMES = "browse_themes"
    APPLY_VSCODE_THEME = "apply_vscode_theme"
    """Argument: path of the theme JSON."""
    IMPORT_VSCODE_SETTINGS = "import_vscode_settings"
    RUN_SCRIPT = "run_script"
    """Argument: the bare script name."""
    FLUTTER_RUN = "flutter_run"
    FLUTTER_RUN_ON_DEVICE = "flutter_run_on_device"
    """Argument: the device id."""
    FLUTTER_HOT_RELOAD = "flutter_hot_reload"
    FLUTTER_HOT_RESTART = "flutter_hot_restart"
    FLUTTER_STOP = "flutter_stop"


_BUILTIN_LABELS: dict[CommandId, str] = {
    CommandId.NEW_FILE: "New File",
    CommandId.OPEN_FILE: "Open File…",
    CommandId.SAVE_FILE: "Save",
    CommandId.SAVE_FILE_AS: "Save As…",
    CommandId.SAVE_ALL: "Save All",
    CommandId.CLOSE_OTHER_TABS: "Close Other Tabs",
    CommandId.CLOSE_ALL_TABS: "Close All Tabs",
    CommandId.THEME_DEFAULT: "Theme: Default Dark",
    CommandId.THEME_SOLARIZED_DARK: "Theme: Solarized Dark",
    CommandId.THEME_SOLARIZED_LIGHT: "Theme: Solarized Light",
    CommandId.THEME_MONOKAI: "Theme: Monokai",
    CommandId.THEME_GRUVBOX_DARK: "Theme: Gruvbox Dark",
    CommandId.THEME_NORD: "Theme: Nord",
    CommandId.THEME_TOKYO_NIGHT: "Theme: Tokyo Night",
    CommandId.BROWSE_THEMES: "Theme: Browse…",
    CommandId.APPLY_VSCODE_THEME: "Theme (VSCode)",
    CommandId.IMPORT_VSCODE_SETTINGS: "Settings: Import from VSCode…",
    CommandId.RUN_SCRIPT: "Run script",
    CommandId.FLUTTER_RUN: "Flutter: Run",
    CommandId.FLUTTER_RUN_ON_DEVICE: "Flutter: Run on …",
    CommandId.FLUTTER_HOT_RELOAD: "Flutter: Hot Reload",
    CommandId.FLUTTER_HOT_RESTART: "Flutter: Hot Restart",
    CommandId.FLUTTER_STOP: "Flutter: Stop",
}


@dataclass(frozen=True)
class CommandEntry:
    """One palette row: ``id`` drives dispatch, ``label`` is shown and matched."""

    id: CommandId
    label: str
    argument: str | Path | None = None

    @classmethod
    def builtin(cls, command_id: CommandId) -> CommandEntry:
        """An entry for ``command_id`` with its canonical label."""
        return cls(command_id, _BUILTIN_LABELS[command_id])


BUILTIN_COMMAND_IDS: tuple[CommandId, ...] = (
    CommandId.NEW_FILE,
    CommandId.OPEN_FILE,
    CommandId.SAVE_FILE,
    CommandId.SAVE_FILE_AS,
    CommandId.SAVE_ALL,
    CommandId.CLOSE_OTHER_TABS,
    CommandId.CLOSE_ALL_TABS,
    CommandId.THEME_DEFAULT,
    CommandId.THEME_SOLARIZED_DARK,
    CommandId.THEME_SOLARIZED_LIGHT,
    CommandId.THEME_MONOKAI,
    CommandId.THEME_GRUVBOX_DARK,
    CommandId.THEME_NORD,
    CommandId.THEME_TOKYO_NIGHT,
    CommandId.BROWSE_THEMES,
    CommandId.IMPORT_VSCODE_SETTINGS,
)
"""Built-in commands in the order shown for an empty query."""


# ---------------------------------------------------------------------------
# Fuzzy matching

_SCORE_MATCH = 16
_BONUS_BOUNDARY = 8
_BONUS_CAMEL = 7
_BONUS_CONSECUTIVE = 4
_BONUS_FIRST_CHAR_MULTIPLIER = 2
_PENALTY_GAP_START = 3
_PENALTY_GAP_EXTENSION = 1

_ATOM_SPLIT = re.compile(r"(?<!\\)\s+")


class _AtomKind(enum.Enum):
    FUZZY = "fuzzy"
    SUBSTRING = "substring"
    PREFIX = "prefix"
    POSTFIX = "postfix"
    EXACT = "exact"


def _base_char(c: str) -> str:
    decomposed = unicodedata.normalize("NFD", c)
    return decomposed[0] if decomposed else c


def _normalize(text: str) -> str:
    return "".join(_base_char(c) for c in text)


@dataclass(frozen=True)
class _Atom:
    needle: str
    kind: _AtomKind
    negative: bool
    ignore_case: bool
    normalize: bool

    @classmethod
    def parse(cls, raw: str) -> _Atom | None:
        text = raw.replace("\\ ", " ")
        negative = False
        kind = _AtomKind.FUZZY
        if text.startswith("!"):
            negative = True
            kind = _AtomKind.SUBSTRING
            text = text[1:]
        if text.startswith("^"):
            kind = _AtomKind.PREFIX
            text = text[1:]
        elif text.startswith("'"):
            kind = _AtomKind.SUBSTRING
            text = text[1:]
        elif text.startswith("\\"):
            text = text[1:]
        if text.endswith("$") and not text.endswith("\\$"):
            kind = _AtomKind.EXACT if kind is _AtomKind.PREFIX else _AtomKind.POSTFIX
            text = text[:-1]
        elif text.endswith("\\$"):
            text = text[:-2] + "$"
        if not text:
            return None
        ignore_case = text == text.lower()
        normalize = _normalize(text) == text
        needle = text.lower() if ignore_case else text
        return cls(needle, kind, negative, ignore_case, normalize)

    def prepare(self, haystack: str) -> str:
        if self.normalize:
            haystack = _normalize(haystack)
        if self.ignore_case:
            haystack = "".join(c.lower()[:1] or c for c in haystack)
        return haystack

    def score(self, original: str) -> int | None:
        """Score of this atom against ``original``; ``None`` when it rejects it."""
        hay = self.prepare(original)
        result = self._positive_score(original, hay)
        if self.negative:
            return None if result is not None else 0
        return result

    def _positive_score(self, original: str, hay: str) -> int | None:
        width = len(self.needle)
        if self.kind is _AtomKind.FUZZY:
            positions = _fuzzy_positions(self.needle, hay)
            return None if positions is None else _score_positions(original, positions)
        if self.kind is _AtomKind.PREFIX:
            if not hay.startswith(self.needle):
                return None
            return _score_positions(original, list(range(width)))
        if self.kind is _AtomKind.POSTFIX:
            if not hay.endswith(self.needle):
                return None
            start = len(hay) - width
            return _score_positions(original, list(range(start, start + width)))
        if self.kind is _AtomKind.EXACT:
            if hay != self.needle:
                return None
            return _score_positions(original, list(range(width)))
        best: int | None = None
        start = hay.find(self.needle)
        while start != -1:
            score = _score_positions(original, list(range(start, start + width)))
            if best is None or score > best:
                best = score
            start = hay.find(self.needle, start + 1)
        return best


def _fuzzy_positions(needle: str, hay: str) -> list[int] | None:
    """Tightest subsequence positions of ``needle`` in ``hay``, or ``None``."""
    pos = 0
    end = -1
    for c in needle:
        found = hay.find(c, pos)
        if found == -1:
            return None
        end = found
        pos = found + 1
    positions: list[int] = []
    pos = end
    for c in reversed(needle):
        found = hay.rfind(c, 0, pos + 1)
        positions.append(found)
        pos = found - 1
    positions.reverse()
    return positions


def _bonus(text: str, pos: int) -> int:
    if pos == 0:
        return _BONUS_BOUNDARY
    prev, cur = text[pos - 1], text[pos]
    if not prev.isalnum():
        return _BONUS_BOUNDARY if cur.isalnum() else 0
    if prev.islower() and cur.isupper():
        return _BONUS_CAMEL
    if prev.isalpha() and cur.isdigit():
        return _BONUS_CAMEL
    return 0


def _score_positions(text: str, positions: list[int]) -> int:
    score = 0
    previous: int | None = None
    for n, pos in enumerate(positions):
        bonus = _bonus(text, pos)
        if n == 0:
            bonus *= _BONUS_FIRST_CHAR_MULTIPLIER
        score += _SCORE_MATCH + bonus
        if previous is not None:
            gap = pos - previous - 1
            if gap == 0:
                score += _BONUS_CONSECUTIVE
            else:
                score -= _PENALTY_GAP_START + (gap - 1) * _PENALTY_GAP_EXTENSION
        previous = pos
    return score


def _parse_pattern(query: str) -> list[_Atom]:
    atoms = (_Atom.parse(raw) for raw in _ATOM_SPLIT.split(query.strip()) if raw)
    return [atom for atom in atoms if atom is not None]


def _match_list(query: str, labels: Iterable[str]) -> list[tuple[str, int]]:
    """Labels matching every atom of ``query``, best score first (stable on ties)."""
    atoms = _parse_pattern(query)
    scored: list[tuple[str, int]] = []
    for label in labels:
        total = 0
        for atom in atoms:
            score = atom.score(label)
            if score is None:
                break
            total += score
        else:
            scored.append((label, total))
    scored.sort(key=lambda item: -item[1])
    return scored


# ---------------------------------------------------------------------------
# Palette state


class CommandPalette:
    """The popup: query, filtered rows, selected row and scroll offset."""

    def __init__(self, entries: Iterable[CommandEntry]) -> None:
        self._query = ""
        self._entries: list[CommandEntry] = list(entries)
        self._visible: list[int] = list(range(len(self._entries)))
        self._selected = 0
        self.scroll = 0

    @property
    def query(self) -> str:
        return self._query

    def visible_labels(self) -> list[str]:
        """Labels of every matching entry, best match first."""
        return [self._entries[i].label for i in self._visible]

    def windowed_labels(self, window: int) -> list[str]:
        """Labels of the ``window`` rows currently scrolled into view."""
        end = min(self.scroll + window, len(self._visible))
        return [self._entries[i].label for i in self._visible[self.scroll : end]]

    def visible_count(self) -> int:
        return len(self._visible)

    def selected_row(self) -> int:
        """Selected row within the full visible list."""
        return self._selected

    def selected_row_windowed(self, window: int) -> int | None:
        """Selected row within the scroll window, or ``None`` if outside it."""
        if window == 0 or not self._visible:
            return None
        if not self.scroll <= self._selected < self.scroll + window:
            return None
        return self._selected - self.scroll

    def set_scroll(self, scroll: int, window: int) -> None:
        """Set the scroll offset, clamped; the selection is left alone."""
        max_scroll = max(len(self._visible) - window, 0)
        self.scroll = min(scroll, max_scroll)

    def scroll_into_view(self, window: int) -> None:
        """Slide the scroll offset so the selection sits inside the window."""
        if window == 0 or not self._visible:
            self.scroll = 0
            return
        if self._selected < self.scroll:
            self.scroll = self._selected
        elif self._selected >= self.scroll + window:
            self.scroll = self._selected + 1 - window
        self.scroll = min(self.scroll, max(len(self._visible) - window, 0))

    def selected(self) -> CommandEntry | None:
        """The highlighted entry, or ``None`` when nothing matches."""
        if self._selected < len(self._visible):
            return self._entries[self._visible[self._selected]]
        return None

    def push_char(self, c: str) -> None:
        self._query += c
        self._refilter()

    def backspace(self) -> None:
        if self._query:
            self._query = self._query[:-1]
            self._refilter()

    def next(self) -> None:
        """Select the next row, wrapping at the bottom."""
        if self._visible:
            self._selected = (self._selected + 1) % len(self._visible)

    def prev(self) -> None:
        """Select the previous row, wrapping at the top."""
        if self._visible:
            self._selected = (self._selected - 1) % len(self._visible)

    def _refilter(self) -> None:
        if not self._query:
            self._visible = list(range(len(self._entries)))
        else:
            first_index: dict[str, int] = {}
            for i, entry in enumerate(self._entries):
                first_index.setdefault(entry.label, i)
            scored = _match_list(self._query, (e.label for e in self._entries))
            self._visible = [first_index[label] for label, _ in scored]
        self._selected = 0
        self.scroll = 0