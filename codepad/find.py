"""Find-in-buffer state: a literal search bar with match navigation."""

from __future__ import annotations

import enum


class FindFocus(enum.Enum):
    """Which input row of a :class:`FindBar` receives key events."""

    QUERY = "query"
    REPLACEMENT = "replacement"


def _chars_eq_ignore_case(a: str, b: str) -> bool:
    """Compare two characters by the first character of their lowercase form."""
    if a == b:
        return True
    return a.lower()[:1] == b.lower()[:1]


def _is_word(c: str) -> bool:
    return c.isalnum() or c == "_"


def _is_whole_word(haystack: str, start: int, end: int) -> bool:
    """True when ``haystack[start:end]`` sits between word boundaries."""
    prev_ok = start == 0 or not _is_word(haystack[start - 1])
    next_ok = end == len(haystack) or not _is_word(haystack[end])
    return prev_ok and next_ok


class FindBar:
    """Query, replacement, options and the matches found in the buffer.

    Matches are half-open character ranges, in buffer order.
    """

    def __init__(self) -> None:
        self._query = ""
        self._replacement = ""
        self._focus = FindFocus.QUERY
        self._case_sensitive = False
        self._whole_word = False
        self._matches: list[range] = []
        self._current = 0

    @property
    def query(self) -> str:
        return self._query

    @property
    def replacement(self) -> str:
        return self._replacement

    @property
    def focus(self) -> FindFocus:
        return self._focus

    @property
    def case_sensitive(self) -> bool:
        return self._case_sensitive

    @property
    def whole_word(self) -> bool:
        return self._whole_word

    @property
    def matches(self) -> list[range]:
        """Every match, in buffer order."""
        return list(self._matches)

    @property
    def current_index(self) -> int:
        """Index of the selected match (0 when there are none)."""
        return self._current

    def toggle_focus(self) -> None:
        """Switch between editing the query and the replacement."""
        if self._focus is FindFocus.QUERY:
            self._focus = FindFocus.REPLACEMENT
        else:
            self._focus = FindFocus.QUERY

    def toggle_case_sensitive(self, text: str) -> None:
        self._case_sensitive = not self._case_sensitive
        self._recompute(text)

    def toggle_whole_word(self, text: str) -> None:
        self._whole_word = not self._whole_word
        self._recompute(text)

    def current_match(self) -> range | None:
        """The selected match, or ``None`` when there are no matches."""
        if self._current < len(self._matches):
            return self._matches[self._current]
        return None

    def match_count(self) -> int:
        return len(self._matches)

    def push_char(self, c: str, text: str) -> None:
        """Append ``c`` to the focused input; only the query triggers a rescan."""
        if self._focus is FindFocus.QUERY:
            self._query += c
            self._recompute(text)
        else:
            self._replacement += c

    def backspace(self, text: str) -> None:
        """Drop the last character of the focused input."""
        if self._focus is FindFocus.QUERY:
            if self._query:
                self._query = self._query[:-1]
                self._recompute(text)
        else:
            self._replacement = self._replacement[:-1]

    def next_match(self) -> None:
        if self._matches:
            self._current = (self._current + 1) % len(self._matches)

    def prev_match(self) -> None:
        if self._matches:
            self._current = (self._current - 1) % len(self._matches)

    def refresh(self, text: str) -> None:
        """Rescan ``text`` after the buffer changed."""
        self._recompute(text)

    def _recompute(self, text: str) -> None:
        self._matches = []
        self._current = 0
        needle = self._query
        if not needle or len(needle) > len(text):
            return
        width = len(needle)
        i = 0
        while i + width <= len(text):
            candidate = text[i : i + width]
            if self._case_sensitive:
                hit = candidate == needle
            else:
                hit = all(map(_chars_eq_ignore_case, candidate, needle))
            if hit and (not self._whole_word or _is_whole_word(text, i, i + width)):
                self._matches.append(range(i, i + width))
                i += width
            else:
                i += 1