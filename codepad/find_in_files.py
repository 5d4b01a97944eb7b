"""Project-wide literal search that honours ignore files.

The walk descends the workspace depth-first, name order within each
directory, and skips whatever ``.gitignore`` (inside a git repository),
``.git/info/exclude`` and ``.ignore`` files exclude. Hidden files are
searched. Each readable UTF-8 text file is matched line by line,
case-insensitively.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path

MAX_RESULTS = 500
"""Stop after this many matches across all files."""

MAX_FILE_BYTES = 1_000_000
"""Files larger than this are not searched."""


@dataclass(frozen=True)
class FindMatch:
    """One line that matched the query."""

    path: Path
    line: int
    """0-based index of the matching line."""
    line_text: str
    """The full line, without its line ending."""


@dataclass
class FindInFiles:
    """Panel state: the query, the last results and the highlighted row."""

    query: str = ""
    results: list[FindMatch] = field(default_factory=list)
    selected: int = 0
    scroll: int = 0
    input_focused: bool = True

    def select_next(self) -> None:
        """Highlight the next result, wrapping to the first."""
        if self.results:
            self.selected = (self.selected + 1) % len(self.results)

    def select_prev(self) -> None:
        """Highlight the previous result, wrapping to the last."""
        if self.results:
            self.selected = (self.selected - 1) % len(self.results)


@dataclass(frozen=True)
class _IgnoreRule:
    regex: re.Pattern[str]
    base: Path
    negate: bool
    dir_only: bool
    anchored: bool

    def matches(self, path: Path, is_dir: bool) -> bool:
        if self.dir_only and not is_dir:
            return False
        try:
            rel = path.relative_to(self.base)
        except ValueError:
            return False
        target = rel.as_posix() if self.anchored else path.name
        return self.regex.fullmatch(target) is not None


def _char_class(body: str) -> str:
    negate = body[:1] in ("!", "^")
    if negate:
        body = body[1:]
    parts = ["-" if ch == "-" else re.escape(ch) for ch in body]
    return "[" + ("^" if negate else "") + "".join(parts) + "]"


def _glob_to_regex(pattern: str) -> str:
    out: list[str] = []
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        if c == "*":
            if pattern.startswith("**", i):
                after = i + 2
                at_start = i == 0 or pattern[i - 1] == "/"
                if at_start and after < n and pattern[after] == "/":
                    out.append("(?:.*/)?")
                    i = after + 1
                    continue
                if at_start and after == n:
                    out.append(".*")
                    i = after
                    continue
                out.append("[^/]*")
                i = after
                continue
            out.append("[^/]*")
            i += 1
        elif c == "?":
            out.append("[^/]")
            i += 1
        elif c == "[":
            start = i + 1
            if start < n and pattern[start] in "!^":
                start += 1
            if start < n and pattern[start] == "]":
                start += 1
            close = pattern.find("]", start)
            if close == -1:
                out.append(re.escape(c))
                i += 1
            else:
                out.append(_char_class(pattern[i + 1 : close]))
                i = close + 1
        elif c == "\\" and i + 1 < n:
            out.append(re.escape(pattern[i + 1]))
            i += 2
        else:
            out.append(re.escape(c))
            i += 1
    return "".join(out)


def _parse_rule(line: str, base: Path) -> _IgnoreRule | None:
    line = line.rstrip("\r\n")
    if not line or line.startswith("#"):
        return None
    stripped = line.rstrip(" ")
    if stripped.endswith("\\") and len(stripped) < len(line):
        stripped += " "
    line = stripped
    negate = line.startswith("!")
    if negate:
        line = line[1:]
    dir_only = line.endswith("/")
    if dir_only:
        line = line.rstrip("/")
    anchored = "/" in line
    if line.startswith("/"):
        line = line[1:]
    if not line:
        return None
    try:
        regex = re.compile(_glob_to_regex(line))
    except re.error:
        return None
    return _IgnoreRule(regex, base, negate, dir_only, anchored)


def _load_rules(file: Path, base: Path) -> list[_IgnoreRule]:
    try:
        text = file.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return []
    rules = (_parse_rule(line, base) for line in text.split("\n"))
    return [rule for rule in rules if rule is not None]


def _dir_rules(directory: Path, in_repo: bool) -> list[_IgnoreRule]:
    rules: list[_IgnoreRule] = []
    if in_repo:
        rules += _load_rules(directory / ".gitignore", directory)
    rules += _load_rules(directory / ".ignore", directory)
    return rules


def _is_ignored(path: Path, is_dir: bool, rules: Sequence[_IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(path, is_dir):
            ignored = not rule.negate
    return ignored


def _find_repo_root(start: Path) -> Path | None:
    for candidate in (start, *start.parents):
        if (candidate / ".git").exists():
            return candidate
    return None


def _initial_rules(abs_root: Path) -> tuple[list[_IgnoreRule], bool]:
    repo = _find_repo_root(abs_root)
    in_repo = repo is not None
    rules: list[_IgnoreRule] = []
    if repo is not None:
        if (repo / ".git").is_dir():
            rules += _load_rules(repo / ".git" / "info" / "exclude", repo)
        ancestors = [p for p in abs_root.parents if p == repo or repo in p.parents]
        for directory in reversed(ancestors):
            rules += _dir_rules(directory, True)
    else:
        for directory in reversed(abs_root.parents):
            rules += _load_rules(directory / ".ignore", directory)
    return rules, in_repo


def _walk(
    directory: Path,
    abs_directory: Path,
    inherited: list[_IgnoreRule],
    in_repo: bool,
) -> Iterator[os.DirEntry[str]]:
    rules = inherited + _dir_rules(abs_directory, in_repo)
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError:
        return
    for entry in entries:
        try:
            if entry.is_symlink():
                continue
            is_dir = entry.is_dir(follow_symlinks=False)
            is_file = entry.is_file(follow_symlinks=False)
        except OSError:
            continue
        abs_path = abs_directory / entry.name
        if _is_ignored(abs_path, is_dir, rules):
            continue
        if is_dir:
            yield from _walk(directory / entry.name, abs_path, rules, in_repo)
        elif is_file:
            yield entry


def _lines(content: str) -> list[str]:
    if not content:
        return []
    pieces = content.split("\n")
    if pieces[-1] == "":
        pieces.pop()
    return [p[:-1] if p.endswith("\r") else p for p in pieces]


def search(query: str, root: str | Path) -> list[FindMatch]:
    """Every line under ``root`` containing ``query``, case-insensitively.

    A blank query gives no results. Files that are too large or not valid
    UTF-8 are skipped. At most :data:`MAX_RESULTS` matches are returned.
    """
    query = query.strip()
    if not query:
        return []
    pattern = re.compile(re.escape(query), re.IGNORECASE)
    root = Path(root)
    abs_root = Path(os.path.abspath(root))
    rules, in_repo = _initial_rules(abs_root)

    results: list[FindMatch] = []
    for entry in _walk(root, abs_root, rules, in_repo):
        if len(results) >= MAX_RESULTS:
            break
        try:
            if entry.stat(follow_symlinks=False).st_size > MAX_FILE_BYTES:
                continue
        except OSError:
            pass
        path = Path(entry.path)
        try:
            content = path.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError):
            continue
        for index, line in enumerate(_lines(content)):
            if pattern.search(line):
                results.append(FindMatch(path, index, line))
                if len(results) >= MAX_RESULTS:
                    break
    return results