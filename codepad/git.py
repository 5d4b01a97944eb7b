"""Git status helpers: per-line diff markers and per-file workspace status.

The work is done by the ``git`` command-line tool. When ``git`` is missing,
the path is not inside a repository, or a lookup fails, the helpers return
empty maps, so callers just show no markers.
"""

from __future__ import annotations

import difflib
import enum
import os
import re
import subprocess
from collections.abc import Iterator, Mapping
from pathlib import Path

# libgit2 treats a blob as binary when a NUL byte appears in its head.
_BINARY_SNIFF_BYTES = 8000
_LINE_RE = re.compile(rb"[^\n]*\n|[^\n]+\Z")
_CONFLICT_CODES = frozenset({"DD", "AU", "UD", "UA", "DU", "AA", "UU"})


class GitLineStatus(enum.Enum):
    """What changed on a line compared with HEAD."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"


class FileGitStatus(enum.Enum):
    """File-level status; the value is the priority used when bubbling up."""

    UNTRACKED = 1
    DELETED = 2
    ADDED = 3
    MODIFIED = 4
    CONFLICTED = 5

    @property
    def marker(self) -> str:
        """Single-character marker shown in the file tree."""
        return {
            FileGitStatus.UNTRACKED: "?",
            FileGitStatus.DELETED: "D",
            FileGitStatus.ADDED: "A",
            FileGitStatus.MODIFIED: "M",
            FileGitStatus.CONFLICTED: "U",
        }[self]


def _canonical(path: Path) -> Path:
    try:
        return path.resolve(strict=True)
    except (OSError, RuntimeError):
        return path


def _git(cwd: Path, *args: str) -> bytes | None:
    """Run ``git`` in ``cwd``; return stdout on success, ``None`` otherwise."""
    try:
        proc = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            check=False,
        )
    except OSError:
        return None
    if proc.returncode != 0:
        return None
    return proc.stdout


def _workdir_of(start: Path) -> Path | None:
    out = _git(start, "rev-parse", "--show-toplevel")
    if out is None:
        return None
    top = os.fsdecode(out).rstrip("\r\n")
    if not top:
        return None
    return _canonical(Path(top))


def _split_lines(data: bytes) -> list[bytes]:
    return _LINE_RE.findall(data)


def _is_binary(data: bytes) -> bool:
    return b"\0" in data[:_BINARY_SNIFF_BYTES]


def _hunks(old: bytes, new: bytes) -> Iterator[tuple[int, list[int], int]]:
    """Yield ``(new_start, added_line_numbers, removed_count)`` per 0-context hunk.

    Line numbers are 1-based, as in unified diff headers.
    """
    old_lines = _split_lines(old)
    new_lines = _split_lines(new)
    matcher = difflib.SequenceMatcher(None, old_lines, new_lines, autojunk=False)
    pending: list[tuple[int, int, int, int]] = []

    def flush() -> tuple[int, list[int], int]:
        j_start = pending[0][2]
        j_end = pending[-1][3]
        removes = sum(i2 - i1 for i1, i2, _, _ in pending)
        adds = list(range(j_start + 1, j_end + 1))
        new_start = j_start + 1 if adds else j_start
        return new_start, adds, removes

    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            if pending:
                yield flush()
                pending = []
            continue
        pending.append((i1, i2, j1, j2))
    if pending:
        yield flush()


def compute_line_status(path: str | Path, current_text: str) -> dict[int, GitLineStatus]:
    """Map 0-based line indices of ``current_text`` to their status versus HEAD.

    An empty map means nothing changed or the diff could not be computed.
    A file absent from HEAD has every line marked as added.
    """
    status: dict[int, GitLineStatus] = {}
    path = _canonical(Path(path))
    parent = path.parent
    if parent == path:
        return status

    workdir = _workdir_of(parent)
    if workdir is None:
        return status
    try:
        rel = path.relative_to(workdir)
    except ValueError:
        return status

    if _git(workdir, "rev-parse", "--verify", "--quiet", "HEAD^{tree}") is None:
        return status

    spec = f"HEAD:{rel.as_posix()}"
    oid_out = _git(workdir, "rev-parse", "--verify", "--quiet", spec)
    if oid_out is None:
        for i, _ in enumerate(current_text.split("\n")):
            status[i] = GitLineStatus.ADDED
        return status
    oid = oid_out.decode("ascii", "replace").strip()

    kind = _git(workdir, "cat-file", "-t", oid)
    if kind is None or kind.strip() != b"blob":
        return status
    blob = _git(workdir, "cat-file", "blob", oid)
    if blob is None:
        return status

    new = current_text.encode("utf-8", "surrogateescape")
    if _is_binary(blob) or _is_binary(new):
        return status

    for new_start, adds, removes in _hunks(blob, new):
        modified_count = min(len(adds), removes)
        for lineno in adds[:modified_count]:
            status[max(lineno - 1, 0)] = GitLineStatus.MODIFIED
        for lineno in adds[modified_count:]:
            status[max(lineno - 1, 0)] = GitLineStatus.ADDED
        if removes > len(adds):
            anchor = adds[-1] if adds else max(new_start, 1)
            status.setdefault(max(anchor - 1, 0), GitLineStatus.DELETED)

    return status


def _classify(code: str) -> FileGitStatus | None:
    index, worktree = code[0], code[1]
    if code in _CONFLICT_CODES:
        return FileGitStatus.CONFLICTED
    if index == "A":
        return FileGitStatus.ADDED
    if code == "??":
        return FileGitStatus.UNTRACKED
    if "M" in (index, worktree):
        return FileGitStatus.MODIFIED
    if "D" in (index, worktree):
        return FileGitStatus.DELETED
    return None


def compute_workspace_status(root: str | Path) -> dict[Path, FileGitStatus]:
    """Map absolute file paths to their status for the repository holding ``root``.

    Ignored and unchanged files are left out; so are directories.
    Returns an empty map outside a repository.
    """
    out: dict[Path, FileGitStatus] = {}
    root_canon = _canonical(Path(root))
    workdir = _workdir_of(root_canon)
    if workdir is None:
        return out

    raw = _git(
        workdir,
        "status",
        "--porcelain=v1",
        "-z",
        "--untracked-files=all",
        "--no-renames",
    )
    if raw is None:
        return out

    fields = iter(raw.split(b"\0"))
    for field in fields:
        if len(field) < 4:
            continue
        code = field[:2].decode("ascii", "replace")
        rel = os.fsdecode(field[3:])
        if code[0] in "RC":
            next(fields, None)
        kind = _classify(code)
        if kind is None:
            continue
        out[workdir / rel] = kind
    return out


def aggregate_dirs(
    files: Mapping[str | Path, FileGitStatus],
    stop_at: str | Path,
) -> dict[Path, FileGitStatus]:
    """Bubble file statuses up to ancestor directories, stopping at ``stop_at``.

    Each directory holds the highest-priority status found beneath it:
    conflicted > modified > added > deleted > untracked.
    """
    stop = _canonical(Path(stop_at))
    dirs: dict[Path, FileGitStatus] = {}
    for path, file_status in files.items():
        for directory in Path(path).parents:
            if directory != stop and stop not in directory.parents:
                break
            existing = dirs.get(directory)
            if existing is None or file_status.value > existing.value:
                dirs[directory] = file_status
            if directory == stop:
                break
    return dirs