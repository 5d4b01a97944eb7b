"""File-tree sidebar state kept as a flat list of visible rows.

Expanding a directory splices its children in right after it; collapsing
removes that contiguous run. Directory contents load lazily, on first expand.
"""

from __future__ import annotations

import enum
import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

DEFAULT_HIDDEN_DIRS: tuple[str, ...] = (
    ".git",
    "node_modules",
    "target",
    ".next",
    "dist",
    "build",
)


class NodeKind(enum.Enum):
    """Whether a row is a file or a directory."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass
class TreeNode:
    """One visible row in the sidebar."""

    path: Path
    name: str
    depth: int
    kind: NodeKind
    expanded: bool = False

    @property
    def is_dir(self) -> bool:
        return self.kind is NodeKind.DIRECTORY


def _sort_key(node: TreeNode) -> tuple[bool, str]:
    return (not node.is_dir, node.name.lower())


def read_children(
    directory: str | Path, depth: int, hidden_dirs: Iterable[str]
) -> list[TreeNode]:
    """Entries of ``directory`` as rows at ``depth``, directories first.

    Each group is sorted case-insensitively; names in ``hidden_dirs`` are
    skipped. An unreadable directory gives an empty list.
    """
    hidden = set(hidden_dirs)
    nodes: list[TreeNode] = []
    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                if entry.name in hidden:
                    continue
                try:
                    is_dir = entry.is_dir(follow_symlinks=False)
                except OSError:
                    continue
                kind = NodeKind.DIRECTORY if is_dir else NodeKind.FILE
                nodes.append(TreeNode(Path(entry.path), entry.name, depth, kind))
    except OSError:
        return []
    nodes.sort(key=_sort_key)
    return nodes


class FileTree:
    """The sidebar: visibility, keyboard focus and selection, and the rows."""

    def __init__(
        self, root: str | Path, hidden_dirs: Iterable[str] | None = None
    ) -> None:
        self.root = Path(root)
        self.hidden_dirs: list[str] = list(
            DEFAULT_HIDDEN_DIRS if hidden_dirs is None else hidden_dirs
        )
        self.visible = False
        self.focused = False
        self.selected: int | None = None
        self.scroll_y = 0.0
        self.nodes: list[TreeNode] = read_children(self.root, 0, self.hidden_dirs)

    def click(self, idx: int) -> Path | None:
        """Activate row ``idx`` and move the selection there.

        Returns the file's path when a file was clicked, else ``None``.
        """
        result = self._activate_at(idx)
        if self.nodes:
            self.selected = min(idx, len(self.nodes) - 1)
        return result

    def activate_selected(self) -> Path | None:
        """Activate the selected row; ``None`` when nothing is selected."""
        if self.selected is None:
            return None
        return self._activate_at(self.selected)

    def select_next(self) -> None:
        """Move the selection down, wrapping; seeds at the first row."""
        if not self.nodes:
            self.selected = None
            return
        if self.selected is None:
            self.selected = 0
        else:
            self.selected = (self.selected + 1) % len(self.nodes)

    def select_prev(self) -> None:
        """Move the selection up, wrapping; seeds at the last row."""
        if not self.nodes:
            self.selected = None
            return
        last = len(self.nodes) - 1
        if self.selected is None or self.selected == 0:
            self.selected = last
        else:
            self.selected -= 1

    def reload(self) -> None:
        """Re-read the root, collapsing every directory."""
        self.nodes = read_children(self.root, 0, self.hidden_dirs)
        self._clamp_selection()

    def reload_preserving_expansion(self) -> None:
        """Re-read the tree, keeping previously expanded directories expanded."""
        expanded = {n.path for n in self.nodes if n.is_dir and n.expanded}
        self.nodes = read_children(self.root, 0, self.hidden_dirs)
        i = 0
        while i < len(self.nodes):
            node = self.nodes[i]
            if node.is_dir and not node.expanded and node.path in expanded:
                node.expanded = True
                children = read_children(node.path, node.depth + 1, self.hidden_dirs)
                self.nodes[i + 1 : i + 1] = children
            i += 1
        self._clamp_selection()

    def _clamp_selection(self) -> None:
        if self.selected is None:
            return
        if not self.nodes:
            self.selected = None
        elif self.selected >= len(self.nodes):
            self.selected = len(self.nodes) - 1

    def _activate_at(self, idx: int) -> Path | None:
        if not 0 <= idx < len(self.nodes):
            return None
        node = self.nodes[idx]
        if not node.is_dir:
            return node.path
        was_expanded = node.expanded
        node.expanded = not was_expanded
        if was_expanded:
            self._collapse_at(idx)
        else:
            self._expand_at(idx)
        return None

    def _expand_at(self, idx: int) -> None:
        parent = self.nodes[idx]
        children = read_children(parent.path, parent.depth + 1, self.hidden_dirs)
        self.nodes[idx + 1 : idx + 1] = children

    def _collapse_at(self, idx: int) -> None:
        parent_depth = self.nodes[idx].depth
        end = idx + 1
        while end < len(self.nodes) and self.nodes[end].depth > parent_depth:
            end += 1
        del self.nodes[idx + 1 : end]