"""Detect the workspace's package manager and its package.json scripts."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass
from pathlib import Path


class PackageManager(enum.Enum):
    """CLI used to run a workspace script."""

    NPM = "npm"
    PNPM = "pnpm"
    YARN = "yarn"
    BUN = "bun"

    @property
    def binary(self) -> str:
        """Command name that ``<binary> run <script>`` invokes."""
        return self.value


@dataclass(frozen=True)
class NpmScript:
    """One entry under the ``scripts`` key of ``package.json``."""

    name: str
    command: str


_LOCKFILES = (
    ("bun.lockb", PackageManager.BUN),
    ("pnpm-lock.yaml", PackageManager.PNPM),
    ("yarn.lock", PackageManager.YARN),
)


def detect_package_manager(root: str | Path) -> PackageManager:
    """Pick a package manager from the lockfile in ``root``; npm by default."""
    root = Path(root)
    for lockfile, manager in _LOCKFILES:
        if (root / lockfile).exists():
            return manager
    return PackageManager.NPM


def read_scripts(root: str | Path) -> list[NpmScript]:
    """Return the scripts of ``root/package.json`` sorted by name.

    Missing or malformed manifests, or ones without scripts, give an empty list.
    """
    try:
        text = (Path(root) / "package.json").read_text(encoding="utf-8")
        manifest = json.loads(text)
    except (OSError, UnicodeDecodeError, ValueError):
        return []
    if not isinstance(manifest, dict):
        return []
    scripts = manifest.get("scripts", {})
    if not isinstance(scripts, dict):
        return []
    if not all(isinstance(v, str) for v in scripts.values()):
        return []
    return [NpmScript(name, command) for name, command in sorted(scripts.items())]