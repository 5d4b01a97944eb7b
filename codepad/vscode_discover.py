"""Find colour themes installed by VSCode and its forks."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

_EXTENSION_DIRS = (
    ".vscode/extensions",
    ".vscode-insiders/extensions",
    ".vscode-oss/extensions",
    ".cursor/extensions",
    ".windsurf/extensions",
)


@dataclass(frozen=True)
class DiscoveredTheme:
    """A theme found on disk, ready to offer in the palette."""

    label: str
    path: Path
    dark: bool


def _home(home: str | Path | None) -> Path | None:
    if home is not None:
        return Path(home)
    try:
        return Path.home()
    except RuntimeError:
        return None


def extension_roots(home: str | Path | None = None) -> list[Path]:
    """Existing extension directories under ``home`` (the user's home by default)."""
    base = _home(home)
    if base is None:
        return []
    return [base / rel for rel in _EXTENSION_DIRS if (base / rel).is_dir()]


def _theme_entries(manifest: object) -> list[tuple[str | None, str, str | None]] | None:
    """Validated ``(label, path, uiTheme)`` entries, or ``None`` if malformed."""
    if not isinstance(manifest, dict):
        return None
    contributes = manifest.get("contributes", {})
    if not isinstance(contributes, dict):
        return None
    themes = contributes.get("themes", [])
    if not isinstance(themes, list):
        return None
    entries = []
    for theme in themes:
        if not isinstance(theme, dict):
            return None
        label = theme.get("label")
        path = theme.get("path")
        ui_theme = theme.get("uiTheme")
        if not isinstance(path, str):
            return None
        if label is not None and not isinstance(label, str):
            return None
        if ui_theme is not None and not isinstance(ui_theme, str):
            return None
        entries.append((label, path, ui_theme))
    return entries


def _strip_dot_slash(path: str) -> str:
    while path.startswith("./"):
        path = path[2:]
    return path


def collect_from_root(root: str | Path) -> list[DiscoveredTheme]:
    """Theme contributions of every ``<root>/<extension>/package.json``.

    Entries without a label or whose theme file is missing are skipped.
    """
    found: list[DiscoveredTheme] = []
    try:
        extensions = list(Path(root).iterdir())
    except OSError:
        return found
    for ext_dir in extensions:
        if not ext_dir.is_dir():
            continue
        try:
            text = (ext_dir / "package.json").read_text(encoding="utf-8")
            entries = _theme_entries(json.loads(text))
        except (OSError, UnicodeDecodeError, ValueError):
            continue
        if entries is None:
            continue
        for label, rel_path, ui_theme in entries:
            if label is None:
                continue
            theme_path = ext_dir / _strip_dot_slash(rel_path)
            if not theme_path.is_file():
                continue
            dark = ui_theme is None or "dark" in ui_theme or "black" in ui_theme
            found.append(DiscoveredTheme(label, theme_path, dark))
    return found


def discover_themes(home: str | Path | None = None) -> list[DiscoveredTheme]:
    """All installed themes, dark first then by label, de-duplicated by (label, dark)."""
    themes = [t for root in extension_roots(home) for t in collect_from_root(root)]
    themes.sort(key=lambda t: (not t.dark, t.label))
    unique: list[DiscoveredTheme] = []
    for theme in themes:
        if unique and unique[-1].label == theme.label and unique[-1].dark == theme.dark:
            continue
        unique.append(theme)
    return unique