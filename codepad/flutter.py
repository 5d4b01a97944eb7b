"""Flutter project detection and device listing."""

from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class FlutterDevice:
    """A device or emulator reported by ``flutter devices --machine``."""

    id: str
    name: str
    emulator: bool = False
    target_platform: str = ""


@dataclass(frozen=True)
class FlutterProject:
    """A workspace whose ``pubspec.yaml`` depends on the Flutter SDK."""

    name: str


def _parse_device(entry: object) -> FlutterDevice:
    if not isinstance(entry, dict):
        raise ValueError("device entry is not an object")
    device_id = entry.get("id")
    name = entry.get("name")
    if not isinstance(device_id, str) or not isinstance(name, str):
        raise ValueError("device entry lacks id or name")
    emulator = entry.get("emulator", False)
    platform = entry.get("targetPlatform", "")
    if not isinstance(emulator, bool) or not isinstance(platform, str):
        raise ValueError("device entry has malformed fields")
    return FlutterDevice(device_id, name, emulator, platform)


def list_devices() -> list[FlutterDevice]:
    """Run ``flutter devices --machine`` and parse its output.

    Blocks while the command runs. Any failure gives an empty list.
    """
    try:
        proc = subprocess.run(
            ["flutter", "devices", "--machine"],
            capture_output=True,
            check=False,
        )
    except OSError as exc:
        log.warning("flutter devices: spawn failed: %s", exc)
        return []
    if proc.returncode != 0:
        log.warning(
            "flutter devices: exit %s stderr=%s",
            proc.returncode,
            proc.stderr.decode("utf-8", "replace").strip(),
        )
        return []
    try:
        data = json.loads(proc.stdout)
        if not isinstance(data, list):
            raise ValueError("expected a JSON array")
        return [_parse_device(entry) for entry in data]
    except ValueError as exc:
        log.warning(
            "flutter devices: json parse failed: %s; raw=%s",
            exc,
            proc.stdout.decode("utf-8", "replace").strip(),
        )
        return []


def parse_name(pubspec: str) -> str | None:
    """The first non-empty top-level ``name:`` value, unquoted."""
    for line in pubspec.split("\n"):
        if line.startswith("name:"):
            value = line[len("name:"):].strip().strip("\"'")
            if value:
                return value
    return None


def has_flutter_dependency(pubspec: str) -> bool:
    """True when a ``flutter:`` entry sits under the ``dependencies:`` section."""
    in_deps = False
    for raw in pubspec.split("\n"):
        line = raw.rstrip()
        if not line or line.lstrip().startswith("#"):
            continue
        if not line.startswith((" ", "\t")):
            in_deps = line.startswith("dependencies:")
            continue
        if in_deps and line.lstrip().startswith("flutter:"):
            return True
    return False


def detect_flutter(root: str | Path) -> FlutterProject | None:
    """Inspect ``root/pubspec.yaml`` for a Flutter SDK dependency."""
    try:
        text = (Path(root) / "pubspec.yaml").read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None
    if not has_flutter_dependency(text):
        return None
    return FlutterProject(parse_name(text) or "")