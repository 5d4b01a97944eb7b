import json
import subprocess
from unittest import mock

from codepad.flutter import (
    FlutterDevice,
    FlutterProject,
    detect_flutter,
    has_flutter_dependency,
    list_devices,
    parse_name,
)


def test_detect_returns_none_without_pubspec(tmp_path):
    assert detect_flutter(tmp_path) is None


def test_detect_returns_none_for_pure_dart_package(tmp_path):
    (tmp_path / "pubspec.yaml").write_text(
        "name: dart_tool\ndependencies:\n  args: ^2.4.0\n"
    )
    assert detect_flutter(tmp_path) is None


def test_detect_picks_up_flutter_sdk_dependency(tmp_path):
    (tmp_path / "pubspec.yaml").write_text(
        "name: my_app\n"
        "description: example\n"
        "dependencies:\n"
        "  flutter:\n"
        "    sdk: flutter\n"
        "  cupertino_icons: ^1.0.2\n"
    )
    assert detect_flutter(tmp_path) == FlutterProject("my_app")


def test_detect_handles_quoted_name(tmp_path):
    (tmp_path / "pubspec.yaml").write_text(
        'name: "my_app"\ndependencies:\n  flutter:\n    sdk: flutter\n'
    )
    assert detect_flutter(tmp_path).name == "my_app"


def test_detect_ignores_flutter_keyword_outside_dependencies(tmp_path):
    (tmp_path / "pubspec.yaml").write_text(
        "name: pure_dart\n"
        "dependencies:\n  args: ^2.4.0\n"
        "flutter:\n  uses-material-design: true\n"
    )
    assert detect_flutter(tmp_path) is None


def test_detect_handles_comments_and_blank_lines(tmp_path):
    (tmp_path / "pubspec.yaml").write_text(
        "# top-level comment\n"
        "name: my_app\n"
        "\n"
        "dependencies:\n"
        "  # inline comment\n"
        "  flutter:\n"
        "    sdk: flutter\n"
    )
    assert detect_flutter(tmp_path) == FlutterProject("my_app")


def test_detect_without_name_gives_empty_name(tmp_path):
    (tmp_path / "pubspec.yaml").write_text("dependencies:\n  flutter:\n")
    assert detect_flutter(tmp_path) == FlutterProject("")


def test_parse_name_variants():
    assert parse_name("name: 'single'\n") == "single"
    assert parse_name("name:\nname: second\n") == "second"
    assert parse_name("  name: indented\n") is None


def test_has_flutter_dependency_with_tab_indent():
    assert has_flutter_dependency("dependencies:\n\tflutter:\n")
    assert not has_flutter_dependency("dev_dependencies:\n  flutter:\n")


def _completed(stdout=b"", returncode=0, stderr=b""):
    return subprocess.CompletedProcess(
        ["flutter", "devices", "--machine"], returncode, stdout, stderr
    )


def test_list_devices_parses_output():
    payload = json.dumps(
        [
            {"id": "macos", "name": "macOS", "targetPlatform": "darwin", "extra": 1},
            {"id": "emu-1", "name": "Pixel", "emulator": True},
        ]
    ).encode()
    with mock.patch("codepad.flutter.subprocess.run", return_value=_completed(payload)):
        devices = list_devices()
    assert devices == [
        FlutterDevice("macos", "macOS", False, "darwin"),
        FlutterDevice("emu-1", "Pixel", True, ""),
    ]


def test_list_devices_empty_when_binary_missing():
    with mock.patch("codepad.flutter.subprocess.run", side_effect=FileNotFoundError):
        assert list_devices() == []


def test_list_devices_empty_on_nonzero_exit():
    with mock.patch(
        "codepad.flutter.subprocess.run",
        return_value=_completed(b"[]", returncode=1, stderr=b"boom"),
    ):
        assert list_devices() == []


def test_list_devices_empty_on_bad_json():
    with mock.patch(
        "codepad.flutter.subprocess.run", return_value=_completed(b"not json")
    ):
        assert list_devices() == []


def test_list_devices_empty_when_entry_lacks_id():
    payload = json.dumps([{"name": "NoId"}]).encode()
    with mock.patch("codepad.flutter.subprocess.run", return_value=_completed(payload)):
        assert list_devices() == []