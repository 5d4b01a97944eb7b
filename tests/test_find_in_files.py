from pathlib import Path

import pytest

from codepad.find_in_files import (
    MAX_FILE_BYTES,
    MAX_RESULTS,
    FindInFiles,
    FindMatch,
    search,
)


def test_matches_a_substring_per_line(tmp_path):
    (tmp_path / "a.txt").write_text("hello world\nnope\nhello again\n")
    hits = search("hello", tmp_path)
    assert [h.line for h in hits] == [0, 2]
    assert hits[0].line_text == "hello world"
    assert hits[0].path == tmp_path / "a.txt"


def test_case_insensitive_match(tmp_path):
    (tmp_path / "a.txt").write_text("Hello\nWORLD\nfoo\n")
    assert len(search("hello", tmp_path)) == 1
    assert len(search("WORLD", tmp_path)) == 1


@pytest.mark.parametrize("query", ["", "   "])
def test_empty_query_returns_no_results(tmp_path, query):
    (tmp_path / "a.txt").write_text("anything\n")
    assert search(query, tmp_path) == []


def test_query_is_trimmed(tmp_path):
    (tmp_path / "a.txt").write_text("needle here\n")
    assert [h.line for h in search("  needle  ", tmp_path)] == [0]


def test_query_is_literal_not_regex(tmp_path):
    (tmp_path / "a.txt").write_text("a.c\nabc\n")
    hits = search("a.c", tmp_path)
    assert [h.line_text for h in hits] == ["a.c"]


def test_binary_files_are_skipped(tmp_path):
    (tmp_path / "text.txt").write_text("hello\n")
    (tmp_path / "blob.bin").write_bytes(bytes([0, 159, 146, 150, 0, 0]))
    hits = search("hello", tmp_path)
    assert len(hits) == 1
    assert hits[0].path.name == "text.txt"


def test_gitignored_paths_are_skipped_when_inside_a_repo(tmp_path):
    (tmp_path / ".git").mkdir()
    (tmp_path / ".gitignore").write_text("ignored.txt\n")
    (tmp_path / "kept.txt").write_text("needle\n")
    (tmp_path / "ignored.txt").write_text("needle\n")
    hits = search("needle", tmp_path)
    assert [h.path.name for h in hits] == ["kept.txt"]


def test_gitignore_is_not_applied_outside_a_repo(tmp_path):
    (tmp_path / ".gitignore").write_text("ignored.txt\n")
    (tmp_path / "kept.txt").write_text("needle\n")
    (tmp_path / "ignored.txt").write_text("needle\n")
    hits = search("needle", tmp_path)
    assert sorted(h.path.name for h in hits) == ["ignored.txt", "kept.txt"]


def test_gitignore_directory_pattern_and_negation(tmp_path):
    (tmp_path / ".git").mkdir()
    (tmp_path / ".gitignore").write_text("build/\n*.log\n!keep.log\n")
    (tmp_path / "build").mkdir()
    (tmp_path / "build" / "out.txt").write_text("needle\n")
    (tmp_path / "debug.log").write_text("needle\n")
    (tmp_path / "keep.log").write_text("needle\n")
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "main.txt").write_text("needle\n")
    hits = search("needle", tmp_path)
    assert [h.path.relative_to(tmp_path).as_posix() for h in hits] == [
        "keep.log",
        "src/main.txt",
    ]


def test_nested_gitignore_applies_to_its_directory(tmp_path):
    (tmp_path / ".git").mkdir()
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / ".gitignore").write_text("/local.txt\n")
    (sub / "local.txt").write_text("needle\n")
    (tmp_path / "local.txt").write_text("needle\n")
    hits = search("needle", tmp_path)
    assert [h.path for h in hits] == [tmp_path / "local.txt"]


def test_dot_ignore_file_applies_without_repo(tmp_path):
    (tmp_path / ".ignore").write_text("secret_dir/\n")
    (tmp_path / "secret_dir").mkdir()
    (tmp_path / "secret_dir" / "x.txt").write_text("needle\n")
    (tmp_path / "y.txt").write_text("needle\n")
    hits = search("needle", tmp_path)
    assert [h.path.name for h in hits] == ["y.txt"]


def test_hidden_files_are_searched(tmp_path):
    (tmp_path / ".env").write_text("needle=1\n")
    hits = search("needle", tmp_path)
    assert [h.path.name for h in hits] == [".env"]


def test_crlf_line_endings_are_stripped(tmp_path):
    (tmp_path / "a.txt").write_bytes(b"one\r\nneedle two\r\n")
    hits = search("needle", tmp_path)
    assert hits == [FindMatch(tmp_path / "a.txt", 1, "needle two")]


def test_results_are_capped(tmp_path):
    (tmp_path / "a.txt").write_text("needle\n" * (MAX_RESULTS + 100))
    (tmp_path / "b.txt").write_text("needle\n")
    hits = search("needle", tmp_path)
    assert len(hits) == MAX_RESULTS
    assert all(h.path.name == "a.txt" for h in hits)


def test_large_files_are_skipped(tmp_path):
    (tmp_path / "big.txt").write_text("needle\n" + "a" * MAX_FILE_BYTES)
    (tmp_path / "small.txt").write_text("needle\n")
    hits = search("needle", tmp_path)
    assert [h.path.name for h in hits] == ["small.txt"]


def test_walk_order_is_depth_first_by_name(tmp_path):
    (tmp_path / "b").mkdir()
    (tmp_path / "b" / "inner.txt").write_text("needle\n")
    (tmp_path / "a.txt").write_text("needle\n")
    (tmp_path / "c.txt").write_text("needle\n")
    hits = search("needle", tmp_path)
    assert [h.path.relative_to(tmp_path).as_posix() for h in hits] == [
        "a.txt",
        "b/inner.txt",
        "c.txt",
    ]


def test_select_next_and_prev_wrap():
    f = FindInFiles()
    f.results = [
        FindMatch(Path("a"), 0, "x"),
        FindMatch(Path("b"), 0, "y"),
    ]
    assert f.selected == 0
    f.select_next()
    assert f.selected == 1
    f.select_next()
    assert f.selected == 0
    f.select_prev()
    assert f.selected == 1


def test_selection_is_noop_without_results():
    f = FindInFiles()
    f.select_next()
    f.select_prev()
    assert f.selected == 0
    assert f.input_focused is True