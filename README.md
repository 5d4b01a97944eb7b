# codepad

Pure-Python building blocks for a code editor's chrome. Each module holds
the state and logic of one feature; drawing and input handling are left to
the host application. The package has no third-party dependencies.

## Modules

- `codepad.find` — `FindBar`: literal in-buffer search. The query is
  case-insensitive by default; `toggle_case_sensitive(text)` and
  `toggle_whole_word(text)` change the rules and rescan. A second input,
  the replacement, is edited when `toggle_focus()` moves focus to it
  (`FindFocus.QUERY` / `FindFocus.REPLACEMENT`). Matches are half-open
  character ranges (`range` objects), available as `matches`, with
  `current_match()`, `match_count()`, and wrap-around `next_match()` /
  `prev_match()`.
- `codepad.palette` — `CommandPalette`, `CommandEntry`, `CommandId`,
  `BUILTIN_COMMAND_IDS`: a fuzzy-filtered command list. Queries are split
  on whitespace into terms that must all match; a term is matched
  case-insensitively when it is all lower case. Prefixes `^` (starts
  with), `'` (substring) and `!` (must not contain), and a trailing `$`
  (ends with), change how a term matches. Results are ordered best first.
  The list can be shown through a fixed-height window with
  `windowed_labels(window)`, `scroll_into_view(window)`,
  `selected_row_windowed(window)` and `set_scroll(scroll, window)`.
  `CommandEntry.builtin(command_id)` gives the canonical label; dynamic
  entries can carry an `argument` (a script name, device id or theme path).
- `codepad.file_tree` — `FileTree`: the visible sidebar rows as a flat
  list of `TreeNode`s. `click(idx)` and `activate_selected()` return the
  file's `Path` for a file row and toggle a directory row in place
  (returning `None`). Selection moves with `select_next()` /
  `select_prev()`, wrapping. `reload()` re-reads and collapses everything;
  `reload_preserving_expansion()` keeps open directories open. Names in
  `hidden_dirs` (by default `DEFAULT_HIDDEN_DIRS`) are skipped;
  `read_children(directory, depth, hidden_dirs)` lists one directory,
  directories first, each group sorted case-insensitively.
- `codepad.find_in_files` — `search(query, root)` walks a project
  depth-first and returns a `FindMatch` (path, 0-based line, line text) for
  every line containing the query, case-insensitively. Inside a git
  repository it honours `.gitignore` and `.git/info/exclude`; `.ignore`
  files are honoured everywhere. Hidden files are searched; symlinks are
  not followed. Files over `MAX_FILE_BYTES` (1,000,000) or not valid UTF-8
  are skipped, and results stop at `MAX_RESULTS` (500). `FindInFiles`
  holds the panel state.
- `codepad.document` — `Document`: one open tab holding its text, path,
  dirty flag, scroll offset, find bar, indent width and git line status.
  `Document.new_scratch(text)`, `Document.from_file(path, content)`,
  `label()` and `is_pristine_scratch()`. `detect_indent_unit(text)` guesses
  the leading-space indent (default 4).
- `codepad.git` — `compute_line_status(path, text)` maps line indices to
  `GitLineStatus` (added / modified / deleted) against HEAD;
  `compute_workspace_status(root)` maps file paths to `FileGitStatus`;
  `aggregate_dirs(files, stop_at)` rolls file statuses up to their
  directories (conflicted > modified > added > deleted > untracked).
- `codepad.scripts` — `detect_package_manager(root)` picks a
  `PackageManager` from the lockfile present (bun, pnpm, yarn, else npm);
  `read_scripts(root)` returns the `package.json` scripts sorted by name.
- `codepad.flutter` — `detect_flutter(root)` reports a `FlutterProject`
  when `pubspec.yaml` depends on the Flutter SDK; `list_devices()` runs
  `flutter devices --machine` and returns `FlutterDevice`s.
- `codepad.vscode_discover` — `discover_themes(home=None)` finds colour
  themes installed by VSCode and its forks (dark themes first, then by
  label); `collect_from_root(root)` scans one extensions directory.
- `codepad.terminal_palette` — ANSI / xterm-256 colour resolution:
  `xterm_256`, `named_color`, `resolve`, `brighten_named`, with
  `NamedColor`, `Indexed`, `PaletteColor`, `PaletteContext` and
  `DEFAULT_ANSI_16`.

## Example

```python
from codepad.find import FindBar

text = "foo foobar foo"
bar = FindBar()
for ch in "foo":
    bar.push_char(ch, text)
print(bar.match_count())      # 3
bar.toggle_whole_word(text)
print(bar.current_match())    # range(0, 3)
```

```python
from pathlib import Path
from codepad.scripts import detect_package_manager, read_scripts

root = Path(".")
pm = detect_package_manager(root)
for script in read_scripts(root):
    print(pm.binary, "run", script.name)
```

## What it does not do

There is no application here: no window, no rendering, no key handling and
no command to start. `Document` keeps plain text and has no editing engine,
undo history or syntax highlighting. There is no language-server support,
and no embedded terminal — `terminal_palette` only resolves colours.

## External tools

The git helpers call the `git` executable and return empty results when it
is missing or the path is outside a repository; `list_devices` calls
`flutter` and returns an empty list on any failure.

## Installing and testing

```
pip install .
pip install ".[test]"
pytest
```