"""Building blocks for a code editor: search, palette, file tree, git status and workspace detection."""

__version__ = "0.1.0"

__all__ = [
    "document",
    "file_tree",
    "find",
    "find_in_files",
    "flutter",
    "git",
    "palette",
    "scripts",
    "terminal_palette",
    "vscode_discover",
]