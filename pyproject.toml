[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "codepad"
version = "0.1.0"
description = "Editor building blocks: find bar, command palette, file tree, project search, git line status and workspace detection"
requires-python = ">=3.10"
dependencies = []
keywords = ["editor", "find", "command-palette", "file-tree", "git", "terminal"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Editors",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["codepad"]

[tool.pytest.ini_options]
addopts = "-ra"
