"""Path utilities.

Experiments run from anywhere (repo root, `experiments/`, an IDE). These
helpers locate the project root so relative paths in the YAML config resolve
the same way regardless of the working directory.
"""

from __future__ import annotations

from pathlib import Path


def find_project_root(start: Path) -> Path:
    """Find the enclosing project root.

    Strategy: walk upward from `start` until we find a directory that looks
    like the project root (contains `config/` and `pyproject.toml`).

    Returns `start` if no such parent exists.
    """
    start = start.resolve()
    for candidate in (start, *start.parents):
        if (candidate / "config").is_dir() and (candidate / "pyproject.toml").is_file():
            return candidate
    return start
