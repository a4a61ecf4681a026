# VMSYNC Path Utilities
# Path canonicalization for prefix comparisons between roots and events

import os
from pathlib import Path


def normalize_path(path: str | Path) -> str:
    """
    Canonicalize a path into an absolute, symlink-free string.

    Expands ~ and environment variables, makes relative paths absolute
    against the current directory and resolves symlinks and ``..``
    segments. Paths that do not exist (e.g. deleted files) are resolved
    as far as possible. Paths that cannot be resolved (symlink loops,
    unreadable components) fall back to the absolute, unresolved form.

    Args:
        path: Path string or Path object.

    Returns:
        Normalized absolute path string without trailing separator.
    """
    path_str = os.path.expanduser(str(path))
    path_str = os.path.expandvars(path_str)
    try:
        return str(Path(path_str).resolve())
    except (RuntimeError, OSError):
        return os.path.abspath(path_str)


def parent_dir(path: str | Path) -> str:
    """
    Get the parent directory of a normalized path.

    Args:
        path: Normalized path.

    Returns:
        Parent directory string. The parent of ``/`` is ``/``.
    """
    return str(Path(path).parent)


def unique_parents(paths: list[str]) -> list[str]:
    """
    Get the parent directories of paths, deduplicated in first-seen order.

    Args:
        paths: Normalized paths.

    Returns:
        List of parent directory strings.
    """
    parents: list[str] = []
    for path in paths:
        parent = parent_dir(path)
        if parent not in parents:
            parents.append(parent)
    return parents
