# VMSYNC Config Resolver
# Merge sync paths and excludes from command line, compose file and ignore file

from collections.abc import Sequence
from pathlib import Path
from typing import Optional

from vmsync.config.defaults import DEFAULT_EXCLUDES
from vmsync.logger import Logger
from vmsync.utils.paths import normalize_path


def _read_lines(path: Path) -> list[str]:
    """Read a text file as lines, or nothing if it does not exist."""
    if not path.is_file():
        return []
    return path.read_text(encoding="utf-8").splitlines()


def read_compose_volumes(compose_file: str | Path) -> list[str]:
    """
    Extract host paths from the volumes blocks of a compose file.

    The file is scanned as plain text, not parsed as YAML. A line reading
    ``volumes:`` opens a block; each following ``- HOST:CONTAINER`` line
    contributes HOST; the first line of any other shape closes the block.
    Indentation is ignored.

    Args:
        compose_file: Path to the compose file.

    Returns:
        Host paths in file order; empty if the file is missing.
    """
    volumes: list[str] = []
    in_volumes = False

    for raw_line in _read_lines(Path(compose_file)):
        line = raw_line.strip()

        if in_volumes:
            if line.startswith("- "):
                volumes.append(line[2:].split(":", 1)[0].strip())
                continue
            in_volumes = False

        if line == "volumes:":
            in_volumes = True

    return volumes


def read_ignore_patterns(ignore_file: str | Path) -> list[str]:
    """
    Read exclude patterns from an ignore file.

    Args:
        ignore_file: Path to the ignore file.

    Returns:
        One pattern per non-blank, non-comment line; empty if the file is missing.
    """
    patterns: list[str] = []
    for raw_line in _read_lines(Path(ignore_file)):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        patterns.append(line)
    return patterns


def resolve_paths(
    compose_file: str | Path,
    cmdline_paths: Sequence[str] = (),
    logger: Optional[Logger] = None,
) -> list[str]:
    """
    Resolve the sync roots.

    Command-line paths come first, compose-file volumes are appended after
    them. If both are empty the current directory is used. Every path is
    normalized independently; duplicates are kept.

    Args:
        compose_file: Path to the compose file.
        cmdline_paths: Paths given with -s.
        logger: Optional logger for the resolved set.

    Returns:
        Ordered list of normalized sync roots.
    """
    raw_paths = list(cmdline_paths) + read_compose_volumes(compose_file)
    if not raw_paths:
        raw_paths = [str(Path.cwd())]

    paths = [normalize_path(p) for p in raw_paths]

    if logger:
        logger.info(f"Paths to sync: {' '.join(paths)}")
    return paths


def resolve_excludes(
    ignore_file: str | Path,
    cmdline_excludes: Sequence[str] = (),
    logger: Optional[Logger] = None,
) -> list[str]:
    """
    Resolve the exclude patterns.

    Command-line patterns come first, ignore-file patterns are appended.
    If both are empty the built-in defaults are used.

    Args:
        ignore_file: Path to the ignore file.
        cmdline_excludes: Patterns given with -e.
        logger: Optional logger for the resolved set.

    Returns:
        Ordered list of exclude patterns.
    """
    excludes = list(cmdline_excludes) + read_ignore_patterns(ignore_file)
    if not excludes:
        excludes = list(DEFAULT_EXCLUDES)

    if logger:
        logger.info(f"Excluding: {' '.join(excludes)}")
    return excludes
