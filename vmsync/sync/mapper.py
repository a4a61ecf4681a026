# VMSYNC Root Mapper
# Map changed paths back to the sync root that owns them

from collections.abc import Iterable

from vmsync.utils.paths import normalize_path


def find_owning_root(path: str, roots: Iterable[str]) -> str | None:
    """
    Find the configured sync root that contains a path.

    Roots are tried in configuration order and the first one that is a
    string prefix of the normalized path wins. The comparison is not
    segment-aware: root ``/foo`` also owns ``/foobar``.

    Args:
        path: Changed path, possibly deeply nested.
        roots: Normalized sync roots.

    Returns:
        The owning root, or None if no root matches.
    """
    normalized = normalize_path(path)
    for root in roots:
        if normalized.startswith(root):
            return root
    return None
