# VMSYNC Utilities Module
# Helper functions for path handling

from vmsync.utils.paths import (
    normalize_path,
    parent_dir,
    unique_parents,
)

__all__ = [
    "normalize_path",
    "parent_dir",
    "unique_parents",
]
