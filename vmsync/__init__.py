"""vmsync - mirror host directories into a docker VM.

One-way synchronization of host directories into a virtual machine with
rsync, driven by fswatch change events.
"""

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "Logger",
    "LogLevel",
    "SyncConfig",
    "TransferEngine",
    "InitialSync",
    "WatchLoop",
    "find_owning_root",
    "resolve_paths",
    "resolve_excludes",
]


def __getattr__(name: str):
    """Lazy import to avoid loading dependencies during setup."""
    if name in ("Logger", "LogLevel"):
        from vmsync import logger

        return getattr(logger, name)
    if name in ("SyncConfig", "resolve_paths", "resolve_excludes"):
        from vmsync import config

        return getattr(config, name)
    if name in ("TransferEngine", "InitialSync", "WatchLoop", "find_owning_root"):
        from vmsync import sync

        return getattr(sync, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
