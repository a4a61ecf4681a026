# VMSYNC Configuration Module
# Settings file loading and resolution of sync paths and excludes

from vmsync.config.defaults import (
    DEFAULT_COMPOSE_FILE,
    DEFAULT_EXCLUDES,
    DEFAULT_IGNORE_FILE,
    DEFAULT_LOG_LEVEL,
)
from vmsync.config.loader import get_settings_path, load_settings
from vmsync.config.resolver import (
    read_compose_volumes,
    read_ignore_patterns,
    resolve_excludes,
    resolve_paths,
)
from vmsync.config.schema import (
    OutputSettings,
    RemoteSettings,
    RemoteTarget,
    SyncConfig,
    TransferSettings,
    VmsyncSettings,
)

__all__ = [
    # Schema
    "VmsyncSettings",
    "RemoteSettings",
    "TransferSettings",
    "OutputSettings",
    "RemoteTarget",
    "SyncConfig",
    # Loader
    "load_settings",
    "get_settings_path",
    # Resolver
    "resolve_paths",
    "resolve_excludes",
    "read_compose_volumes",
    "read_ignore_patterns",
    # Defaults
    "DEFAULT_COMPOSE_FILE",
    "DEFAULT_IGNORE_FILE",
    "DEFAULT_EXCLUDES",
    "DEFAULT_LOG_LEVEL",
]
