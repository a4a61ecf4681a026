# VMSYNC Sync Module
# Root mapping, transfers, initial placement and the watch loop

from vmsync.sync.initial import InitialSync, build_prepare_command
from vmsync.sync.mapper import find_owning_root
from vmsync.sync.transfer import (
    TRANSFER_FLAGS,
    RsyncTransport,
    TransferEngine,
    TransferError,
    TransferResult,
    TransferTimeout,
    Transport,
    TransportOutput,
)
from vmsync.sync.watcher import ChangeSource, ChangeSourceError, FswatchSource, WatchLoop

__all__ = [
    # Mapper
    "find_owning_root",
    # Transfer
    "TRANSFER_FLAGS",
    "Transport",
    "TransportOutput",
    "RsyncTransport",
    "TransferEngine",
    "TransferResult",
    "TransferError",
    "TransferTimeout",
    # Initial sync
    "InitialSync",
    "build_prepare_command",
    # Watch loop
    "ChangeSource",
    "ChangeSourceError",
    "FswatchSource",
    "WatchLoop",
]
