# VMSYNC Remote Module
# SSH access to the VM

from vmsync.remote.operations import (
    RemoteError,
    lookup_ssh_key,
    resolve_remote_target,
    run_remote_command,
    ssh_command,
    ssh_options,
)

__all__ = [
    "RemoteError",
    "lookup_ssh_key",
    "resolve_remote_target",
    "run_remote_command",
    "ssh_command",
    "ssh_options",
]
