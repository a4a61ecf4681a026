# VMSYNC Remote Operations
# SSH key lookup and remote command execution on the VM

import shlex
import subprocess
from collections.abc import Sequence

from vmsync.config.schema import RemoteTarget, VmsyncSettings


class RemoteError(Exception):
    """Exception raised for remote command and VM tool errors."""

    def __init__(self, message: str, returncode: int = 1, output: str = ""):
        self.message = message
        self.returncode = returncode
        self.output = output
        super().__init__(message)


def _run(
    cmd: Sequence[str],
    *,
    check: bool = True,
) -> subprocess.CompletedProcess[str]:
    """
    Run a command with stdout and stderr combined.

    Args:
        cmd: Command and arguments.
        check: Whether to raise on non-zero exit.

    Returns:
        CompletedProcess with combined output in stdout.

    Raises:
        RemoteError: If the executable is missing, or the command fails and check is True.
    """
    try:
        result = subprocess.run(
            list(cmd),
            check=False,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
    except FileNotFoundError:
        raise RemoteError(f"{cmd[0]} command not found. Is it installed?")

    if check and result.returncode != 0:
        raise RemoteError(
            f"Command failed: {' '.join(cmd)}",
            returncode=result.returncode,
            output=result.stdout.strip() if result.stdout else "",
        )
    return result


def ssh_options(target: RemoteTarget) -> list[str]:
    """
    Build ssh options for the VM.

    Host key checking is disabled because the VM's host key changes
    whenever it is recreated.

    Args:
        target: Remote target.

    Returns:
        Option list, without the ssh executable itself.
    """
    options = []
    if target.ssh_key:
        options.extend(["-i", target.ssh_key])
    options.extend(
        [
            "-o",
            "StrictHostKeyChecking=no",
            "-o",
            "UserKnownHostsFile=/dev/null",
            "-o",
            "LogLevel=quiet",
        ]
    )
    return options


def ssh_command(target: RemoteTarget) -> str:
    """Shell string of the ssh invocation, as rsync expects for -e."""
    return shlex.join(["ssh", *ssh_options(target)])


def lookup_ssh_key(settings: VmsyncSettings) -> str:
    """
    Ask the VM tool for the SSH key of the configured machine.

    Args:
        settings: Loaded settings.

    Returns:
        Path to the private key.

    Raises:
        RemoteError: If the tool fails or reports no key.
    """
    remote = settings.remote
    result = _run([remote.vm_tool, "inspect", "--format", "{{.Driver.SSHKeyPath}}", remote.machine])
    key = result.stdout.strip()
    if not key:
        raise RemoteError(f"{remote.vm_tool} reported no SSH key for machine '{remote.machine}'")
    return key


def resolve_remote_target(settings: VmsyncSettings) -> RemoteTarget:
    """
    Resolve the remote target once at startup.

    Args:
        settings: Loaded settings.

    Returns:
        RemoteTarget with user and host from settings and the SSH key
        from settings or the VM tool.
    """
    remote = settings.remote
    ssh_key = remote.ssh_key or lookup_ssh_key(settings)
    return RemoteTarget(user=remote.user, host=remote.host, ssh_key=ssh_key)


def run_remote_command(
    target: RemoteTarget,
    command: str,
    *,
    check: bool = True,
) -> subprocess.CompletedProcess[str]:
    """
    Execute a shell command on the VM.

    Args:
        target: Remote target.
        command: Shell command line run by the remote shell.
        check: Whether to raise on non-zero exit.

    Returns:
        CompletedProcess with combined output in stdout.

    Raises:
        RemoteError: If the command fails and check is True.
    """
    return _run(["ssh", *ssh_options(target), target.destination, command], check=check)
