# VMSYNC Transfer Engine
# Push sync roots to the VM with rsync

import subprocess
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

from vmsync.config.schema import SyncConfig
from vmsync.logger import Logger, LogLevel
from vmsync.remote.operations import ssh_command
from vmsync.utils.paths import parent_dir

# --whole-file: the VM link is local, so delta encoding costs more than it saves
TRANSFER_FLAGS: tuple[str, ...] = (
    "--archive",
    "--delete",
    "--omit-dir-times",
    "--inplace",
    "--whole-file",
    "--itemize-changes",
)


class TransferError(Exception):
    """Exception raised when a transfer cannot be carried out."""


class TransferTimeout(TransferError):
    """Exception raised when a transfer exceeds its time limit."""


@dataclass
class TransportOutput:
    """Combined output and exit status of one transfer tool run."""

    lines: list[str]
    returncode: int


class Transport(ABC):
    """Bulk transfer capability."""

    @abstractmethod
    def run(
        self,
        flags: Sequence[str],
        excludes: Sequence[str],
        ssh_params: str,
        local_root: str,
        remote_destination: str,
        timeout: float | None = None,
    ) -> TransportOutput:
        """
        Copy local_root into remote_destination.

        Raises:
            TransferTimeout: If the run exceeds timeout.
            TransferError: If the tool cannot be started.
        """


class RsyncTransport(Transport):
    """Transport backed by the rsync executable."""

    def __init__(self, executable: str = "rsync"):
        self.executable = executable

    def build_command(
        self,
        flags: Sequence[str],
        excludes: Sequence[str],
        ssh_params: str,
        local_root: str,
        remote_destination: str,
    ) -> list[str]:
        """Build the rsync argument list."""
        cmd = [self.executable, *flags]
        cmd.extend(f"--exclude={pattern}" for pattern in excludes)
        cmd.extend(["-e", ssh_params, local_root, remote_destination])
        return cmd

    def run(
        self,
        flags: Sequence[str],
        excludes: Sequence[str],
        ssh_params: str,
        local_root: str,
        remote_destination: str,
        timeout: float | None = None,
    ) -> TransportOutput:
        cmd = self.build_command(flags, excludes, ssh_params, local_root, remote_destination)
        try:
            result = subprocess.run(
                cmd,
                check=False,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            raise TransferTimeout(f"{self.executable} timed out after {timeout}s")
        except FileNotFoundError:
            raise TransferError(f"{self.executable} command not found. Is it installed?")

        return TransportOutput(lines=result.stdout.splitlines(), returncode=result.returncode)


@dataclass
class TransferResult:
    """Result of transferring one sync root."""

    root: str
    success: bool = False
    returncode: int | None = None
    output: list[str] = field(default_factory=list)
    attempts: int = 0
    timed_out: bool = False
    error: str | None = None

    @property
    def changes(self) -> list[str]:
        """Itemized changes reported by a successful transfer."""
        if not self.success:
            return []
        return [line for line in self.output if line.strip()]


class TransferEngine:
    """
    Transfers sync roots to the VM.

    Failures are retried with exponential backoff and then logged; they
    never propagate to the caller. Transfers of the same root never overlap.
    """

    def __init__(
        self,
        config: SyncConfig,
        logger: Logger,
        transport: Transport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize transfer engine.

        Args:
            config: Resolved sync configuration.
            logger: Log sink.
            transport: Transfer capability (rsync if not provided).
            sleep: Backoff sleep function.
        """
        self.config = config
        self.logger = logger
        self.transport = transport or RsyncTransport()
        self._sleep = sleep
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, root: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(root)
            if lock is None:
                lock = threading.Lock()
                self._locks[root] = lock
            return lock

    def remote_destination(self, root: str) -> str:
        """rsync destination for a root: the parent directory on the VM."""
        return f"{self.config.remote.destination}:{parent_dir(root)}"

    def retry_delay(self, attempt: int) -> float:
        """Backoff delay before retry number attempt + 1 (0-based)."""
        return self.config.settings.transfer.retry_delay * (2**attempt)

    def transfer(self, root: str | None, trigger: str | None = None) -> TransferResult | None:
        """
        Transfer one sync root.

        Args:
            root: Sync root, usually from find_owning_root.
            trigger: Changed path that caused the transfer, for log messages.

        Returns:
            TransferResult, or None if root is not a configured sync root.
        """
        if root is None or root not in self.config.paths:
            self.logger.error(f"Unable to find a sync root for {trigger or root}")
            return None

        with self._lock_for(root):
            return self._transfer_with_retry(root)

    def transfer_many(self, roots: Iterable[str]) -> list[TransferResult | None]:
        """Transfer roots one after another."""
        return [self.transfer(root) for root in roots]

    def _transfer_with_retry(self, root: str) -> TransferResult:
        settings = self.config.settings.transfer
        result = TransferResult(root=root)
        max_attempts = settings.max_retries + 1

        for attempt in range(max_attempts):
            result.attempts = attempt + 1
            self._attempt(root, result)
            if result.success:
                return result

            if attempt + 1 < max_attempts:
                delay = self.retry_delay(attempt)
                self.logger.warn(
                    f"Transfer of {root} failed ({result.error}), "
                    f"retrying in {delay:.1f}s (attempt {attempt + 2}/{max_attempts})"
                )
                self._sleep(delay)

        self.logger.error(f"Giving up on {root} after {result.attempts} attempts: {result.error}")
        return result

    def _attempt(self, root: str, result: TransferResult) -> None:
        settings = self.config.settings.transfer
        result.timed_out = False
        result.output = []
        result.returncode = None

        try:
            output = self.transport.run(
                TRANSFER_FLAGS,
                self.config.excludes,
                ssh_command(self.config.remote),
                root,
                self.remote_destination(root),
                timeout=settings.timeout,
            )
        except TransferTimeout as e:
            result.success = False
            result.timed_out = True
            result.error = str(e)
            return
        except TransferError as e:
            result.success = False
            result.error = str(e)
            return

        result.output = output.lines
        result.returncode = output.returncode
        result.success = output.returncode == 0
        result.error = None if result.success else f"exit status {output.returncode}"

        header = f"rsync {root} -> {self.remote_destination(root)} (exit status {output.returncode})"
        self.logger.log_lines(LogLevel.INFO, [header, *output.lines])
