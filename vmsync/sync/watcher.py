# VMSYNC Watch Loop
# Turn filesystem change events into transfers of the owning sync root

import os
import subprocess
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor

from vmsync.config.schema import SyncConfig
from vmsync.logger import Logger
from vmsync.sync.mapper import find_owning_root
from vmsync.sync.transfer import TransferEngine, TransferResult


class ChangeSourceError(Exception):
    """Exception raised when the change notification source cannot start."""


class ChangeSource(ABC):
    """Filesystem change notification capability."""

    @abstractmethod
    def subscribe(self, excludes: Sequence[str], roots: Sequence[str]) -> Iterator[str]:
        """
        Start watching roots.

        Returns:
            Iterator of changed absolute paths, in delivery order. It ends
            when the source exits or close() is called.

        Raises:
            ChangeSourceError: If watching cannot start.
        """

    def close(self) -> None:
        """Stop delivering events."""


class FswatchSource(ChangeSource):
    """Change source backed by the fswatch executable."""

    def __init__(self, executable: str = "fswatch", chunk_size: int = 4096):
        self.executable = executable
        self.chunk_size = chunk_size
        self._process: subprocess.Popen | None = None
        self._lock = threading.RLock()

    def build_command(self, excludes: Sequence[str], roots: Sequence[str]) -> list[str]:
        """Build the fswatch argument list; -0 separates paths with NUL bytes."""
        cmd = [self.executable, "-0"]
        for pattern in excludes:
            cmd.extend(["-e", pattern])
        cmd.extend(roots)
        return cmd

    def subscribe(self, excludes: Sequence[str], roots: Sequence[str]) -> Iterator[str]:
        cmd = self.build_command(excludes, roots)
        try:
            process = subprocess.Popen(cmd, stdout=subprocess.PIPE)
        except FileNotFoundError:
            raise ChangeSourceError(f"{self.executable} command not found. Is it installed?")

        with self._lock:
            self._process = process
        return self._read_events(process)

    def _read_events(self, process: subprocess.Popen) -> Iterator[str]:
        buffer = b""
        try:
            while True:
                chunk = process.stdout.read1(self.chunk_size)
                if not chunk:
                    break
                buffer += chunk
                *paths, buffer = buffer.split(b"\0")
                for path in paths:
                    if path:
                        yield os.fsdecode(path)
        finally:
            self.close()
            process.stdout.close()

    def close(self) -> None:
        with self._lock:
            process, self._process = self._process, None

        if process is None:
            return
        if process.poll() is None:
            process.terminate()
            try:
                process.wait(timeout=5)
            except subprocess.TimeoutExpired:
                process.kill()
                process.wait()


class WatchLoop:
    """
    Watches all sync roots and re-transfers the owning root of every change.

    Events are handled in delivery order with no coalescing: a burst of N
    changes causes N transfers.
    """

    def __init__(
        self,
        config: SyncConfig,
        logger: Logger,
        engine: TransferEngine,
        source: ChangeSource | None = None,
    ):
        """
        Initialize watch loop.

        Args:
            config: Resolved sync configuration.
            logger: Log sink.
            engine: Transfer engine used for every event.
            source: Change notification source (fswatch if not provided).
        """
        self.config = config
        self.logger = logger
        self.engine = engine
        self.source = source or FswatchSource()
        self._stopped = threading.Event()

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()

    def handle_event(self, path: str) -> TransferResult | None:
        """Transfer the root that owns a changed path."""
        self.logger.info(f"Detected change in {path}")
        root = find_owning_root(path, self.config.paths)
        return self.engine.transfer(root, trigger=path)

    def watch(self) -> int:
        """
        Run until the change source ends or stop() is called.

        Returns:
            Number of events handled.

        Raises:
            ChangeSourceError: If the change source cannot start.
        """
        events = self.source.subscribe(self.config.excludes, self.config.paths)
        self.logger.info(f"Watching for changes in {' '.join(self.config.paths)}")

        workers = self.config.settings.transfer.workers
        executor = ThreadPoolExecutor(max_workers=workers) if workers > 1 else None
        handled = 0

        try:
            for path in events:
                if self.stopped:
                    break
                handled += 1
                if executor is None:
                    try:
                        self.handle_event(path)
                    except Exception as e:
                        self._log_failure(path, e)
                else:
                    executor.submit(self._handle_queued, path)
        finally:
            self.source.close()
            if executor is not None:
                executor.shutdown(wait=True, cancel_futures=self.stopped)

        return handled

    def stop(self) -> None:
        """Stop watching; safe to call from a signal handler or another thread."""
        self._stopped.set()
        self.source.close()

    def _handle_queued(self, path: str) -> TransferResult | None:
        # Queued events are dropped once stop() was called.
        if self.stopped:
            return None
        try:
            return self.handle_event(path)
        except Exception as e:
            self._log_failure(path, e)
            return None

    def _log_failure(self, path: str, error: Exception) -> None:
        self.logger.error(f"Unexpected error while handling change in {path}: {error}")
