# VMSYNC Test Fixtures
# Pytest fixtures for vmsync tests

import tempfile
from collections.abc import Callable, Generator, Iterator, Sequence
from io import StringIO
from pathlib import Path

import pytest
from rich.console import Console as RichConsole

from vmsync.config.schema import RemoteTarget, SyncConfig, TransferSettings, VmsyncSettings
from vmsync.logger import Logger, LogLevel
from vmsync.sync.transfer import TransferEngine, Transport, TransportOutput
from vmsync.sync.watcher import ChangeSource
from vmsync.utils.paths import normalize_path


class FakeTransport(Transport):
    """In-memory transport that records calls and replays queued outputs."""

    def __init__(self):
        self.calls: list[dict] = []
        self.outputs: list = []

    def run(self, flags, excludes, ssh_params, local_root, remote_destination, timeout=None):
        self.calls.append(
            {
                "flags": list(flags),
                "excludes": list(excludes),
                "ssh_params": ssh_params,
                "local_root": local_root,
                "remote_destination": remote_destination,
                "timeout": timeout,
            }
        )
        if self.outputs:
            output = self.outputs.pop(0)
            if isinstance(output, Exception):
                raise output
            return output
        return TransportOutput(lines=[], returncode=0)

    @property
    def roots(self) -> list[str]:
        return [call["local_root"] for call in self.calls]


class FakeChangeSource(ChangeSource):
    """In-memory change source delivering a fixed list of paths."""

    def __init__(self, events: Sequence[str] = ()):
        self.events = list(events)
        self.subscriptions: list[tuple[list[str], list[str]]] = []
        self.closed = False

    def subscribe(self, excludes: Sequence[str], roots: Sequence[str]) -> Iterator[str]:
        self.subscriptions.append((list(excludes), list(roots)))
        return iter(self.events)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def logger() -> Logger:
    """Logger at DEBUG level writing to an in-memory console."""
    console = RichConsole(file=StringIO(), no_color=True, width=200)
    return Logger(level=LogLevel.DEBUG, console=console)


@pytest.fixture
def read_log(logger: Logger) -> Callable[[], str]:
    """Return a function that reads everything the logger fixture has written."""

    def _read() -> str:
        logger.console.file.seek(0)
        return logger.console.file.read()

    return _read


@pytest.fixture
def sync_roots(temp_dir: Path) -> tuple[str, str]:
    """Two existing, normalized sync roots."""
    app = temp_dir / "project" / "app"
    lib = temp_dir / "shared" / "lib"
    app.mkdir(parents=True)
    lib.mkdir(parents=True)
    return normalize_path(app), normalize_path(lib)


@pytest.fixture
def remote_target() -> RemoteTarget:
    return RemoteTarget(user="docker", host="dockerhost", ssh_key="/keys/id_rsa")


@pytest.fixture
def sync_config(sync_roots: tuple[str, str], remote_target: RemoteTarget) -> SyncConfig:
    """Config with two roots and fast retries."""
    settings = VmsyncSettings(transfer=TransferSettings(timeout=30, max_retries=2, retry_delay=0.5))
    return SyncConfig(
        paths=sync_roots,
        excludes=(".git", "node_modules"),
        remote=remote_target,
        settings=settings,
    )


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def sleeps() -> list[float]:
    """Backoff delays recorded instead of slept."""
    return []


@pytest.fixture
def engine(sync_config: SyncConfig, logger: Logger, fake_transport: FakeTransport, sleeps: list[float]) -> TransferEngine:
    return TransferEngine(sync_config, logger, transport=fake_transport, sleep=sleeps.append)


@pytest.fixture
def make_source() -> Callable[..., FakeChangeSource]:
    """Factory for in-memory change sources."""
    return FakeChangeSource
