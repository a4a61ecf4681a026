# VMSYNC Initial Sync
# Prepare remote directories and push every root once before watching

import shlex
from collections.abc import Callable, Sequence

from vmsync.config.schema import RemoteTarget, SyncConfig
from vmsync.logger import Logger
from vmsync.remote.operations import run_remote_command
from vmsync.sync.transfer import TransferEngine, TransferResult
from vmsync.utils.paths import unique_parents

RemoteExecutor = Callable[[RemoteTarget, str], object]


def build_prepare_command(parents: Sequence[str], owner: str) -> str:
    """
    Build the remote command that creates and chowns the target parents.

    Args:
        parents: Remote parent directories.
        owner: Account that must own them.

    Returns:
        Shell command line.
    """
    quoted = " ".join(shlex.quote(p) for p in parents)
    return f"sudo mkdir -p {quoted} && sudo chown -R {shlex.quote(owner)} {quoted}"


class InitialSync:
    """Performs the one-time placement of all sync roots on the VM."""

    def __init__(
        self,
        config: SyncConfig,
        logger: Logger,
        engine: TransferEngine,
        executor: RemoteExecutor | None = None,
    ):
        self.config = config
        self.logger = logger
        self.engine = engine
        self.executor = executor or run_remote_command

    def prepare_remote(self, roots: Sequence[str]) -> None:
        """
        Create the parent directories of all roots on the VM.

        Raises:
            RemoteError: If the remote command fails.
        """
        parents = unique_parents(list(roots))
        owner = self.config.settings.remote.service_account
        self.logger.debug(f"Preparing remote directories: {' '.join(parents)}")
        self.executor(self.config.remote, build_prepare_command(parents, owner))

    def run(self, roots: Sequence[str] | None = None) -> list[TransferResult | None]:
        """
        Prepare the VM and transfer every root.

        Args:
            roots: Roots to place; defaults to all configured roots.

        Returns:
            One result per root.

        Raises:
            RemoteError: If remote preparation fails. No transfer is attempted.
        """
        roots = list(self.config.paths if roots is None else roots)
        if not roots:
            return []

        self.prepare_remote(roots)

        self.logger.info("Starting initial sync")
        results = self.engine.transfer_many(roots)
        self.logger.info("Initial sync complete")
        return results
