"""Click-based CLI for vmsync - mirror host directories into a docker VM."""

from __future__ import annotations

import signal
import sys
from pathlib import Path
from typing import Optional

import click

from vmsync import __version__
from vmsync.config import (
    DEFAULT_COMPOSE_FILE,
    DEFAULT_IGNORE_FILE,
    DEFAULT_LOG_LEVEL,
    SyncConfig,
    get_settings_path,
    load_settings,
    resolve_excludes,
    resolve_paths,
)
from vmsync.config.defaults import LOG_LEVEL_ENV_VAR
from vmsync.logger import LEVEL_NAMES, Logger, LogLevel, parse_log_level
from vmsync.remote import RemoteError, resolve_remote_target
from vmsync.sync import ChangeSourceError, InitialSync, TransferEngine, WatchLoop


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


class ConfigurationError(click.UsageError):
    """Invalid startup configuration; printed with usage, exit status 1."""

    exit_code = 1


class SyncCommand(click.Command):
    """Command that reports every usage error with exit status 1."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = 1
            raise


def configure_log_level(ctx: click.Context, param: click.Parameter, value: str) -> LogLevel:
    """Validate the -l option."""
    try:
        return parse_log_level(value)
    except ValueError as e:
        raise click.BadParameter(str(e), ctx=ctx, param=param)


@click.command(cls=SyncCommand, context_settings=CONTEXT_SETTINGS)
@click.version_option(version=__version__, prog_name="vmsync")
@click.option(
    "-s",
    "--sync-path",
    "sync_paths",
    multiple=True,
    metavar="PATH",
    help="Directory to sync (repeatable). Default: volumes of the compose file, else the current directory",
)
@click.option(
    "-e",
    "--exclude",
    "excludes",
    multiple=True,
    metavar="PATTERN",
    help="Exclude pattern (repeatable). Default: entries of the ignore file, else .git",
)
@click.option(
    "-c",
    "--compose-file",
    default=DEFAULT_COMPOSE_FILE,
    show_default=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Compose file whose volumes are synced",
)
@click.option(
    "-i",
    "--ignore-file",
    default=DEFAULT_IGNORE_FILE,
    show_default=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Ignore file whose entries are excluded",
)
@click.option(
    "-l",
    "--log-level",
    default=DEFAULT_LOG_LEVEL,
    show_default=True,
    envvar=LOG_LEVEL_ENV_VAR,
    show_envvar=True,
    metavar="LEVEL",
    callback=configure_log_level,
    help=f"Log level: {', '.join(LEVEL_NAMES)}",
)
@click.option(
    "--settings",
    "settings_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Settings file (default: $VMSYNC_CONFIG or ~/.config/vmsync/config.yaml)",
)
def cli(
    sync_paths: tuple[str, ...],
    excludes: tuple[str, ...],
    compose_file: Path,
    ignore_file: Path,
    log_level: LogLevel,
    settings_path: Optional[Path],
) -> None:
    """vmsync - mirror host directories into a docker VM.

    Performs an initial rsync of every sync path to the VM, then watches
    the paths with fswatch and re-syncs the owning path on every change.

    \b
    Examples:
        vmsync                          # Sync compose volumes or the current directory
        vmsync -s ./src -s ./config     # Sync two directories
        vmsync -e node_modules -l DEBUG # Extra exclude, verbose output
    """
    try:
        settings = load_settings(settings_path)
    except ValueError as e:
        raise ConfigurationError(str(e), ctx=click.get_current_context())

    logger = Logger(level=log_level, colored=settings.output.colored)

    paths = resolve_paths(compose_file, sync_paths, logger)
    exclude_patterns = resolve_excludes(ignore_file, excludes, logger)

    try:
        remote = resolve_remote_target(settings)
    except RemoteError as e:
        _report_remote_error(logger, "Unable to determine the VM's SSH key", e)
        logger.instructions(
            f"Start the VM with '{settings.remote.vm_tool} start {settings.remote.machine}' "
            f"or set remote.ssh_key in {settings_path or get_settings_path()}"
        )
        sys.exit(1)

    config = SyncConfig(
        paths=tuple(paths),
        excludes=tuple(exclude_patterns),
        remote=remote,
        settings=settings,
    )
    engine = TransferEngine(config, logger)

    try:
        InitialSync(config, logger, engine).run()
    except RemoteError as e:
        _report_remote_error(logger, "Unable to prepare remote directories", e)
        logger.instructions(f"Check that {remote.destination} is reachable over ssh")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted during initial sync")
        return

    loop = WatchLoop(config, logger, engine)
    previous_handler = signal.signal(signal.SIGTERM, lambda signum, frame: loop.stop())
    try:
        loop.watch()
    except ChangeSourceError as e:
        logger.error(str(e))
        logger.instructions("Install fswatch, e.g. 'brew install fswatch'")
        sys.exit(1)
    except KeyboardInterrupt:
        loop.stop()
    finally:
        signal.signal(signal.SIGTERM, previous_handler)

    logger.info("Stopped watching")


def _report_remote_error(logger: Logger, summary: str, error: RemoteError) -> None:
    logger.error(f"{summary}: {error.message}")
    if error.output:
        logger.log_lines(LogLevel.ERROR, error.output.splitlines())
