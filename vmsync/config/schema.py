# VMSYNC Configuration Schema
# Pydantic models for the settings file and the immutable runtime config

from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from vmsync.config.defaults import (
    DEFAULT_MACHINE_NAME,
    DEFAULT_MAX_RETRIES,
    DEFAULT_REMOTE_HOST,
    DEFAULT_REMOTE_USER,
    DEFAULT_RETRY_DELAY,
    DEFAULT_TRANSFER_TIMEOUT,
    DEFAULT_VM_TOOL,
)


class RemoteSettings(BaseModel):
    """Remote VM connection settings."""

    model_config = ConfigDict(extra="forbid")

    user: str = Field(default=DEFAULT_REMOTE_USER, description="Remote login user")
    host: str = Field(default=DEFAULT_REMOTE_HOST, description="Remote VM hostname or IP")
    ssh_key: str | None = Field(default=None, description="SSH private key; looked up from the VM tool if unset")
    machine: str = Field(default=DEFAULT_MACHINE_NAME, description="VM name passed to the VM tool")
    vm_tool: str = Field(default=DEFAULT_VM_TOOL, description="VM lifecycle tool executable")
    service_account: str = Field(
        default=DEFAULT_REMOTE_USER, description="Remote account that owns the synced directories"
    )

    @field_validator("ssh_key")
    @classmethod
    def expand_key_path(cls, v: str | None) -> str | None:
        """Expand ~ in key path."""
        if v is None:
            return None
        return str(Path(v).expanduser())


class TransferSettings(BaseModel):
    """Bulk transfer tuning."""

    model_config = ConfigDict(extra="forbid")

    timeout: float = Field(default=DEFAULT_TRANSFER_TIMEOUT, gt=0, description="Seconds per transfer attempt")
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=0, description="Retries after a failed attempt")
    retry_delay: float = Field(default=DEFAULT_RETRY_DELAY, ge=0, description="Initial backoff delay in seconds")
    workers: int = Field(default=1, ge=1, description="Concurrent transfers in the watch loop")


class OutputSettings(BaseModel):
    """Output settings."""

    model_config = ConfigDict(extra="forbid")

    colored: bool = Field(default=True, description="Enable colored output")


class VmsyncSettings(BaseModel):
    """Root model of the settings file."""

    model_config = ConfigDict(extra="forbid")

    remote: RemoteSettings = Field(default_factory=RemoteSettings)
    transfer: TransferSettings = Field(default_factory=TransferSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)


@dataclass(frozen=True)
class RemoteTarget:
    """VM-side user, host and SSH key used for transfers and remote commands."""

    user: str
    host: str
    ssh_key: str | None = None

    @property
    def destination(self) -> str:
        """user@host prefix for ssh and rsync."""
        return f"{self.user}@{self.host}"


@dataclass(frozen=True)
class SyncConfig:
    """
    Resolved configuration shared by all components.

    Built once at startup and never mutated afterwards.
    """

    paths: tuple[str, ...]
    excludes: tuple[str, ...]
    remote: RemoteTarget
    settings: VmsyncSettings = field(default_factory=VmsyncSettings)
