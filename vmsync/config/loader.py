# VMSYNC Configuration Loader
# Load the YAML settings file

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from vmsync.config.defaults import SETTINGS_ENV_VAR
from vmsync.config.schema import VmsyncSettings


def get_config_dir() -> Path:
    """Get the vmsync configuration directory."""
    return Path.home() / ".config" / "vmsync"


def get_settings_path() -> Path:
    """Get the path to the settings file."""
    # Allow override via environment variable
    env_path = os.environ.get(SETTINGS_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return get_config_dir() / "config.yaml"


def load_settings(settings_path: Optional[Path] = None) -> VmsyncSettings:
    """
    Load settings from YAML file.

    A missing file is not an error: the defaults are returned.

    Args:
        settings_path: Optional path to settings file. Uses default if not provided.

    Returns:
        VmsyncSettings: Validated settings object.

    Raises:
        ValueError: If the file is not valid YAML or fails validation.
    """
    if settings_path is None:
        settings_path = get_settings_path()

    if not settings_path.exists():
        return VmsyncSettings()

    try:
        with open(settings_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in {settings_path}: {e}") from e

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise ValueError(f"Settings file {settings_path} must contain a mapping")

    try:
        return VmsyncSettings.model_validate(data)
    except ValidationError as e:
        errors = []
        for error in e.errors():
            loc = " -> ".join(str(l) for l in error["loc"])
            errors.append(f"{loc}: {error['msg']}")
        raise ValueError(f"Invalid settings in {settings_path}: " + "; ".join(errors)) from e
