# VMSYNC Default Configuration
# Built-in fallbacks for sync inputs and settings

DEFAULT_COMPOSE_FILE = "docker-compose.yml"
DEFAULT_IGNORE_FILE = ".dockerignore"

# Used when neither the command line nor the ignore file names any exclude
DEFAULT_EXCLUDES: tuple[str, ...] = (".git",)

DEFAULT_LOG_LEVEL = "INFO"

DEFAULT_REMOTE_USER = "docker"
DEFAULT_REMOTE_HOST = "dockerhost"
DEFAULT_MACHINE_NAME = "default"
DEFAULT_VM_TOOL = "docker-machine"

DEFAULT_TRANSFER_TIMEOUT = 300.0
DEFAULT_MAX_RETRIES = 2
DEFAULT_RETRY_DELAY = 1.0

SETTINGS_ENV_VAR = "VMSYNC_CONFIG"
LOG_LEVEL_ENV_VAR = "VMSYNC_LOG_LEVEL"
