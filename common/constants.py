"""Project-wide constants (key parameters, default ports, retry policy)."""

KEYPAIR_ALGORITHM: str = "rsa"
KEYPAIR_SIZE: int = 2048

DEFAULT_IDENTITY: str = "default"
DEFAULT_HORIZON_HOME: str = "~/.horizon"
KEYPAIR_PREFIX_TEMPLATE: str = "horizon.{identity}.contact"

API_BASE_PORT: int = 5001
MIN_SAFE_PORT: int = 1024
MAX_PORT: int = 65535

DEFAULT_TIMEOUT_SECONDS: int = 30
DEFAULT_MAX_RETRIES: int = 3
DEFAULT_RETRY_BACKOFF_MULTIPLIER: int = 2

FILE_LIST_SUFFIX: str = ".json"
