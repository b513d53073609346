"""Per-identity configuration for the horizon engine."""

import hashlib
import json
import os
from pathlib import Path
from typing import Optional

from common.constants import (
    API_BASE_PORT,
    DEFAULT_HORIZON_HOME,
    DEFAULT_IDENTITY,
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_BACKOFF_MULTIPLIER,
    DEFAULT_TIMEOUT_SECONDS,
    KEYPAIR_PREFIX_TEMPLATE,
    MAX_PORT,
    MIN_SAFE_PORT,
)
from common.logging_config import get_logger

logger = get_logger(__name__)


def random_safe_port(identity: str, base_port: int) -> int:
    """
    Derive a stable, unprivileged port for an identity.

    Args:
        identity: Identity name
        base_port: Conventional port of the service (e.g. 5001 for the API)

    Returns:
        Port in the range [1024, 65534)
    """
    digest = hashlib.sha256(f"{base_port}:{identity}".encode("utf-8")).digest()
    value = int.from_bytes(digest[:4], "big")
    return value % (MAX_PORT - MIN_SAFE_PORT - 1) + MIN_SAFE_PORT


class Configuration:
    """
    Settings for one horizon identity.

    Each identity gets its own directory, contact database, keypair
    namespace and storage daemon port so that several identities can run
    side by side.
    """

    DEFAULTS = {
        "timeout": DEFAULT_TIMEOUT_SECONDS,
        "max_retries": DEFAULT_MAX_RETRIES,
        "retry_backoff_multiplier": DEFAULT_RETRY_BACKOFF_MULTIPLIER,
        "log_level": None,
        "api_url": None,
    }

    def __init__(self, identity: str = DEFAULT_IDENTITY, home: Optional[Path] = None):
        """
        Initialize configuration.

        Args:
            identity: Identity name
            home: Root directory for all identities (defaults to HORIZON_HOME or ~/.horizon)
        """
        self.identity = identity
        if home is None:
            home = Path(os.environ.get("HORIZON_HOME", DEFAULT_HORIZON_HOME))
        self.home = Path(home).expanduser()
        self.data = self._load()

    @property
    def path(self) -> Path:
        return self.home / self.identity

    @property
    def config_path(self) -> Path:
        return self.path / "config.json"

    @property
    def database_path(self) -> Path:
        override = os.environ.get("HORIZON_DATABASE_PATH")
        if override:
            return Path(override)
        return self.path / "contacts.db"

    @property
    def api_port(self) -> int:
        return random_safe_port(self.identity, API_BASE_PORT)

    @property
    def api_url(self) -> str:
        return (
            os.environ.get("HORIZON_API_URL")
            or self.data.get("api_url")
            or f"http://127.0.0.1:{self.api_port}/api/v0"
        )

    @property
    def keypair_prefix(self) -> str:
        return KEYPAIR_PREFIX_TEMPLATE.format(identity=self.identity)

    def keypair_name(self, display_name: str) -> str:
        """
        Name of the local keypair backing a contact's send address.

        Args:
            display_name: Contact display name

        Returns:
            Keypair name (e.g. "horizon.default.contact.alice")
        """
        return f"{self.keypair_prefix}.{display_name}"

    @property
    def timeout(self) -> int:
        return self.data.get("timeout", DEFAULT_TIMEOUT_SECONDS)

    @property
    def log_level(self) -> Optional[str]:
        return self.data.get("log_level")

    def get_retry_config(self) -> dict:
        """
        Get retry configuration.

        Returns:
            Dictionary with 'max_retries' and 'retry_backoff_multiplier'
        """
        return {
            "max_retries": self.data.get("max_retries", DEFAULT_MAX_RETRIES),
            "retry_backoff_multiplier": self.data.get(
                "retry_backoff_multiplier", DEFAULT_RETRY_BACKOFF_MULTIPLIER
            ),
        }

    def _load(self) -> dict:
        """
        Merge overrides from config.json into the defaults.

        Returns:
            Configuration dictionary
        """
        config = self.DEFAULTS.copy()
        if not self.config_path.exists():
            return config

        try:
            with open(self.config_path, "r") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Ignoring unreadable config file {self.config_path}: {e}")
            return config

        if not isinstance(data, dict):
            logger.warning(f"Ignoring config file {self.config_path}: expected a JSON object")
            return config

        config.update(data)
        return config

    def save(self) -> None:
        """Write current settings to config.json."""
        self.path.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "w") as f:
            json.dump(self.data, f, indent=2)
