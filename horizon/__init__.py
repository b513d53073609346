"""Contact and file-list synchronization engine."""

from horizon.config import Configuration
from horizon.factory import create_model
from horizon.model import Model
from horizon.sync_state import Failed, Synced

__all__ = [
    "Configuration",
    "Failed",
    "Model",
    "Synced",
    "create_model",
]
