"""Per-contact outcome of a sync."""

from dataclasses import dataclass
from typing import Literal

from common.types import Contact
from horizon.exceptions import SyncOperationError


@dataclass(frozen=True)
class Synced:
    """
    The receive list was fetched and stored. Both the new contact and the
    value before the sync are kept so that callers can diff them.
    """

    contact: Contact
    old_value: Contact
    state: Literal["synced"] = "synced"


@dataclass(frozen=True)
class Failed:
    """
    The contact could not be synced and was left unchanged in the store.
    """

    contact: Contact
    error: SyncOperationError
    state: Literal["failed"] = "failed"


SyncState = Synced | Failed
