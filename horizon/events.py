"""Lifecycle events emitted by the engine for external observers."""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Literal, Optional

from common.types import Contact
from horizon.exceptions import HorizonError


@dataclass(frozen=True)
class SyncDidStart:
    """A sync over all contacts began."""

    event: Literal["sync-did-start"] = "sync-did-start"


@dataclass(frozen=True)
class SyncDidEnd:
    """A sync over all contacts finished."""

    event: Literal["sync-did-end"] = "sync-did-end"


@dataclass(frozen=True)
class PropertiesDidChange:
    """A contact was created, updated or removed in the store."""

    contact: Contact
    event: Literal["properties-did-change"] = "properties-did-change"


@dataclass(frozen=True)
class ResolvingReceiveListDidStart:
    contact: Contact
    event: Literal["resolving-receive-list-did-start"] = "resolving-receive-list-did-start"


@dataclass(frozen=True)
class DownloadingReceiveListDidStart:
    contact: Contact
    event: Literal["downloading-receive-list-did-start"] = "downloading-receive-list-did-start"


@dataclass(frozen=True)
class ProcessingReceiveListDidStart:
    contact: Contact
    event: Literal["processing-receive-list-did-start"] = "processing-receive-list-did-start"


@dataclass(frozen=True)
class AddingFileDidStart:
    path: Path
    event: Literal["adding-file-did-start"] = "adding-file-did-start"


@dataclass(frozen=True)
class AddingFileListDidStart:
    contact: Contact
    event: Literal["adding-file-list-did-start"] = "adding-file-list-did-start"


@dataclass(frozen=True)
class PublishingFileListDidStart:
    contact: Contact
    event: Literal["publishing-file-list-did-start"] = "publishing-file-list-did-start"


@dataclass(frozen=True)
class KeygenDidStart:
    keypair_name: str
    event: Literal["keygen-did-start"] = "keygen-did-start"


@dataclass(frozen=True)
class ListKeysDidStart:
    event: Literal["list-keys-did-start"] = "list-keys-did-start"


@dataclass(frozen=True)
class RemoveKeyDidStart:
    keypair_name: str
    event: Literal["remove-key-did-start"] = "remove-key-did-start"


@dataclass(frozen=True)
class RenameKeyDidStart:
    keypair_name: str
    new_keypair_name: str
    event: Literal["rename-key-did-start"] = "rename-key-did-start"


@dataclass(frozen=True)
class FetchingFileDidStart:
    hash: str
    event: Literal["fetching-file-did-start"] = "fetching-file-did-start"


@dataclass(frozen=True)
class ErrorOccurred:
    """A public operation failed with a classified error."""

    error: HorizonError
    event: Literal["error-occurred"] = "error-occurred"


Event = (
    SyncDidStart
    | SyncDidEnd
    | PropertiesDidChange
    | ResolvingReceiveListDidStart
    | DownloadingReceiveListDidStart
    | ProcessingReceiveListDidStart
    | AddingFileDidStart
    | AddingFileListDidStart
    | PublishingFileListDidStart
    | KeygenDidStart
    | ListKeysDidStart
    | RemoveKeyDidStart
    | RenameKeyDidStart
    | FetchingFileDidStart
    | ErrorOccurred
)

EventCallback = Optional[Callable[[Event], None]]
