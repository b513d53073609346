"""Contract of the content-addressed storage and naming service."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

from horizon.schemas import (
    AddResponse,
    KeygenResponse,
    ListKeysResponse,
    PublishResponse,
    RemoveKeyResponse,
    RenameKeyResponse,
    ResolveResponse,
)


class StorageAPI(ABC):
    """
    Asynchronous client for blob storage and mutable naming.

    Implementations raise on transport failures; the engine classifies
    anything it does not recognise as an ``UNKNOWN`` error of the
    operation family that made the call.
    """

    @abstractmethod
    async def add_blob(self, content: Union[bytes, Path], name: Optional[str] = None) -> AddResponse:
        """Add bytes or the contents of a file, returning its content address."""

    @abstractmethod
    async def fetch_blob(self, address: str) -> bytes:
        """Return the bytes stored at a content address."""

    @abstractmethod
    async def generate_keypair(self, name: str, algorithm: str, size: int) -> KeygenResponse:
        """Create a named signing keypair."""

    @abstractmethod
    async def list_keypairs(self) -> ListKeysResponse:
        """List all local keypairs."""

    @abstractmethod
    async def remove_keypair(self, name: str) -> RemoveKeyResponse:
        """Remove a named keypair."""

    @abstractmethod
    async def rename_keypair(self, name: str, new_name: str) -> RenameKeyResponse:
        """Rename a keypair, keeping its key material."""

    @abstractmethod
    async def publish_pointer(self, address: str, keypair_name: Optional[str] = None) -> PublishResponse:
        """Point the name of a keypair at a content address."""

    @abstractmethod
    async def resolve_pointer(self, name: str, recursive: Optional[bool] = None) -> ResolveResponse:
        """Resolve a name to the content address it currently points at."""

    async def close(self) -> None:
        """Release network resources."""
