"""The model: authoritative local record of contacts and entry point for all operations."""

from pathlib import Path
from typing import Iterable, List, Optional

from common.logging_config import get_logger
from common.types import Contact, File
from horizon.config import Configuration
from horizon.events import Event, EventCallback, PropertiesDidChange
from horizon.repositories.contact_repository import PersistentStore
from horizon.storage_api import StorageAPI
from horizon.sync_state import SyncState
from horizon.file_utils import finder_style_safe_path
from horizon.tasks import (
    AddContactTask,
    GetDataTask,
    PublishFileListTask,
    RemoveContactTask,
    RenameContactTask,
    ShareFilesTask,
    SyncTask,
    UnshareFilesTask,
)

logger = get_logger(__name__)


class Model:
    """
    Contact and file-list synchronization engine.

    The model owns no state of its own: contacts are read from the
    persistent store on every access and every change is written back as a
    whole contact. Operations on the same contact are not serialized.
    """

    def __init__(
        self,
        api: StorageAPI,
        persistent_store: PersistentStore,
        config: Configuration,
        event_callback: EventCallback = None,
    ):
        """
        Initialize the model.

        Args:
            api: Storage service client
            persistent_store: Store holding the contact list
            config: Configuration of the current identity
            event_callback: Optional observer called with every event
        """
        self.api = api
        self.store = persistent_store
        self.config = config
        self.event_callback = event_callback

    def emit(self, event: Event) -> None:
        if self.event_callback is not None:
            self.event_callback(event)

    # Lookups

    @property
    def contacts(self) -> List[Contact]:
        return self.store.list_contacts()

    def contact(self, named: str) -> Optional[Contact]:
        return next((c for c in self.contacts if c.display_name == named), None)

    def file_named(self, name: str, contact: Contact) -> Optional[File]:
        """
        Find a file sent to or received from a contact.

        Args:
            name: File name
            contact: Contact whose send and receive lists are searched

        Returns:
            Matching file or None
        """
        return next((f for f in contact.all_files() if f.name == name), None)

    def file_matching(self, hash: str) -> Optional[File]:
        """
        Find a file by content address across all contacts.

        Args:
            hash: Content address of the file

        Returns:
            Matching file or None
        """
        for contact in self.contacts:
            for file in contact.all_files():
                if file.hash == hash:
                    return file
        return None

    def update_receive_address(self, contact: Contact, receive_address: Optional[str]) -> Contact:
        """
        Set the address through which a contact's shared list is resolved.

        Args:
            contact: Contact to update
            receive_address: Naming address provided by the contact

        Returns:
            The stored contact
        """
        updated_contact = contact.updating_receive_address(receive_address)
        self.store.upsert_contact(updated_contact)
        self.emit(PropertiesDidChange(updated_contact))
        logger.info(f"Set receive address of {contact.display_name} to {receive_address}")
        return updated_contact

    # Operations

    async def add_contact(self, name: str) -> Contact:
        return await AddContactTask(self).add_contact(name)

    async def remove_contact(self, name: str) -> None:
        await RemoveContactTask(self).remove_contact(name)

    async def rename_contact(self, name: str, new_name: str) -> Contact:
        return await RenameContactTask(self).rename_contact(name, new_name)

    async def share_files(self, paths: Iterable[Path], contact: Contact) -> Contact:
        return await ShareFilesTask(self).share_files(paths, contact)

    async def unshare_files(self, files: Iterable[File], contact: Contact) -> Contact:
        return await UnshareFilesTask(self).unshare_files(files, contact)

    async def publish_file_list(self, contact: Contact) -> Contact:
        return await PublishFileListTask(self).publish_file_list(contact)

    async def sync(self) -> List[SyncState]:
        return await SyncTask(self).sync()

    async def data(self, file: File) -> bytes:
        return await GetDataTask(self).data(file)

    async def copy_file(self, file: File, destination: Path) -> Path:
        """
        Fetch a file and write it to a local path without overwriting anything.

        Args:
            file: File to fetch
            destination: Target file or directory

        Returns:
            Path the file was written to
        """
        data = await self.data(file)
        target = finder_style_safe_path(file, destination)
        target.write_bytes(data)
        logger.info(f"Copied {file.name} to {target}")
        return target
