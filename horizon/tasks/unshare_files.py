"""Stop sharing files with a contact."""

from typing import Iterable

from common.logging_config import get_logger
from common.types import Contact, File, FileList
from horizon.events import PropertiesDidChange
from horizon.exceptions import FileFailureReason, FileOperationError, HorizonError
from horizon.tasks.base import ModelTask
from horizon.tasks.publish_file_list import PublishFileListTask, require_send_address

logger = get_logger(__name__)


class UnshareFilesTask(ModelTask):
    error_type = FileOperationError

    async def unshare_files(self, files: Iterable[File], contact: Contact) -> Contact:
        """
        Remove files from the contact's send list and republish it.

        The store is only updated after the naming publish succeeded, so a
        file never disappears locally while it is still advertised remotely.

        Args:
            files: Files to stop sharing
            contact: Contact they are shared with

        Returns:
            The stored contact with the republished send list

        Raises:
            FileOperationError: If none of the files is shared or a step fails
        """
        try:
            return await self._unshare_files(files, contact)
        except HorizonError as e:
            self.report(e)
            raise
        except Exception as e:
            raise self.report(e) from e

    async def _unshare_files(self, files: Iterable[File], contact: Contact) -> Contact:
        send_address = require_send_address(contact)
        files = frozenset(files)

        if not contact.send_list.files & files:
            raise FileOperationError(FileFailureReason.FILE_NOT_SHARED)

        filtered_list = FileList(hash=None, files=contact.send_list.files - files)
        updated_contact = contact.updating_send_list(filtered_list)

        publisher = PublishFileListTask(self.model)
        send_list_hash = await publisher.upload_file_list(updated_contact)
        updated_contact = updated_contact.updating_send_list(filtered_list.updating_hash(send_list_hash))

        await publisher.publish(updated_contact, send_address, send_list_hash)

        self.model.store.upsert_contact(updated_contact)
        self.model.emit(PropertiesDidChange(updated_contact))
        logger.info(f"Unshared {len(contact.send_list.files & files)} file(s) with {contact.display_name}")

        return updated_contact
