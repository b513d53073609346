"""Upload a contact's send list and point its naming address at it."""

from common.logging_config import get_logger
from common.types import Contact, SendAddress
from horizon.events import AddingFileListDidStart, PropertiesDidChange, PublishingFileListDidStart
from horizon.exceptions import FileFailureReason, FileOperationError, HorizonError
from horizon.file_utils import encode_as_json_in_temporary_file, remove_temporary_file
from horizon.tasks.base import ModelTask

logger = get_logger(__name__)


class PublishFileListTask(ModelTask):
    error_type = FileOperationError

    async def publish_file_list(self, contact: Contact) -> Contact:
        """
        Publish the contact's current send list.

        The new list hash is stored before the naming publish, but the
        contact is only returned once the publish has completed.

        Args:
            contact: Contact whose send list is published

        Returns:
            The stored contact with the new send list hash

        Raises:
            FileOperationError: If the contact has no send address or a step fails
        """
        try:
            return await self._publish_file_list(contact)
        except HorizonError as e:
            self.report(e)
            raise
        except Exception as e:
            raise self.report(e) from e

    async def _publish_file_list(self, contact: Contact) -> Contact:
        send_address = require_send_address(contact)

        send_list_hash = await self.upload_file_list(contact)

        updated_contact = contact.updating_send_list(contact.send_list.updating_hash(send_list_hash))
        self.model.store.upsert_contact(updated_contact)
        self.model.emit(PropertiesDidChange(updated_contact))

        await self.publish(updated_contact, send_address, send_list_hash)
        return updated_contact

    async def upload_file_list(self, contact: Contact) -> str:
        """
        Encode the contact's send list and add it to storage.

        Returns:
            Content address of the encoded list
        """
        file_list_path = encode_as_json_in_temporary_file(contact.send_list.files)
        if file_list_path is None:
            raise FileOperationError(FileFailureReason.FAILED_TO_ENCODE_FILE_LIST_TO_TEMPORARY_FILE)

        self.model.emit(AddingFileListDidStart(contact))
        try:
            add_response = await self.model.api.add_blob(file_list_path)
        finally:
            remove_temporary_file(file_list_path)

        return add_response.hash

    async def publish(self, contact: Contact, send_address: SendAddress, send_list_hash: str) -> None:
        self.model.emit(PublishingFileListDidStart(contact))
        await self.model.api.publish_pointer(send_list_hash, send_address.keypair_name)
        logger.info(
            f"Published send list {send_list_hash} for {contact.display_name} "
            f"under {send_address.keypair_name}"
        )


def require_send_address(contact: Contact) -> SendAddress:
    if contact.send_address is None:
        raise FileOperationError(FileFailureReason.SEND_ADDRESS_NOT_SET, detail=contact.display_name)
    return contact.send_address
