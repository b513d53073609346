"""Create a contact together with its publishing keypair."""

from common.constants import KEYPAIR_ALGORITHM, KEYPAIR_SIZE
from common.logging_config import get_logger
from common.types import Contact, SendAddress
from horizon.events import KeygenDidStart, ListKeysDidStart, PropertiesDidChange
from horizon.exceptions import ContactFailureReason, ContactOperationError, HorizonError
from horizon.tasks.base import ModelTask
from horizon.tasks.publish_file_list import PublishFileListTask

logger = get_logger(__name__)


class AddContactTask(ModelTask):
    error_type = ContactOperationError

    async def add_contact(self, name: str) -> Contact:
        """
        Add a new contact and publish its empty send list.

        An orphaned keypair with the derived name counts as a conflict. Once
        the contact is stored, failing to publish its send list raises a
        FileOperationError and the contact is kept.

        Args:
            name: Display name of the new contact

        Returns:
            The stored contact with its published send list

        Raises:
            ContactOperationError: If the contact or its keypair already exists
            FileOperationError: If the initial send list cannot be published
        """
        try:
            contact = await self._create_contact(name)
        except HorizonError as e:
            self.report(e)
            raise
        except Exception as e:
            raise self.report(e) from e

        return await PublishFileListTask(self.model).publish_file_list(contact)

    async def _create_contact(self, name: str) -> Contact:
        keypair_name = self.model.config.keypair_name(name)

        if self.model.contact(named=name) is not None:
            raise ContactOperationError(ContactFailureReason.CONTACT_ALREADY_EXISTS, detail=name)

        self.model.emit(ListKeysDidStart())
        list_keys_response = await self.model.api.list_keypairs()
        if keypair_name in list_keys_response.names():
            raise ContactOperationError(ContactFailureReason.CONTACT_ALREADY_EXISTS, detail=name)

        self.model.emit(KeygenDidStart(keypair_name))
        keygen_response = await self.model.api.generate_keypair(
            keypair_name, KEYPAIR_ALGORITHM, KEYPAIR_SIZE
        )

        send_address = SendAddress(address=keygen_response.id, keypair_name=keygen_response.name)
        contact = Contact(display_name=name, send_address=send_address)

        self.model.store.upsert_contact(contact)
        self.model.emit(PropertiesDidChange(contact))
        logger.info(f"Added contact {name} [identifier={contact.identifier}]")

        return contact
