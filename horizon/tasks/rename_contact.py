"""Rename a contact and its publishing keypair."""

from common.logging_config import get_logger
from common.types import Contact, SendAddress
from horizon.events import ListKeysDidStart, PropertiesDidChange, RenameKeyDidStart
from horizon.exceptions import ContactFailureReason, ContactOperationError, HorizonError
from horizon.tasks.base import ModelTask

logger = get_logger(__name__)


class RenameContactTask(ModelTask):
    error_type = ContactOperationError

    async def rename_contact(self, name: str, new_name: str) -> Contact:
        """
        Rename a contact, keeping its identifier and file lists.

        Args:
            name: Current display name
            new_name: New display name

        Returns:
            The stored contact with new display name and send address

        Raises:
            ContactOperationError: If the contact is missing or the new name is taken
        """
        try:
            return await self._rename_contact(name, new_name)
        except HorizonError as e:
            self.report(e)
            raise
        except Exception as e:
            raise self.report(e) from e

    async def _rename_contact(self, name: str, new_name: str) -> Contact:
        keypair_name = self.model.config.keypair_name(name)
        new_keypair_name = self.model.config.keypair_name(new_name)

        contact = self.model.contact(named=name)
        if contact is None:
            raise ContactOperationError(ContactFailureReason.CONTACT_DOES_NOT_EXIST, detail=name)
        if self.model.contact(named=new_name) is not None:
            raise ContactOperationError(ContactFailureReason.CONTACT_ALREADY_EXISTS, detail=new_name)

        self.model.emit(ListKeysDidStart())
        current_names = (await self.model.api.list_keypairs()).names()
        if keypair_name not in current_names:
            raise ContactOperationError(ContactFailureReason.CONTACT_DOES_NOT_EXIST, detail=name)
        if new_keypair_name in current_names:
            raise ContactOperationError(ContactFailureReason.CONTACT_ALREADY_EXISTS, detail=new_name)

        self.model.emit(RenameKeyDidStart(keypair_name, new_keypair_name))
        rename_response = await self.model.api.rename_keypair(keypair_name, new_keypair_name)

        send_address = SendAddress(address=rename_response.id, keypair_name=rename_response.now)
        updated_contact = contact.updating_display_name(new_name).updating_send_address(send_address)

        self.model.store.upsert_contact(updated_contact)
        self.model.emit(PropertiesDidChange(updated_contact))
        logger.info(f"Renamed contact {name} to {new_name} [identifier={contact.identifier}]")

        return updated_contact
