"""Remove a contact and its publishing keypair."""

from common.logging_config import get_logger
from horizon.events import ListKeysDidStart, PropertiesDidChange, RemoveKeyDidStart
from horizon.exceptions import ContactFailureReason, ContactOperationError, HorizonError
from horizon.tasks.base import ModelTask

logger = get_logger(__name__)


class RemoveContactTask(ModelTask):
    error_type = ContactOperationError

    async def remove_contact(self, name: str) -> None:
        """
        Remove whichever of the local contact and the remote keypair exist.

        The two can diverge after a partially failed add, so removal
        succeeds if either one is present.

        Args:
            name: Display name of the contact

        Raises:
            ContactOperationError: CONTACT_DOES_NOT_EXIST if neither exists
        """
        try:
            await self._remove_contact(name)
        except HorizonError as e:
            self.report(e)
            raise
        except Exception as e:
            raise self.report(e) from e

    async def _remove_contact(self, name: str) -> None:
        contact = self.model.contact(named=name)
        keypair_name = self.model.config.keypair_name(name)

        self.model.emit(ListKeysDidStart())
        list_keys_response = await self.model.api.list_keypairs()

        if keypair_name in list_keys_response.names():
            self.model.emit(RemoveKeyDidStart(keypair_name))
            await self.model.api.remove_keypair(keypair_name)
            logger.info(f"Removed keypair {keypair_name}")
        elif contact is None:
            raise ContactOperationError(ContactFailureReason.CONTACT_DOES_NOT_EXIST, detail=name)
        else:
            logger.warning(f"Contact {name} has no keypair {keypair_name}, removing local record only")

        if contact is not None:
            self.model.store.remove_contact(contact)
            self.model.emit(PropertiesDidChange(contact))
            logger.info(f"Removed contact {name} [identifier={contact.identifier}]")
