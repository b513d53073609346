"""Resolve and fetch the receive list of every contact."""

import asyncio
from typing import List, Optional, Tuple

from pydantic import ValidationError

from common.logging_config import get_logger
from common.types import Contact, FileList
from horizon.events import (
    DownloadingReceiveListDidStart,
    ErrorOccurred,
    ProcessingReceiveListDidStart,
    PropertiesDidChange,
    ResolvingReceiveListDidStart,
    SyncDidEnd,
    SyncDidStart,
)
from horizon.exceptions import SyncFailureReason, SyncOperationError
from horizon.schemas import decode_file_list
from horizon.sync_state import Failed, Synced, SyncState
from horizon.tasks.base import ModelTask

logger = get_logger(__name__)

ReceiveListData = Optional[Tuple[str, bytes]]


class SyncTask(ModelTask):
    error_type = SyncOperationError

    async def sync(self) -> List[SyncState]:
        """
        Sync the receive lists of all contacts.

        Contacts are resolved and fetched concurrently and a failure for
        one contact never affects the others. Decoding and storing only
        start once every fetch has settled.

        Returns:
            One Synced or Failed entry per contact
        """
        contacts = self.model.contacts
        self.model.emit(SyncDidStart())
        logger.info(f"Sync started for {len(contacts)} contact(s)")

        responses = await asyncio.gather(*(self._retrieve(contact) for contact in contacts))
        results = [self._process(contact, data) for contact, data in responses]

        synced = sum(1 for result in results if isinstance(result, Synced))
        logger.info(f"Sync finished: {synced} synced, {len(results) - synced} failed")
        self.model.emit(SyncDidEnd())

        return results

    async def _retrieve(self, contact: Contact) -> Tuple[Contact, ReceiveListData]:
        self.model.emit(ResolvingReceiveListDidStart(contact))

        if contact.receive_address is None:
            return contact, None

        try:
            resolve_response = await self.model.api.resolve_pointer(contact.receive_address, recursive=True)
            receive_list_hash = resolve_response.path

            self.model.emit(DownloadingReceiveListDidStart(contact))
            data = await self.model.api.fetch_blob(receive_list_hash)
        except Exception as e:
            logger.warning(f"Failed to retrieve receive list of {contact.display_name}: {e}")
            return contact, None

        return contact, (receive_list_hash, data)

    def _process(self, contact: Contact, receive_list_data: ReceiveListData) -> SyncState:
        if receive_list_data is None:
            if contact.receive_address is None:
                logger.debug(f"Skipping {contact.display_name}: receive address not set")
                return Failed(contact, SyncOperationError(SyncFailureReason.RECEIVE_ADDRESS_NOT_SET))
            return self._failed(
                contact,
                SyncOperationError(SyncFailureReason.FAILED_TO_RETRIEVE_SHARED_FILE_LIST, detail=contact.receive_address)
            )

        receive_list_hash, data = receive_list_data
        self.model.emit(ProcessingReceiveListDidStart(contact))

        try:
            files = decode_file_list(data)
        except ValidationError:
            return self._failed(
                contact,
                SyncOperationError(SyncFailureReason.INVALID_JSON_FOR_OBJECT, detail=receive_list_hash)
            )

        updated_contact = contact.updating_receive_list(FileList(hash=receive_list_hash, files=files))

        try:
            self.model.store.upsert_contact(updated_contact)
        except Exception as e:
            return self._failed(contact, SyncOperationError.unknown(e))

        self.model.emit(PropertiesDidChange(updated_contact))
        return Synced(updated_contact, contact)

    def _failed(self, contact: Contact, error: SyncOperationError) -> Failed:
        logger.warning(f"Sync failed for {contact.display_name}: {error}")
        self.model.emit(ErrorOccurred(error))
        return Failed(contact, error)
