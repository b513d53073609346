"""Share local files with a contact."""

import asyncio
import os
from pathlib import Path
from typing import Iterable, List

from common.logging_config import get_logger
from common.types import Contact, File, FileList
from horizon.events import AddingFileDidStart, PropertiesDidChange
from horizon.exceptions import FileFailureReason, FileOperationError, HorizonError
from horizon.schemas import AddResponse
from horizon.tasks.base import ModelTask
from horizon.tasks.publish_file_list import PublishFileListTask, require_send_address

logger = get_logger(__name__)


class ShareFilesTask(ModelTask):
    error_type = FileOperationError

    async def share_files(self, paths: Iterable[Path], contact: Contact) -> Contact:
        """
        Upload files and add them to the contact's send list.

        All uploads run concurrently and must all succeed. The merged list
        is stored before it is republished.

        Args:
            paths: Local files to share
            contact: Contact to share with

        Returns:
            The stored contact with the republished send list

        Raises:
            FileOperationError: On a failed precondition, upload or publish
        """
        try:
            updated_contact = await self._add_files(paths, contact)
        except HorizonError as e:
            self.report(e)
            raise
        except Exception as e:
            raise self.report(e) from e

        return await PublishFileListTask(self.model).publish_file_list(updated_contact)

    async def _add_files(self, paths: Iterable[Path], contact: Contact) -> Contact:
        paths = list(dict.fromkeys(Path(p) for p in paths))
        require_send_address(contact)

        names = set()
        for path in paths:
            if path.name in names or self.model.file_named(path.name, contact) is not None:
                raise FileOperationError(FileFailureReason.FILE_ALREADY_EXISTS, detail=path.name)
            names.add(path.name)

        for path in paths:
            if not path.is_file() or not os.access(path, os.R_OK):
                raise FileOperationError(FileFailureReason.FILE_DOES_NOT_EXIST, detail=str(path))

        add_responses: List[AddResponse] = await asyncio.gather(
            *(self._add_file(path) for path in paths)
        )

        new_files = {File(name=response.name, hash=response.hash) for response in add_responses}
        updated_send_list = FileList(hash=None, files=contact.send_list.files | new_files)
        updated_contact = contact.updating_send_list(updated_send_list)

        self.model.store.upsert_contact(updated_contact)
        self.model.emit(PropertiesDidChange(updated_contact))
        logger.info(f"Shared {len(new_files)} file(s) with {contact.display_name}")

        return updated_contact

    async def _add_file(self, path: Path) -> AddResponse:
        self.model.emit(AddingFileDidStart(path))
        return await self.model.api.add_blob(path)
