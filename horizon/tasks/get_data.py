"""Fetch the contents of a shared file."""

from common.types import File
from horizon.events import FetchingFileDidStart
from horizon.exceptions import FileFailureReason, FileOperationError, HorizonError
from horizon.tasks.base import ModelTask


class GetDataTask(ModelTask):
    error_type = FileOperationError

    async def data(self, file: File) -> bytes:
        try:
            if file.hash is None:
                raise FileOperationError(FileFailureReason.FILE_HASH_NOT_SET, detail=file.name)

            self.model.emit(FetchingFileDidStart(file.hash))
            return await self.model.api.fetch_blob(file.hash)
        except HorizonError as e:
            self.report(e)
            raise
        except Exception as e:
            raise self.report(e) from e
