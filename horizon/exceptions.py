"""Error taxonomy for the synchronization engine.

Errors are partitioned by the operation family that raised them. Every
family has a closed set of reasons plus ``UNKNOWN``, which wraps the
underlying error that could not be classified.
"""

from enum import Enum
from typing import Optional


class ContactFailureReason(str, Enum):
    UNKNOWN = "unknown"
    CONTACT_ALREADY_EXISTS = "contact_already_exists"
    CONTACT_DOES_NOT_EXIST = "contact_does_not_exist"


class FileFailureReason(str, Enum):
    UNKNOWN = "unknown"
    FILE_HASH_NOT_SET = "file_hash_not_set"
    SEND_ADDRESS_NOT_SET = "send_address_not_set"
    FILE_DOES_NOT_EXIST = "file_does_not_exist"
    FILE_ALREADY_EXISTS = "file_already_exists"
    FILE_NOT_SHARED = "file_not_shared"
    FAILED_TO_ENCODE_FILE_LIST_TO_TEMPORARY_FILE = "failed_to_encode_file_list_to_temporary_file"


class SyncFailureReason(str, Enum):
    UNKNOWN = "unknown"
    FAILED_TO_RETRIEVE_SHARED_FILE_LIST = "failed_to_retrieve_shared_file_list"
    RECEIVE_ADDRESS_NOT_SET = "receive_address_not_set"
    INVALID_JSON_FOR_OBJECT = "invalid_json_for_object"


class DaemonFailureReason(str, Enum):
    UNKNOWN = "unknown"
    INIT_FAILED = "init_failed"
    FAILED_TO_ALTER_CONFIG_FILE = "failed_to_alter_config_file"


class HorizonError(Exception):
    """
    Base exception class for all engine errors.

    Attributes:
        reason: Member of the family's reason enum
        detail: Path, file name or address for parameterised reasons
        underlying: Wrapped error for the UNKNOWN reason
    """

    reason_type = None

    def __init__(self, reason, detail: Optional[str] = None, underlying: Optional[BaseException] = None):
        self.reason = self.reason_type(reason)
        self.detail = detail
        self.underlying = underlying
        super().__init__(self._describe())

    @classmethod
    def unknown(cls, error: BaseException) -> "HorizonError":
        return cls(cls.reason_type.UNKNOWN, underlying=error)

    def _describe(self) -> str:
        message = f"{type(self).__name__}: {self.reason.value}"
        if self.detail is not None:
            message += f" ({self.detail})"
        if self.underlying is not None:
            message += f": {self.underlying}"
        return message

    def __eq__(self, other):
        if not isinstance(other, HorizonError):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.reason == other.reason
            and self.detail == other.detail
        )

    def __hash__(self):
        return hash((type(self), self.reason, self.detail))


class ContactOperationError(HorizonError):
    """
    Raised when adding, removing or renaming a contact fails.
    """
    reason_type = ContactFailureReason


class FileOperationError(HorizonError):
    """
    Raised when sharing, unsharing, publishing or fetching files fails.
    """
    reason_type = FileFailureReason


class SyncOperationError(HorizonError):
    """
    Describes why a single contact could not be synced.
    """
    reason_type = SyncFailureReason


class DaemonOperationError(HorizonError):
    """
    Raised by the storage daemon manager.
    """
    reason_type = DaemonFailureReason


class StorageServiceError(Exception):
    """
    Raised when the storage service answers a request with an error.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, code: Optional[int] = None):
        self.status_code = status_code
        self.code = code
        super().__init__(message)


class StorageUnavailableError(StorageServiceError):
    """
    Raised when the storage service cannot be reached.
    """
    pass
