"""Pydantic schemas for storage-service responses and the file-list document."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from common.types import File


class ServiceModel(BaseModel):
    """Base for responses whose wire keys are capitalised."""
    model_config = ConfigDict(populate_by_name=True)


class AddResponse(ServiceModel):
    """Response model for adding a blob."""
    name: str = Field(alias="Name")
    hash: str = Field(alias="Hash")
    size: Optional[str] = Field(default=None, alias="Size")


class KeygenResponse(ServiceModel):
    """Response model for keypair generation."""
    name: str = Field(alias="Name")
    id: str = Field(alias="Id")


class KeyInfo(ServiceModel):
    name: str = Field(alias="Name")
    id: str = Field(alias="Id")


class ListKeysResponse(ServiceModel):
    """Response model for listing keypairs."""
    keys: List[KeyInfo] = Field(default_factory=list, alias="Keys")

    def names(self) -> List[str]:
        return [key.name for key in self.keys]


class RemoveKeyResponse(ServiceModel):
    """Response model for removing a keypair."""
    keys: List[KeyInfo] = Field(default_factory=list, alias="Keys")


class RenameKeyResponse(ServiceModel):
    """Response model for renaming a keypair."""
    was: str = Field(alias="Was")
    now: str = Field(alias="Now")
    id: str = Field(alias="Id")
    overwrite: bool = Field(default=False, alias="Overwrite")


class PublishResponse(ServiceModel):
    """Response model for publishing a mutable pointer."""
    name: str = Field(alias="Name")
    value: str = Field(alias="Value")


class ResolveResponse(ServiceModel):
    """Response model for resolving a mutable pointer."""
    path: str = Field(alias="Path")


class ServiceErrorResponse(ServiceModel):
    message: str = Field(alias="Message")
    code: Optional[int] = Field(default=None, alias="Code")


class FileEntry(BaseModel):
    """One entry of a published file list."""
    name: str
    hash: Optional[str] = None

    @classmethod
    def from_file(cls, file: File) -> "FileEntry":
        return cls(name=file.name, hash=file.hash)

    def to_file(self) -> File:
        return File(name=self.name, hash=self.hash)


FILE_LIST_ADAPTER = TypeAdapter(List[FileEntry])


def encode_file_list(files) -> bytes:
    """
    Encode files as a JSON array of {"name", "hash"} objects.

    Args:
        files: Iterable of File

    Returns:
        UTF-8 JSON bytes, entries sorted by name then hash
    """
    ordered = sorted(files, key=lambda f: (f.name, f.hash or ""))
    return FILE_LIST_ADAPTER.dump_json([FileEntry.from_file(f) for f in ordered])


def decode_file_list(data: bytes) -> List[File]:
    """
    Decode a published file list.

    Raises:
        pydantic.ValidationError: If data is not valid JSON or has the wrong shape
    """
    return [entry.to_file() for entry in FILE_LIST_ADAPTER.validate_json(data)]
