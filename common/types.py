"""Shared data type definitions (File, FileList, SendAddress, Contact)."""

import uuid
from dataclasses import dataclass, field, replace
from typing import FrozenSet, Iterable, Optional


@dataclass(frozen=True)
class File:
    """
    A single shared item. `hash` is None until the item has been added
    to the storage service.
    """
    name: str
    hash: Optional[str] = None


@dataclass(frozen=True)
class FileList:
    """
    A manifest of files, either sent or received. `hash` points to the
    published manifest itself and is None if it was never published.
    """
    hash: Optional[str] = None
    files: FrozenSet[File] = frozenset()

    def __post_init__(self):
        if not isinstance(self.files, frozenset):
            object.__setattr__(self, 'files', frozenset(self.files))

    def updating_hash(self, new_hash: str) -> "FileList":
        return FileList(hash=new_hash, files=self.files)

    def sorted_files(self) -> list:
        return sorted(self.files, key=lambda f: (f.name, f.hash or ""))


@dataclass(frozen=True)
class SendAddress:
    """
    The publishable naming address of a contact's send list together with
    the name of the local keypair it was derived from.
    """
    address: str
    keypair_name: str


@dataclass(frozen=True)
class Contact:
    """
    A remote user with whom files are exchanged.

    Contacts are never mutated: the `updating_*` methods derive a new value
    with the same identifier which then replaces the old one in the store.
    """
    display_name: str
    identifier: str = field(default_factory=lambda: str(uuid.uuid4()))
    send_address: Optional[SendAddress] = None
    receive_address: Optional[str] = None
    send_list: FileList = FileList()
    receive_list: FileList = FileList()

    def updating_display_name(self, new_display_name: str) -> "Contact":
        return replace(self, display_name=new_display_name)

    def updating_send_address(self, new_send_address: Optional[SendAddress]) -> "Contact":
        return replace(self, send_address=new_send_address)

    def updating_receive_address(self, new_receive_address: Optional[str]) -> "Contact":
        return replace(self, receive_address=new_receive_address)

    def updating_send_list(self, new_send_list: FileList) -> "Contact":
        return replace(self, send_list=new_send_list)

    def updating_receive_list(self, new_receive_list: FileList) -> "Contact":
        return replace(self, receive_list=new_receive_list)

    def all_files(self) -> Iterable[File]:
        return self.send_list.files | self.receive_list.files
