"""Shared pytest fixtures for all tests."""

import hashlib
import uuid
from pathlib import Path
from typing import Optional, Union

import pytest

from common.types import Contact, SendAddress
from horizon.config import Configuration
from horizon.exceptions import StorageServiceError
from horizon.model import Model
from horizon.repositories.contact_repository import ContactRepository
from horizon.schemas import (
    AddResponse,
    KeygenResponse,
    KeyInfo,
    ListKeysResponse,
    PublishResponse,
    RemoveKeyResponse,
    RenameKeyResponse,
    ResolveResponse,
)
from horizon.storage_api import StorageAPI


class FakeStorageAPI(StorageAPI):
    """
    In-memory storage service.

    Records every call in `calls` as (method, args). Setting
    `failures[method]` makes that method raise the given exception, and
    names in `unresolvable` fail to resolve.
    """

    def __init__(self):
        self.blobs = {}
        self.keys = {}
        self.pointers = {}
        self.calls = []
        self.failures = {}
        self.unresolvable = set()

    def _record(self, method: str, *args) -> None:
        self.calls.append((method, args))
        if method in self.failures:
            raise self.failures[method]

    def calls_to(self, method: str) -> list:
        return [args for name, args in self.calls if name == method]

    @staticmethod
    def address_for(content: bytes) -> str:
        return "Qm" + hashlib.sha256(content).hexdigest()[:44]

    async def add_blob(self, content: Union[bytes, Path], name: Optional[str] = None) -> AddResponse:
        self._record("add_blob", content)
        if isinstance(content, Path):
            name = name or content.name
            content = content.read_bytes()
        address = self.address_for(content)
        self.blobs[address] = content
        return AddResponse(name=name or address, hash=address, size=str(len(content)))

    async def fetch_blob(self, address: str) -> bytes:
        self._record("fetch_blob", address)
        key = address.removeprefix("/ipfs/")
        if key not in self.blobs:
            raise StorageServiceError(f"no link named {key}", status_code=500)
        return self.blobs[key]

    async def generate_keypair(self, name: str, algorithm: str, size: int) -> KeygenResponse:
        self._record("generate_keypair", name, algorithm, size)
        if name in self.keys:
            raise StorageServiceError("key with name already exists", status_code=500)
        self.keys[name] = "k51" + uuid.uuid4().hex
        return KeygenResponse(name=name, id=self.keys[name])

    async def list_keypairs(self) -> ListKeysResponse:
        self._record("list_keypairs")
        return ListKeysResponse(keys=[KeyInfo(name=n, id=i) for n, i in self.keys.items()])

    async def remove_keypair(self, name: str) -> RemoveKeyResponse:
        self._record("remove_keypair", name)
        key_id = self.keys.pop(name)
        return RemoveKeyResponse(keys=[KeyInfo(name=name, id=key_id)])

    async def rename_keypair(self, name: str, new_name: str) -> RenameKeyResponse:
        self._record("rename_keypair", name, new_name)
        key_id = self.keys.pop(name)
        self.keys[new_name] = key_id
        return RenameKeyResponse(was=name, now=new_name, id=key_id)

    async def publish_pointer(self, address: str, keypair_name: Optional[str] = None) -> PublishResponse:
        self._record("publish_pointer", address, keypair_name)
        key_id = self.keys[keypair_name]
        self.pointers[key_id] = f"/ipfs/{address}"
        return PublishResponse(name=key_id, value=self.pointers[key_id])

    async def resolve_pointer(self, name: str, recursive: Optional[bool] = None) -> ResolveResponse:
        self._record("resolve_pointer", name, recursive)
        if name in self.unresolvable or name not in self.pointers:
            raise StorageServiceError(f"could not resolve name {name}", status_code=500)
        return ResolveResponse(path=self.pointers[name])


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep host HORIZON_* settings out of tests."""
    for name in ("HORIZON_HOME", "HORIZON_DATABASE_PATH", "HORIZON_API_URL", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config(tmp_path):
    """Configuration for a throwaway identity under tmp_path."""
    return Configuration(identity="test", home=tmp_path / '.horizon')


@pytest.fixture
def store(config):
    return ContactRepository(config.database_path)


@pytest.fixture
def fake_api():
    return FakeStorageAPI()


@pytest.fixture
def events():
    """List collecting every emitted event."""
    return []


@pytest.fixture
def model(fake_api, store, config, events):
    return Model(fake_api, store, config, event_callback=events.append)


@pytest.fixture
def make_contact(store, fake_api, config):
    """
    Factory storing a contact, with a keypair registered in the fake
    service unless with_send_address is False.
    """
    def factory(name: str, with_send_address: bool = True, **kwargs) -> Contact:
        send_address = None
        if with_send_address:
            keypair_name = config.keypair_name(name)
            fake_api.keys[keypair_name] = "k51" + uuid.uuid4().hex
            send_address = SendAddress(address=fake_api.keys[keypair_name], keypair_name=keypair_name)
        contact = Contact(display_name=name, send_address=send_address, **kwargs)
        store.upsert_contact(contact)
        return contact

    return factory


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a sample file for testing shares.

    Returns:
        Path to report.pdf
    """
    file_path = tmp_path / 'report.pdf'
    file_path.write_bytes(b'%PDF-1.4 sample report')
    return file_path


@pytest.fixture
def multiple_sample_files(tmp_path):
    """
    Create multiple sample files for testing bulk shares.

    Returns:
        List of Paths to sample files
    """
    files = []
    for i in range(3):
        file_path = tmp_path / f'test{i}.txt'
        file_path.write_text(f'Sample content {i}')
        files.append(file_path)
    return files
