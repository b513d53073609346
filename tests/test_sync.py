"""Tests for syncing receive lists."""

import pytest

from common.types import File, FileList
from horizon.config import Configuration
from horizon.events import ErrorOccurred, SyncDidEnd, SyncDidStart
from horizon.exceptions import SyncFailureReason
from horizon.model import Model
from horizon.repositories.contact_repository import ContactRepository
from horizon.schemas import encode_file_list
from horizon.sync_state import Failed, Synced


def publish_remote_list(fake_api, key_id, files):
    """Simulate a remote peer publishing a file list under key_id."""
    data = encode_file_list(files)
    address = fake_api.address_for(data)
    fake_api.blobs[address] = data
    fake_api.pointers[key_id] = f"/ipfs/{address}"
    return f"/ipfs/{address}"


class TestSync:
    """Test the sync operation."""

    @pytest.mark.asyncio
    async def test_sync_updates_receive_list(self, model, fake_api, make_contact):
        remote_files = [File('photo.jpg', 'QmPhoto'), File('notes.txt', 'QmNotes')]
        path = publish_remote_list(fake_api, 'k51remote', remote_files)
        alice = make_contact('Alice', receive_address='k51remote')

        results = await model.sync()

        assert len(results) == 1
        result = results[0]
        assert isinstance(result, Synced)
        assert result.old_value == alice
        assert result.contact.receive_list == FileList(path, remote_files)
        assert model.contact(named='Alice').receive_list == FileList(path, remote_files)
        assert fake_api.calls_to('resolve_pointer') == [('k51remote', True)]

    @pytest.mark.asyncio
    async def test_sync_with_no_contacts(self, model, events):
        results = await model.sync()

        assert results == []
        assert events == [SyncDidStart(), SyncDidEnd()]

    @pytest.mark.asyncio
    async def test_sync_returns_one_result_per_contact(self, model, fake_api, make_contact):
        publish_remote_list(fake_api, 'k51alice', [File('a.txt', 'QmA')])
        publish_remote_list(fake_api, 'k51carol', [File('c.txt', 'QmC')])
        make_contact('Alice', receive_address='k51alice')
        bob = make_contact('Bob', receive_address='k51bob')
        make_contact('Carol', receive_address='k51carol')
        fake_api.unresolvable.add('k51bob')

        results = await model.sync()

        assert [r.contact.display_name for r in results] == ['Alice', 'Bob', 'Carol']
        assert [type(r) for r in results] == [Synced, Failed, Synced]
        failed = results[1]
        assert failed.error.reason == SyncFailureReason.FAILED_TO_RETRIEVE_SHARED_FILE_LIST
        assert failed.error.detail == 'k51bob'
        assert model.contact(named='Bob') == bob

    @pytest.mark.asyncio
    async def test_contact_without_receive_address_is_skipped(self, model, fake_api, make_contact, events):
        make_contact('Alice')

        results = await model.sync()

        assert isinstance(results[0], Failed)
        assert results[0].error.reason == SyncFailureReason.RECEIVE_ADDRESS_NOT_SET
        assert fake_api.calls_to('resolve_pointer') == []
        assert not any(isinstance(e, ErrorOccurred) for e in events)

    @pytest.mark.asyncio
    async def test_missing_blob_fails_retrieval(self, model, fake_api, make_contact):
        fake_api.pointers['k51remote'] = '/ipfs/QmGone'
        make_contact('Alice', receive_address='k51remote')

        results = await model.sync()

        assert results[0].error.reason == SyncFailureReason.FAILED_TO_RETRIEVE_SHARED_FILE_LIST

    @pytest.mark.asyncio
    @pytest.mark.parametrize('payload', [b'not json at all', b'{"name": "a.txt"}', b'[{"hash": "QmA"}]'])
    async def test_malformed_list_is_rejected(self, model, fake_api, make_contact, events, payload):
        fake_api.blobs['QmBad'] = payload
        fake_api.pointers['k51remote'] = '/ipfs/QmBad'
        previous = FileList('/ipfs/QmOld', [File('old.txt', 'QmOld')])
        make_contact('Alice', receive_address='k51remote', receive_list=previous)

        results = await model.sync()

        error = results[0].error
        assert error.reason == SyncFailureReason.INVALID_JSON_FOR_OBJECT
        assert error.detail == '/ipfs/QmBad'
        assert model.contact(named='Alice').receive_list == previous
        assert ErrorOccurred(error) in events

    @pytest.mark.asyncio
    async def test_sync_events_bracket_the_operation(self, model, fake_api, make_contact, events):
        publish_remote_list(fake_api, 'k51remote', [])
        make_contact('Alice', receive_address='k51remote')

        await model.sync()

        assert events[0] == SyncDidStart()
        assert events[-1] == SyncDidEnd()

    @pytest.mark.asyncio
    async def test_all_fetches_finish_before_first_store_write(self, model, fake_api, make_contact, store, monkeypatch):
        for key in ('k51a', 'k51b', 'k51c'):
            publish_remote_list(fake_api, key, [File(f'{key}.txt', f'Qm{key}')])
            make_contact(key.upper(), with_send_address=False, receive_address=key)

        upsert = store.upsert_contact

        def recording_upsert(contact):
            fake_api.calls.append(('upsert_contact', (contact,)))
            upsert(contact)

        monkeypatch.setattr(store, 'upsert_contact', recording_upsert)

        await model.sync()

        methods = [name for name, _ in fake_api.calls]
        last_fetch = max(i for i, name in enumerate(methods) if name == 'fetch_blob')
        first_write = methods.index('upsert_contact')
        assert last_fetch < first_write
        assert methods.count('upsert_contact') == 3


class TestSyncBetweenIdentities:
    """Two identities exchanging file lists through one storage service."""

    @pytest.mark.asyncio
    async def test_shared_files_appear_after_sync(self, model, fake_api, tmp_path, sample_file):
        bob_config = Configuration(identity='bob', home=tmp_path / '.horizon')
        bob_model = Model(fake_api, ContactRepository(bob_config.database_path), bob_config)

        bob_in_alice_book = await model.add_contact('Bob')
        alice_in_bob_book = await bob_model.add_contact('Alice')
        bob_model.update_receive_address(alice_in_bob_book, bob_in_alice_book.send_address.address)

        shared = await model.share_files([sample_file], bob_in_alice_book)
        results = await bob_model.sync()

        assert isinstance(results[0], Synced)
        received = bob_model.contact(named='Alice').receive_list
        assert received.files == shared.send_list.files
        assert received.hash == f"/ipfs/{shared.send_list.hash}"
        assert bob_model.file_matching(next(iter(shared.send_list.files)).hash) is not None
