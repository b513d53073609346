"""Contact repository for database operations."""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Union

from common.logging_config import get_logger
from common.types import Contact, FileList, SendAddress
from horizon.database import get_db_connection, init_database
from horizon.schemas import decode_file_list, encode_file_list

logger = get_logger(__name__)


class PersistentStore(ABC):
    """
    Durable record of the contact list.

    Reads and writes are synchronous. Every write replaces a whole contact,
    keyed by its identifier.
    """

    @abstractmethod
    def list_contacts(self) -> List[Contact]:
        """Return all contacts."""

    @abstractmethod
    def upsert_contact(self, contact: Contact) -> None:
        """Create the contact or replace the one with the same identifier."""

    @abstractmethod
    def remove_contact(self, contact: Contact) -> None:
        """Remove the contact with the same identifier."""


def _files_to_json(file_list: FileList) -> str:
    return encode_file_list(file_list.files).decode("utf-8")


def _files_from_json(hash_value, files_json: str) -> FileList:
    return FileList(hash=hash_value, files=decode_file_list(files_json))


def _row_to_contact(row) -> Contact:
    send_address = None
    if row["send_address"] is not None:
        send_address = SendAddress(
            address=row["send_address"],
            keypair_name=row["send_keypair_name"],
        )

    return Contact(
        identifier=row["identifier"],
        display_name=row["display_name"],
        send_address=send_address,
        receive_address=row["receive_address"],
        send_list=_files_from_json(row["send_list_hash"], row["send_list_files"]),
        receive_list=_files_from_json(row["receive_list_hash"], row["receive_list_files"]),
    )


class ContactRepository(PersistentStore):
    """SQLite-backed contact store, one database file per identity."""

    def __init__(self, database_path: Union[str, Path]):
        self.database_path = Path(database_path)
        init_database(self.database_path)

    def list_contacts(self) -> List[Contact]:
        with get_db_connection(self.database_path) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM contacts ORDER BY rowid")
            rows = cursor.fetchall()

        return [_row_to_contact(row) for row in rows]

    def upsert_contact(self, contact: Contact) -> None:
        now = datetime.now(timezone.utc).isoformat()
        send_address = contact.send_address

        with get_db_connection(self.database_path) as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO contacts (
                    identifier, display_name, send_address, send_keypair_name,
                    receive_address, send_list_hash, send_list_files,
                    receive_list_hash, receive_list_files, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(identifier) DO UPDATE SET
                    display_name = excluded.display_name,
                    send_address = excluded.send_address,
                    send_keypair_name = excluded.send_keypair_name,
                    receive_address = excluded.receive_address,
                    send_list_hash = excluded.send_list_hash,
                    send_list_files = excluded.send_list_files,
                    receive_list_hash = excluded.receive_list_hash,
                    receive_list_files = excluded.receive_list_files,
                    updated_at = excluded.updated_at
                """,
                (
                    contact.identifier,
                    contact.display_name,
                    send_address.address if send_address else None,
                    send_address.keypair_name if send_address else None,
                    contact.receive_address,
                    contact.send_list.hash,
                    _files_to_json(contact.send_list),
                    contact.receive_list.hash,
                    _files_to_json(contact.receive_list),
                    now,
                    now,
                )
            )
            conn.commit()

        logger.debug(f"Stored contact {contact.display_name} [identifier={contact.identifier}]")

    def remove_contact(self, contact: Contact) -> None:
        with get_db_connection(self.database_path) as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM contacts WHERE identifier = ?", (contact.identifier,))
            conn.commit()

        logger.debug(f"Removed contact {contact.display_name} [identifier={contact.identifier}]")
