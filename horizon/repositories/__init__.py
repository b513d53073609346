"""Repository layer for contact persistence."""

from horizon.repositories.contact_repository import ContactRepository, PersistentStore

__all__ = [
    "ContactRepository",
    "PersistentStore",
]
