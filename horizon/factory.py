"""Construction of a ready-to-use model for an identity."""

from common.logging_config import setup_logging
from horizon.config import Configuration
from horizon.event_log import log_event
from horizon.events import EventCallback
from horizon.ipfs_client import IPFSClient
from horizon.model import Model
from horizon.repositories.contact_repository import ContactRepository


def create_model(config: Configuration, event_callback: EventCallback = None) -> Model:
    """
    Build a model backed by the HTTP storage client and the SQLite store.

    Args:
        config: Configuration of the identity
        event_callback: Observer for events (defaults to logging them)

    Returns:
        Model instance
    """
    setup_logging('horizon', log_level=config.log_level, identity=config.identity)

    api = IPFSClient(config)
    store = ContactRepository(config.database_path)
    return Model(api, store, config, event_callback=event_callback or log_event)
