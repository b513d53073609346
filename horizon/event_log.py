"""Default event observer that writes events to the log."""

from common.logging_config import get_logger
from horizon.events import (
    AddingFileDidStart,
    ErrorOccurred,
    Event,
    FetchingFileDidStart,
    KeygenDidStart,
    PropertiesDidChange,
    RemoveKeyDidStart,
    RenameKeyDidStart,
)

logger = get_logger(__name__)


def describe_event(event: Event) -> str:
    if isinstance(event, ErrorOccurred):
        return f"{event.event}: {event.error}"
    if isinstance(event, AddingFileDidStart):
        return f"{event.event}: {event.path}"
    if isinstance(event, FetchingFileDidStart):
        return f"{event.event}: {event.hash}"
    if isinstance(event, (KeygenDidStart, RemoveKeyDidStart)):
        return f"{event.event}: {event.keypair_name}"
    if isinstance(event, RenameKeyDidStart):
        return f"{event.event}: {event.keypair_name} -> {event.new_keypair_name}"
    contact = getattr(event, "contact", None)
    if contact is not None:
        return f"{event.event}: {contact.display_name}"
    return event.event


def log_event(event: Event) -> None:
    if isinstance(event, ErrorOccurred):
        logger.error(describe_event(event))
    elif isinstance(event, PropertiesDidChange):
        logger.info(describe_event(event))
    else:
        logger.debug(describe_event(event))
