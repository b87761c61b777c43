"""Wire format for domain events.

Events travel as ``{"name": <registry name>, "payload": <JSON object>}``.
The registry name, never the Python import path, identifies the class, so
renaming a module does not break entries already sitting in a stream.
Payloads are (de)serialized with pydantic TypeAdapters over the event
dataclasses (UUIDs and datetimes round-trip as strings).
"""

import json
from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter

from keyhold.domain.events.base_event import DomainEvent
from keyhold.domain.events.registry import get_event_class, get_event_name


class EventDecodeError(ValueError):
    """Raised when a stored entry cannot be turned back into an event."""


@lru_cache(maxsize=None)
def _adapter(event_class: type[DomainEvent]) -> TypeAdapter[Any]:
    return TypeAdapter(event_class)


def encode_event(event: DomainEvent) -> dict[str, str]:
    """Encode an event as flat string fields (Redis stream entry).

    Raises:
        KeyError: If the event class is not registered.
    """
    event_class = type(event)
    payload = _adapter(event_class).dump_python(event, mode="json")
    return {"name": get_event_name(event_class), "payload": json.dumps(payload)}


def decode_event(fields: dict[str, str]) -> DomainEvent:
    """Rebuild an event from the fields written by encode_event.

    Raises:
        EventDecodeError: Unknown name or malformed payload.
    """
    try:
        event_class = get_event_class(fields["name"])
        payload = json.loads(fields["payload"])
        return _adapter(event_class).validate_python(payload)
    except (KeyError, ValueError) as e:
        raise EventDecodeError(f"Cannot decode event entry: {e}") from e
