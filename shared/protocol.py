"""Network protocol message definitions and serialization."""

import json
from enum import Enum
from typing import Type, TypeVar

from shared.constants import ClientMessageType
from shared.errors import MalformedInputError

M = TypeVar("M", bound=Enum)


def create_message(msg_type: Enum, payload: dict = None) -> str:
    """Create a JSON message string."""
    return json.dumps({
        "type": msg_type.value,
        "payload": payload or {},
    })


def parse_message(data, kinds: Type[M] = ClientMessageType) -> tuple[M, dict]:
    """Parse a JSON message string into (type, payload).

    Raises MalformedInputError for anything that is not an object with a
    known `type` and an object `payload`.
    """
    try:
        msg = json.loads(data)
    except (TypeError, ValueError) as e:
        raise MalformedInputError(f"Invalid JSON: {e}") from e
    if not isinstance(msg, dict):
        raise MalformedInputError("Message must be a JSON object")
    try:
        msg_type = kinds(msg.get("type"))
    except ValueError as e:
        raise MalformedInputError(f"Unknown message type: {msg.get('type')!r}") from e
    payload = msg.get("payload") or {}
    if not isinstance(payload, dict):
        raise MalformedInputError("Payload must be a JSON object")
    return msg_type, payload
