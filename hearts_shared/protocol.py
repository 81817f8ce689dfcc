"""Network protocol message definitions and serialization."""

import json
from hearts_shared.constants import MessageType


def create_message(msg_type: MessageType, payload: dict = None) -> str:
    """Create a JSON message string."""
    return json.dumps({
        "type": msg_type.value,
        "payload": payload or {},
    })


def parse_message(data: str) -> tuple[MessageType, dict]:
    """Parse a JSON message string into (type, payload)."""
    msg = json.loads(data)
    payload = msg.get("payload") or {}
    if not isinstance(payload, dict):
        raise ValueError("payload must be an object")
    return MessageType(msg["type"]), payload
