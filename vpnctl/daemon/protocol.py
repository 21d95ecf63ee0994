"""JSON-based protocol for daemon IPC.

Messages are UTF-8 JSON objects, one per line, so either side can frame
them with a plain readline().

Daemon -> client, full state push:
    {"type": "state", "data": {"settings": {...}, "locations": [...]}}

Client -> daemon, remote call:
    {"type": "call", "id": 1, "method": "applySettings", "params": [...]}

Daemon -> client, call result:
    {"type": "result", "id": 1, "result": ...}
    {"type": "result", "id": 1, "error": {"code": "...", "message": "..."}}
"""

import json
from typing import Any, Dict, Optional, Sequence

MSG_STATE = "state"
MSG_CALL = "call"
MSG_RESULT = "result"


class ProtocolError(Exception):
    """The peer sent something that is not a protocol message."""


def _encode(message: Dict[str, Any]) -> bytes:
    return json.dumps(message, separators=(",", ":")).encode("utf-8") + b"\n"


def serialize_request(call_id: int, method: str, params: Sequence[Any]) -> bytes:
    """
    Serialize a remote call for socket transmission.

    Args:
        call_id: Identifier echoed back in the matching result
        method: Daemon method name, e.g. "applySettings"
        params: Positional arguments (JSON-compatible)

    Returns:
        UTF-8 encoded, newline-terminated JSON bytes
    """
    return _encode({
        "type": MSG_CALL,
        "id": call_id,
        "method": method,
        "params": list(params),
    })


def serialize_state(data: Dict[str, Any]) -> bytes:
    """Serialize a daemon state push."""
    return _encode({"type": MSG_STATE, "data": data})


def serialize_response(
    call_id: int,
    result: Any = None,
    error: Optional[Dict[str, str]] = None,
) -> bytes:
    """
    Serialize a call result.

    Args:
        call_id: Identifier of the call being answered
        result: Return value when the call succeeded
        error: {"code": ..., "message": ...} when it failed
    """
    message: Dict[str, Any] = {"type": MSG_RESULT, "id": call_id}
    if error is not None:
        message["error"] = error
    else:
        message["result"] = result
    return _encode(message)


def deserialize_message(data: bytes) -> Dict[str, Any]:
    """
    Deserialize one line received from the socket.

    Raises:
        ProtocolError: If data is not a JSON object with a "type" field
    """
    try:
        message = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
        raise ProtocolError(f"Invalid message: {e}") from e

    if not isinstance(message, dict) or not isinstance(message.get("type"), str):
        raise ProtocolError("Invalid message: expected an object with a 'type' field")
    return message
