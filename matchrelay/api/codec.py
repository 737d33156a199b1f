from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Union

from pydantic import TypeAdapter, ValidationError

from matchrelay.api.models import (
    ClientMessage,
    ClientMessageType,
    GameOver,
    JoinMatchmaking,
    ServerMessage,
    StateUpdate,
)


@dataclass(frozen=True, slots=True)
class DecodeError:
    """A frame that could not be turned into a client message.

    The dispatcher drops these; `reason` only feeds the server log.
    """

    reason: str


@dataclass(frozen=True, slots=True)
class UnknownMessage:
    type: str


DecodeResult = Union[JoinMatchmaking, StateUpdate, GameOver, UnknownMessage, DecodeError]

_client_message_adapter: TypeAdapter[ClientMessage] = TypeAdapter(ClientMessage)
_known_types = frozenset(t.value for t in ClientMessageType)


def _reject_constant(name: str) -> None:
    # NaN and Infinity are not JSON.
    raise ValueError(f"non-standard json constant {name}")


def decode_client_message(raw: str | bytes) -> DecodeResult:
    """Parse one inbound frame. Never raises."""

    try:
        data = json.loads(raw, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        # ValueError covers JSONDecodeError, UnicodeDecodeError and the int digit limit.
        return DecodeError(reason=f"invalid json: {e}")

    if not isinstance(data, dict):
        return DecodeError(reason=f"expected a json object, got {type(data).__name__}")

    msg_type = data.get("type")
    if not isinstance(msg_type, str):
        return DecodeError(reason="missing message type")
    if msg_type not in _known_types:
        return UnknownMessage(type=msg_type)

    try:
        return _client_message_adapter.validate_python(data)
    except ValidationError as e:
        return DecodeError(reason=f"invalid {msg_type} payload: {e.error_count()} error(s)")
    except RecursionError:
        return DecodeError(reason=f"invalid {msg_type} payload: nested too deeply")


def encode_server_message(message: ServerMessage) -> str:
    return message.model_dump_json(by_alias=True)
