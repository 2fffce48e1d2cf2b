"""Wire format of the websocket protocol: request and response envelopes."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import IntEnum
from typing import Any


class WsStatus(IntEnum):
    OK = 0
    BAD_REQUEST = 1
    SERVER_ERROR = 2
    UNJOINABLE = 3
    ENEMY_JOINED = 4
    ENEMY_SENT_MOVE = 5
    GAMEOVER_WON = 6
    GAMEOVER_LOST = 7
    GAMEOVER_DRAW = 8


class MessageType(IntEnum):
    REGISTER_MOVE_2D = 0
    JOIN_MATCH_2D = 1
    CREATE_MATCH_2D = 2
    ABANDON_MATCH_2D = 3
    ASK_DRAW_2D = 4
    REGISTER_MOVE_3D = 5
    JOIN_MATCH_3D = 6
    CREATE_MATCH_3D = 7


@dataclass(frozen=True)
class WsRequest:
    """A client request: what to do, its body and an identifier to answer to.

    ``type`` is a MessageType when known, otherwise the raw integer.
    """

    type: int = MessageType.REGISTER_MOVE_2D
    body: Any = None
    id: str = ""

    @classmethod
    def from_json(cls, raw: bytes | str) -> WsRequest:
        """Decode a request; raise ValueError if it is not a valid envelope."""
        data = json.loads(raw)
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError("request must be a JSON object")

        kind = data.get("type")
        if kind is None:
            kind = 0
        elif isinstance(kind, bool) or not isinstance(kind, int):
            raise ValueError("field 'type' must be an integer")

        req_id = data.get("id")
        if req_id is None:
            req_id = ""
        elif not isinstance(req_id, str):
            raise ValueError("field 'id' must be a string")

        try:
            kind = MessageType(kind)
        except ValueError:
            pass
        return cls(type=kind, body=data.get("body"), id=req_id)


def _encode(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    raise TypeError(f"object of type {type(value).__name__} is not JSON serializable")


@dataclass(frozen=True)
class WsResponse:
    """A server message, either an answer to a request or a notification."""

    req_id: str
    status: WsStatus
    body: Any = None

    def to_json(self) -> bytes:
        """Encode the response as compact JSON bytes."""
        payload = {"req_id": self.req_id, "status": int(self.status), "body": self.body}
        return json.dumps(
            payload, separators=(",", ":"), default=_encode, allow_nan=False
        ).encode()