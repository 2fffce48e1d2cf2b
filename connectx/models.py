"""Player data objects, the user model and request payloads."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Protocol


@dataclass
class PlayerDTO:
    """Public view of a player as sent to clients."""

    id: str
    time_left: int = 0
    nick: str = ""
    img_url: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timeLeft": self.time_left,
            "nick": self.nick,
            "imgUrl": self.img_url,
        }


class DTOGetter(Protocol):
    """Anything that can look up a player's public data."""

    def get_user_dto(self, user_id: str) -> PlayerDTO:
        """Return the public data of the given user."""


class UserModel:
    """User store that knows nothing but the identifier."""

    def get_user_dto(self, user_id: str) -> PlayerDTO:
        return PlayerDTO(id=user_id)


_FRACTION = re.compile(r"(\.\d{6})\d+")


def _as_mapping(data: Any) -> Mapping[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ValueError(f"expected an object, got {type(data).__name__}")
    return data


def _read_str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


def _read_int(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field {key!r} must be an integer")
    return value


def _read_bool(data: Mapping[str, Any], key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"field {key!r} must be a boolean")
    return value


def _read_time(data: Mapping[str, Any], key: str) -> datetime | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a timestamp string")
    text = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    text = _FRACTION.sub(r"\1", text)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise ValueError(f"field {key!r} is not a valid timestamp") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class RegisterMovePayload:
    """Body of a request to drop a piece in a 2D match."""

    match_id: str = ""
    col: int = 0
    sent_at: datetime | None = None

    @classmethod
    def from_dict(cls, data: Any) -> RegisterMovePayload:
        data = _as_mapping(data)
        return cls(
            match_id=_read_str(data, "match_id"),
            col=_read_int(data, "col"),
            sent_at=_read_time(data, "sent_at"),
        )


@dataclass(frozen=True)
class JoinMatchPayload:
    """Body of a request to join a match."""

    match_id: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> JoinMatchPayload:
        data = _as_mapping(data)
        return cls(match_id=_read_str(data, "match_id"))


@dataclass(frozen=True)
class RegisterMove3DPayload:
    """Body of a request to drop a piece on a stick in a 3D match."""

    match_id: str = ""
    col: int = 0
    row: int = 0
    sent_at: datetime | None = None

    @classmethod
    def from_dict(cls, data: Any) -> RegisterMove3DPayload:
        data = _as_mapping(data)
        return cls(
            match_id=_read_str(data, "match_id"),
            col=_read_int(data, "col"),
            row=_read_int(data, "row"),
            sent_at=_read_time(data, "sent_at"),
        )