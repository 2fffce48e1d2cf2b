from datetime import datetime, timezone

import pytest

from connectx.models import (
    JoinMatchPayload,
    PlayerDTO,
    RegisterMove3DPayload,
    RegisterMovePayload,
    UserModel,
)


def test_user_model_returns_dto_with_id_only():
    dto = UserModel().get_user_dto("user123")
    assert dto == PlayerDTO(id="user123")
    assert dto.time_left == 0
    assert dto.nick == ""


def test_player_dto_to_dict_keys():
    dto = PlayerDTO(id="p1", time_left=42, nick="player", img_url="pic.png")
    assert dto.to_dict() == {
        "id": "p1",
        "timeLeft": 42,
        "nick": "player",
        "imgUrl": "pic.png",
    }


def test_register_move_payload_from_dict():
    payload = RegisterMovePayload.from_dict(
        {"match_id": "abc", "col": 3, "sent_at": "2024-01-02T03:04:05Z"}
    )
    assert payload.match_id == "abc"
    assert payload.col == 3
    assert payload.sent_at == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def test_register_move_payload_nanosecond_timestamp():
    payload = RegisterMovePayload.from_dict(
        {"match_id": "abc", "col": 1, "sent_at": "2024-01-02T03:04:05.123456789Z"}
    )
    assert payload.sent_at == datetime(2024, 1, 2, 3, 4, 5, 123456, tzinfo=timezone.utc)


def test_missing_fields_take_defaults():
    payload = RegisterMovePayload.from_dict({})
    assert (payload.match_id, payload.col, payload.sent_at) == ("", 0, None)


def test_none_body_gives_defaults():
    assert JoinMatchPayload.from_dict(None) == JoinMatchPayload()


def test_join_payload_from_dict():
    assert JoinMatchPayload.from_dict({"match_id": "m-1"}).match_id == "m-1"


def test_register_move_3d_payload_from_dict():
    payload = RegisterMove3DPayload.from_dict({"match_id": "m", "col": 2, "row": 1})
    assert (payload.match_id, payload.col, payload.row) == ("m", 2, 1)


@pytest.mark.parametrize(
    "data",
    [
        {"match_id": 5},
        {"col": "zero"},
        {"col": True},
        {"col": 1.5},
        {"sent_at": "yesterday"},
        {"sent_at": 17},
    ],
)
def test_bad_field_types_raise(data):
    with pytest.raises(ValueError):
        RegisterMovePayload.from_dict(data)


def test_non_object_body_raises():
    with pytest.raises(ValueError):
        JoinMatchPayload.from_dict([1, 2, 3])


def test_3d_payload_rejects_bad_row():
    with pytest.raises(ValueError):
        RegisterMove3DPayload.from_dict({"match_id": "m", "row": "x"})