import pytest

from connectx.controller3d import MatchController3D, validate_match_options_3d
from connectx.errors import (
    InvalidMoveError,
    InvalidOptionsError,
    NotFoundError,
    UnjoinableError,
)
from connectx.match3d import MatchOpts3D
from connectx.models import RegisterMove3DPayload


def _opts():
    return MatchOpts3D(r=4, c=4, h=4, a=4, starts1=True)


def test_create_match():
    c = MatchController3D()
    match_id = c.create_match("player1", _opts())
    assert match_id != ""
    assert match_id in c.matches
    assert c.matches[match_id].p1.id == "player1"
    assert c.matches[match_id].started is False


def test_create_match_invalid_options():
    c = MatchController3D()
    with pytest.raises(InvalidOptionsError, match="invalid R"):
        c.create_match("player1", MatchOpts3D(r=1, c=4, h=4, a=4, starts1=True))
    assert c.matches == {}


def test_validate_lists_every_problem():
    with pytest.raises(InvalidOptionsError) as info:
        validate_match_options_3d(MatchOpts3D(r=3, c=11, h=3, a=4))
    assert str(info.value) == "invalid C, A cant be bigger than R, C, nor H"


def test_validate_accepts_good_options():
    validate_match_options_3d(_opts())
    c = MatchController3D()
    assert len(c.create_match("p", MatchOpts3D(r=10, c=10, h=10, a=3))) == 36


def test_join_match():
    c = MatchController3D()
    match_id = c.create_match("player1", _opts())

    match, is_first = c.join_match("player2", match_id)
    assert is_first is True
    assert match.p2.id == "player2"
    assert match.started is True
    assert match.started_at is not None

    with pytest.raises(UnjoinableError):
        c.join_match("player3", match_id)

    with pytest.raises(NotFoundError):
        c.join_match("player2", "non-existent-match")


def test_rejoin_by_existing_player():
    c = MatchController3D()
    match_id = c.create_match("player1", _opts())
    c.join_match("player2", match_id)
    match, is_first = c.join_match("player1", match_id)
    assert is_first is False
    assert match is c.matches[match_id]


def test_register_move():
    c = MatchController3D()
    match_id = c.create_match("player1", _opts())
    c.join_match("player2", match_id)

    payload = RegisterMove3DPayload(match_id=match_id, row=0, col=0)
    match, result = c.register_move("player1", payload)
    assert result is None
    assert len(match.moves) == 1
    assert match.moves[0].row == 0

    with pytest.raises(InvalidMoveError, match="not your turn"):
        c.register_move("player1", payload)


def test_register_move_not_found():
    c = MatchController3D()
    payload = RegisterMove3DPayload(match_id="non-existent-match", row=0, col=0)
    with pytest.raises(NotFoundError):
        c.register_move("player1", payload)