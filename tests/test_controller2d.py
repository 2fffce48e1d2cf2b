import pytest

from connectx.controller2d import MatchController2D, validate_match_options
from connectx.errors import (
    InvalidMoveError,
    InvalidOptionsError,
    NotFoundError,
    UnjoinableError,
)
from connectx.match2d import MatchOpts, ResultType, Slot
from connectx.models import RegisterMovePayload


def opts():
    return MatchOpts(w=7, h=6, a=4, starts1=True)


def test_create_match():
    c = MatchController2D()
    match_id = c.create_match("player1", opts())
    assert match_id != ""
    assert match_id in c.matches
    assert c.matches[match_id].p1.id == "player1"
    assert c.matches[match_id].started is False


def test_create_match_ids_are_unique():
    c = MatchController2D()
    ids = {c.create_match("player1", opts()) for _ in range(5)}
    assert len(ids) == 5


def test_create_match_invalid_options():
    c = MatchController2D()
    with pytest.raises(InvalidOptionsError, match="invalid W"):
        c.create_match("player1", MatchOpts(w=1, h=6, a=4, starts1=True))
    assert c.matches == {}


def test_validate_lists_every_problem():
    with pytest.raises(InvalidOptionsError) as info:
        validate_match_options(MatchOpts(w=2, h=16, a=20))
    assert str(info.value) == "invalid W, invalid H, invalid A, A cant be bigger than W nor H"


def test_validate_accepts_bounds():
    validate_match_options(MatchOpts(w=15, h=3, a=15))
    with pytest.raises(InvalidOptionsError, match="A cant be bigger"):
        validate_match_options(MatchOpts(w=4, h=3, a=5))


def test_join_match():
    c = MatchController2D()
    match_id = c.create_match("player1", opts())

    match, first = c.join_match("player2", match_id)
    assert first is True
    assert match.p2.id == "player2"
    assert match.started is True
    assert match.started_at is not None and match.started_at.tzinfo is not None

    with pytest.raises(UnjoinableError):
        c.join_match("player3", match_id)

    with pytest.raises(NotFoundError):
        c.join_match("player2", "non-existent-match")


def test_rejoin_by_member_is_not_first_time():
    c = MatchController2D()
    match_id = c.create_match("player1", opts())
    c.join_match("player2", match_id)
    match, first = c.join_match("player1", match_id)
    assert first is False
    assert match is c.matches[match_id]


def test_register_move():
    c = MatchController2D()
    match_id = c.create_match("player1", opts())
    c.join_match("player2", match_id)

    payload = RegisterMovePayload(match_id=match_id, col=0)
    match, result = c.register_move("player1", payload)
    assert result is None
    assert match.board[5][0] is Slot.PLAYER1

    with pytest.raises(InvalidMoveError, match="not your turn"):
        c.register_move("player1", payload)


def test_register_move_not_found():
    c = MatchController2D()
    with pytest.raises(NotFoundError):
        c.register_move("player1", RegisterMovePayload(match_id="non-existent-match", col=0))


def test_register_move_before_join_fails():
    c = MatchController2D()
    match_id = c.create_match("player1", opts())
    with pytest.raises(InvalidMoveError, match="has not started"):
        c.register_move("player1", RegisterMovePayload(match_id=match_id, col=0))


def test_register_move_reports_win():
    c = MatchController2D()
    match_id = c.create_match("player1", opts())
    c.join_match("player2", match_id)
    result = None
    for i, col in enumerate([0, 1, 0, 1, 0, 1, 0]):
        pid = "player1" if i % 2 == 0 else "player2"
        _, result = c.register_move(pid, RegisterMovePayload(match_id=match_id, col=col))
    assert result.result_type is ResultType.WON
    assert c.matches[match_id].gameover is True