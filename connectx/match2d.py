"""Rules of a two-dimensional connect-N match."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, Iterator, Mapping

from connectx.errors import InvalidMoveError, InvalidOptionsError
from connectx.models import DTOGetter, _as_mapping, _read_bool, _read_int

_ZERO_TIME = "0001-01-01T00:00:00Z"


class Slot(IntEnum):
    EMPTY = 0
    PLAYER1 = 1
    PLAYER2 = 2


class ResultType(IntEnum):
    WON = 0
    DRAW = 1
    TIMEOUT = 2


@dataclass(frozen=True)
class Direction:
    row: int
    col: int

    def other_side(self) -> Direction:
        return Direction(row=-self.row, col=-self.col)


@dataclass(frozen=True)
class Point:
    row: int
    col: int


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _format_time(moment: datetime | None) -> str:
    return _ZERO_TIME if moment is None else moment.isoformat()


@dataclass
class Move:
    col: int
    registered_at: datetime = field(default_factory=_now)


@dataclass
class MatchOpts:
    w: int
    h: int
    a: int
    starts1: bool = False
    t0: int = 0
    td: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> MatchOpts:
        data = _as_mapping(data)
        return cls(
            w=_read_int(data, "w"),
            h=_read_int(data, "h"),
            a=_read_int(data, "a"),
            starts1=_read_bool(data, "starts1"),
            t0=_read_int(data, "t0"),
            td=_read_int(data, "td"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "w": self.w,
            "h": self.h,
            "a": self.a,
            "starts1": self.starts1,
            "t0": self.t0,
            "td": self.td,
        }


@dataclass
class Player:
    id: str
    time_left: int = 0


def _point_dict(point: Any) -> dict[str, int]:
    return {f.name.capitalize(): getattr(point, f.name) for f in fields(point)}


@dataclass(frozen=True)
class GameoverResult:
    """How a match ended, with the winning lines when there are any."""

    result_type: ResultType
    lines: tuple[tuple[Any, ...], ...] = ()

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"resType": int(self.result_type)}
        if self.result_type is ResultType.WON:
            out["lines"] = [[_point_dict(p) for p in line] for line in self.lines]
        return out


_DIRECTIONS = (
    Direction(1, 0),
    Direction(0, 1),
    Direction(1, 1),
    Direction(1, -1),
)


class Match2D:
    """A match on a W x H board where pieces fall to the lowest free row."""

    def __init__(self, p1_id: str, p2_id: str, opts: MatchOpts) -> None:
        if opts.w <= 0 or opts.h <= 0 or opts.a <= 0:
            raise InvalidOptionsError(
                "invalid match options: dimensions and alignment must be positive"
            )
        if opts.a > opts.w and opts.a > opts.h:
            raise InvalidOptionsError(
                "invalid match options: alignment must be less than or equal to width or height"
            )
        self.opts = opts
        self.p1 = Player(p1_id, opts.t0)
        self.p2 = Player(p2_id, opts.t0)
        self.board: list[list[Slot]] = [[Slot.EMPTY] * opts.w for _ in range(opts.h)]
        self.moves: list[Move] = []
        self.started_at: datetime | None = None
        self.started = False
        self.gameover = False

    def current_player_id(self) -> str:
        if (len(self.moves) % 2 == 0) == self.opts.starts1:
            return self.p1.id
        return self.p2.id

    def enemy_id(self, pid: str) -> str | None:
        """Return the opponent of ``pid``, or None if ``pid`` is not in the match."""
        if pid == self.p1.id:
            return self.p2.id
        if pid == self.p2.id:
            return self.p1.id
        return None

    def _free_row(self, col: int) -> int | None:
        return next(
            (row for row in reversed(range(self.opts.h)) if self.board[row][col] is Slot.EMPTY),
            None,
        )

    def _walk(self, row: int, col: int, d: Direction, slot: Slot) -> Iterator[Point]:
        row, col = row + d.row, col + d.col
        while 0 <= row < self.opts.h and 0 <= col < self.opts.w and self.board[row][col] == slot:
            yield Point(row, col)
            row, col = row + d.row, col + d.col

    def _victory_line(self, row: int, col: int, d: Direction) -> tuple[Point, ...] | None:
        slot = self.board[row][col]
        if slot is Slot.EMPTY:
            return None
        line = (
            Point(row, col),
            *self._walk(row, col, d, slot),
            *self._walk(row, col, d.other_side(), slot),
        )
        return line if len(line) >= self.opts.a else None

    def _check_gameover(self, row: int, col: int) -> GameoverResult | None:
        lines = tuple(
            line
            for line in (self._victory_line(row, col, d) for d in _DIRECTIONS)
            if line is not None
        )
        if lines:
            return GameoverResult(ResultType.WON, lines)
        if len(self.moves) == self.opts.h * self.opts.w:
            return GameoverResult(ResultType.DRAW)
        return None

    def register_move(self, move: Move, pid: str) -> GameoverResult | None:
        """Play ``move`` for ``pid``; return the result if the match ended."""
        if self.gameover:
            raise InvalidMoveError("game is over")
        if not self.started:
            raise InvalidMoveError("match has not started yet")
        if not 0 <= move.col < self.opts.w:
            raise InvalidMoveError("invalid column")
        current = self.current_player_id()
        if current != pid:
            raise InvalidMoveError("not your turn")
        row = self._free_row(move.col)
        if row is None:
            raise InvalidMoveError("invalid move. column is full")
        self.board[row][move.col] = Slot.PLAYER2 if current == self.p2.id else Slot.PLAYER1
        self.moves.append(move)
        result = self._check_gameover(row, move.col)
        if result is not None:
            self.gameover = True
        return result

    def to_dto(self, user_model: DTOGetter) -> dict[str, Any]:
        """Build the client-facing view of the match."""
        p1 = replace(user_model.get_user_dto(self.p1.id), time_left=self.p1.time_left)
        p2 = None
        if self.p2.id:
            p2 = replace(user_model.get_user_dto(self.p2.id), time_left=self.p2.time_left)
        return {
            "board": [[int(slot) for slot in row] for row in self.board],
            "P1": p1.to_dict(),
            "P2": p2.to_dict() if p2 is not None else None,
            "Opts": self.opts.to_dict(),
            "Moves": [
                {"Col": m.col, "RegisteredAt": _format_time(m.registered_at)}
                for m in self.moves
            ],
            "StartedAt": _format_time(self.started_at),
            "Started": self.started,
            "Gameover": self.gameover,
        }


def _opts_from(data: Mapping[str, Any]) -> MatchOpts:
    return MatchOpts.from_dict(data)