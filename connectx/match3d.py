"""Rules of a three-dimensional connect-N match played on vertical sticks."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Iterator

from connectx.errors import InvalidMoveError, InvalidOptionsError
from connectx.match2d import (
    GameoverResult,
    Player,
    ResultType,
    Slot,
    _format_time,
    _now,
)
from connectx.models import DTOGetter, _as_mapping, _read_bool, _read_int


@dataclass(frozen=True)
class Direction3D:
    row: int
    col: int
    h: int

    def other_side(self) -> Direction3D:
        return Direction3D(row=-self.row, col=-self.col, h=-self.h)


@dataclass(frozen=True)
class Point3D:
    row: int
    col: int
    h: int


@dataclass
class Move3D:
    col: int
    row: int
    registered_at: datetime = field(default_factory=_now)


@dataclass
class MatchOpts3D:
    r: int
    c: int
    h: int
    a: int
    starts1: bool = False
    t0: int = 0
    td: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> MatchOpts3D:
        data = _as_mapping(data)
        return cls(
            r=_read_int(data, "r"),
            c=_read_int(data, "c"),
            h=_read_int(data, "h"),
            a=_read_int(data, "a"),
            starts1=_read_bool(data, "starts1"),
            t0=_read_int(data, "t0"),
            td=_read_int(data, "td"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "r": self.r,
            "c": self.c,
            "h": self.h,
            "a": self.a,
            "starts1": self.starts1,
            "t0": self.t0,
            "td": self.td,
        }


_DIRECTIONS = (
    # axis-aligned
    Direction3D(1, 0, 0),
    Direction3D(0, 1, 0),
    Direction3D(0, 0, 1),
    # planar diagonals
    Direction3D(1, 1, 0),
    Direction3D(1, -1, 0),
    Direction3D(1, 0, 1),
    Direction3D(1, 0, -1),
    Direction3D(0, 1, 1),
    Direction3D(0, 1, -1),
    # space diagonals
    Direction3D(1, 1, 1),
    Direction3D(1, 1, -1),
    Direction3D(1, -1, 1),
    Direction3D(-1, 1, 1),
)


class Match3D:
    """A match on an R x C grid of sticks, each holding up to H pieces."""

    def __init__(self, p1_id: str, p2_id: str, opts: MatchOpts3D) -> None:
        if opts.r <= 0 or opts.c <= 0 or opts.h <= 0 or opts.a <= 0:
            raise InvalidOptionsError(
                "invalid match options: dimensions and alignment must be positive"
            )
        if opts.a > opts.r and opts.a > opts.c and opts.a > opts.h:
            raise InvalidOptionsError(
                "invalid match options: alignment must be less than or equal to any dimension"
            )
        self.opts = opts
        self.p1 = Player(p1_id, opts.t0)
        self.p2 = Player(p2_id, opts.t0)
        self.board: list[list[list[Slot]]] = [
            [[Slot.EMPTY] * opts.h for _ in range(opts.c)] for _ in range(opts.r)
        ]
        self.moves: list[Move3D] = []
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

    def _free_height(self, row: int, col: int) -> int | None:
        return next(
            (h for h, slot in enumerate(self.board[row][col]) if slot is Slot.EMPTY),
            None,
        )

    def _inside(self, row: int, col: int, h: int) -> bool:
        return 0 <= row < self.opts.r and 0 <= col < self.opts.c and 0 <= h < self.opts.h

    def _walk(
        self, row: int, col: int, h: int, d: Direction3D, slot: Slot
    ) -> Iterator[Point3D]:
        row, col, h = row + d.row, col + d.col, h + d.h
        while self._inside(row, col, h) and self.board[row][col][h] == slot:
            yield Point3D(row, col, h)
            row, col, h = row + d.row, col + d.col, h + d.h

    def _victory_line(
        self, row: int, col: int, h: int, d: Direction3D
    ) -> tuple[Point3D, ...] | None:
        slot = self.board[row][col][h]
        if slot is Slot.EMPTY:
            return None
        line = (
            Point3D(row, col, h),
            *self._walk(row, col, h, d, slot),
            *self._walk(row, col, h, d.other_side(), slot),
        )
        return line if len(line) >= self.opts.a else None

    def _check_gameover(self, row: int, col: int, h: int) -> GameoverResult | None:
        lines = tuple(
            line
            for line in (self._victory_line(row, col, h, d) for d in _DIRECTIONS)
            if line is not None
        )
        if lines:
            return GameoverResult(ResultType.WON, lines)
        if len(self.moves) >= self.opts.r * self.opts.h * self.opts.c:
            return GameoverResult(ResultType.DRAW)
        return None

    def register_move(self, move: Move3D, pid: str) -> GameoverResult | None:
        """Play ``move`` for ``pid``; return the result if the match ended."""
        if self.gameover:
            raise InvalidMoveError("game is over")
        if not self.started:
            raise InvalidMoveError("match has not started yet")
        if not 0 <= move.row < self.opts.r:
            raise InvalidMoveError("invalid row")
        if not 0 <= move.col < self.opts.c:
            raise InvalidMoveError("invalid column")
        current = self.current_player_id()
        if current != pid:
            raise InvalidMoveError("not your turn")
        h = self._free_height(move.row, move.col)
        if h is None:
            raise InvalidMoveError("invalid move. stick is full")
        self.board[move.row][move.col][h] = (
            Slot.PLAYER2 if current == self.p2.id else Slot.PLAYER1
        )
        self.moves.append(move)
        result = self._check_gameover(move.row, move.col, h)
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
            "board": [
                [[int(slot) for slot in stick] for stick in layer] for layer in self.board
            ],
            "P1": p1.to_dict(),
            "P2": p2.to_dict() if p2 is not None else None,
            "Opts": self.opts.to_dict(),
            "Moves": [
                {
                    "Col": m.col,
                    "Row": m.row,
                    "RegisteredAt": _format_time(m.registered_at),
                }
                for m in self.moves
            ],
            "StartedAt": _format_time(self.started_at),
            "Started": self.started,
            "Gameover": self.gameover,
        }