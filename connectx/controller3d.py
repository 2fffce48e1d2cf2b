"""Registry of running 3D matches."""

from __future__ import annotations

import threading
import uuid

from connectx.errors import InvalidOptionsError, NotFoundError, UnjoinableError
from connectx.match2d import GameoverResult, _now
from connectx.match3d import Match3D, MatchOpts3D, Move3D
from connectx.models import RegisterMove3DPayload


def validate_match_options_3d(opts: MatchOpts3D) -> None:
    """Raise InvalidOptionsError listing every problem with ``opts``."""
    problems = []
    if not 3 <= opts.r <= 10:
        problems.append("invalid R")
    if not 3 <= opts.c <= 10:
        problems.append("invalid C")
    if not 3 <= opts.h <= 10:
        problems.append("invalid H")
    if not 3 <= opts.a <= 10:
        problems.append("invalid A")
    if opts.a > opts.r or opts.a > opts.c or opts.a > opts.h:
        problems.append("A cant be bigger than R, C, nor H")
    if problems:
        raise InvalidOptionsError(", ".join(problems))


class MatchController3D:
    """Creates, joins and plays 3D matches by identifier."""

    def __init__(self) -> None:
        self.matches: dict[str, Match3D] = {}
        self._lock = threading.Lock()

    def create_match(self, p1_id: str, opts: MatchOpts3D) -> str:
        try:
            validate_match_options_3d(opts)
        except InvalidOptionsError as exc:
            raise InvalidOptionsError(f"invalid match options: {exc}") from exc
        match = Match3D(p1_id, "", opts)
        match_id = str(uuid.uuid4())
        with self._lock:
            self.matches[match_id] = match
        return match_id

    def join_match(self, player_id: str, match_id: str) -> tuple[Match3D, bool]:
        """Join a match; the flag tells whether this was the second player's first join."""
        with self._lock:
            match = self.matches.get(match_id)
            if match is None:
                raise NotFoundError()
            if match.p2.id:
                if player_id not in (match.p1.id, match.p2.id):
                    raise UnjoinableError()
                return match, False
            match.p2.id = player_id
            match.started = True
            match.started_at = _now()
            return match, True

    def register_move(
        self, user_id: str, payload: RegisterMove3DPayload
    ) -> tuple[Match3D, GameoverResult | None]:
        with self._lock:
            match = self.matches.get(payload.match_id)
        if match is None:
            raise NotFoundError()
        result = match.register_move(Move3D(col=payload.col, row=payload.row), user_id)
        return match, result