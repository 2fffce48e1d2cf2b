"""Registry of running 2D matches."""

from __future__ import annotations

import threading
import uuid

from connectx.errors import InvalidOptionsError, NotFoundError, UnjoinableError
from connectx.match2d import GameoverResult, Match2D, MatchOpts, Move
from connectx.models import RegisterMovePayload


def validate_match_options(opts: MatchOpts) -> None:
    """Raise InvalidOptionsError listing every problem with ``opts``."""
    problems = []
    if not 3 <= opts.w <= 15:
        problems.append("invalid W")
    if not 3 <= opts.h <= 15:
        problems.append("invalid H")
    if not 3 <= opts.a <= 15:
        problems.append("invalid A")
    if opts.a > opts.w and opts.a > opts.h:
        problems.append("A cant be bigger than W nor H")
    if problems:
        raise InvalidOptionsError(", ".join(problems))


class MatchController2D:
    """Creates, joins and plays 2D matches by identifier."""

    def __init__(self) -> None:
        self.matches: dict[str, Match2D] = {}
        self._lock = threading.Lock()

    def create_match(self, p1_id: str, opts: MatchOpts) -> str:
        try:
            validate_match_options(opts)
        except InvalidOptionsError as exc:
            raise InvalidOptionsError(f"invalid match options: {exc}") from exc
        match = Match2D(p1_id, "", opts)
        match_id = str(uuid.uuid4())
        with self._lock:
            self.matches[match_id] = match
        return match_id

    def join_match(self, player_id: str, match_id: str) -> tuple[Match2D, bool]:
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
            match.started_at = Move(col=0).registered_at
            return match, True

    def register_move(
        self, user_id: str, payload: RegisterMovePayload
    ) -> tuple[Match2D, GameoverResult | None]:
        with self._lock:
            match = self.matches.get(payload.match_id)
        if match is None:
            raise NotFoundError()
        result = match.register_move(Move(col=payload.col), user_id)
        return match, result