"""Routes websocket messages from connected users to the match controllers."""

from __future__ import annotations

import logging
from typing import Any, AsyncIterable, Awaitable, Callable, Protocol

from aiohttp import WSMsgType

from connectx.controller2d import MatchController2D
from connectx.controller3d import MatchController3D
from connectx.errors import ConnectXError, NotFoundError, UnjoinableError
from connectx.match2d import MatchOpts, ResultType
from connectx.match3d import MatchOpts3D
from connectx.models import (
    DTOGetter,
    JoinMatchPayload,
    RegisterMove3DPayload,
    RegisterMovePayload,
)
from connectx.protocol import MessageType, WsRequest, WsResponse, WsStatus

logger = logging.getLogger(__name__)

_NOTIFICATION_ID = "-1"
_CLOSING_TYPES = (WSMsgType.CLOSE, WSMsgType.CLOSING, WSMsgType.CLOSED, WSMsgType.ERROR)


class Connection(Protocol):
    """The sending half of a websocket connection."""

    async def send_bytes(self, data: bytes) -> None:
        """Send a binary frame."""

    async def send_str(self, data: str) -> None:
        """Send a text frame."""


async def write_message(conn: Connection, status: WsStatus, req_id: str, body: Any) -> None:
    """Send a response envelope as a binary frame."""
    try:
        data = WsResponse(req_id, status, body).to_json()
    except (TypeError, ValueError) as exc:
        logger.error("err marshaling response: %s", exc)
        await conn.send_str("SERVER ERROR")
        return
    await conn.send_bytes(data)


async def write_error(conn: Connection, status: WsStatus, req_id: str, message: str) -> None:
    """Send an error envelope whose body carries ``message``."""
    await write_message(conn, status, req_id, {"error": message})


_Handler = Callable[[str, Connection, WsRequest], Awaitable[None]]


class Hub:
    """Keeps track of connected users and dispatches their requests."""

    def __init__(self, user_model: DTOGetter) -> None:
        self.user_conns: dict[str, Connection] = {}
        self.user_model = user_model
        self.match_controller_2d = MatchController2D()
        self.match_controller_3d = MatchController3D()
        self._handlers: dict[int, _Handler] = {
            MessageType.CREATE_MATCH_2D: self.handle_create_match_2d,
            MessageType.JOIN_MATCH_2D: self.handle_join_match_2d,
            MessageType.REGISTER_MOVE_2D: self.handle_register_move_2d,
            MessageType.CREATE_MATCH_3D: self.handle_create_match_3d,
            MessageType.JOIN_MATCH_3D: self.handle_join_match_3d,
            MessageType.REGISTER_MOVE_3D: self.handle_register_move_3d,
        }

    async def process_message(
        self, user_id: str, conn: Connection, msg: bytes | str, binary: bool
    ) -> None:
        """Decode one incoming frame and run the matching handler."""
        if not binary:
            logger.warning("expected binary message from %s", user_id)
            await conn.send_str("invalid msg type. expected Binary")
            return
        try:
            req = WsRequest.from_json(msg)
        except ValueError as exc:
            logger.warning("err unmarshaling json: %s", exc)
            await conn.send_str(f"err unmarshaling json: {exc}")
            return
        handler = self._handlers.get(req.type)
        if handler is not None:
            await handler(user_id, conn, req)

    async def listen_from_user(self, user_id: str, conn: Any) -> None:
        """Register ``conn`` for ``user_id`` and serve its frames until it closes.

        ``conn`` must be a Connection that can also be iterated asynchronously
        for messages carrying ``type`` and ``data``, as aiohttp websockets are.
        """
        self.user_conns[user_id] = conn
        messages: AsyncIterable[Any] = conn
        try:
            async for msg in messages:
                if msg.type == WSMsgType.BINARY:
                    await self.process_message(
                        user_id, conn, msg.data.replace(b"\n", b" "), True
                    )
                elif msg.type == WSMsgType.TEXT:
                    await self.process_message(
                        user_id, conn, msg.data.replace("\n", " "), False
                    )
                elif msg.type in _CLOSING_TYPES:
                    break
        finally:
            logger.info("connection of %s closed", user_id)
            self.user_conns.pop(user_id, None)

    def _conn_of(self, user_id: str | None) -> Connection | None:
        if user_id is None:
            return None
        return self.user_conns.get(user_id)

    async def _create(
        self,
        controller: MatchController2D | MatchController3D,
        opts_type: type[MatchOpts] | type[MatchOpts3D],
        user_id: str,
        conn: Connection,
        req: WsRequest,
    ) -> None:
        try:
            opts = opts_type.from_dict(req.body)
        except ValueError:
            await write_error(conn, WsStatus.BAD_REQUEST, req.id, "Invalid Request Body")
            return
        try:
            match_id = controller.create_match(user_id, opts)
        except ConnectXError as exc:
            await write_error(conn, WsStatus.BAD_REQUEST, req.id, str(exc))
            return
        await write_message(conn, WsStatus.OK, req.id, {"id": match_id})

    async def _join(
        self,
        controller: MatchController2D | MatchController3D,
        user_id: str,
        conn: Connection,
        req: WsRequest,
    ) -> None:
        try:
            payload = JoinMatchPayload.from_dict(req.body)
        except ValueError:
            await write_error(conn, WsStatus.BAD_REQUEST, req.id, "Invalid Request Body")
            return
        try:
            match, first_join = controller.join_match(user_id, payload.match_id)
        except NotFoundError:
            await write_error(conn, WsStatus.BAD_REQUEST, req.id, "Match not found")
            return
        except UnjoinableError:
            await write_error(conn, WsStatus.UNJOINABLE, req.id, "Match unjoinable")
            return
        except ConnectXError:
            await write_error(conn, WsStatus.SERVER_ERROR, req.id, "Server error")
            return

        if first_join:
            enemy_conn = self._conn_of(match.enemy_id(user_id))
            if enemy_conn is not None:
                try:
                    player = self.user_model.get_user_dto(user_id)
                except Exception:
                    logger.exception("could not load player %s", user_id)
                    await write_error(
                        conn,
                        WsStatus.SERVER_ERROR,
                        req.id,
                        "Could not retrieve joining player's data",
                    )
                    return
                await write_message(
                    enemy_conn, WsStatus.ENEMY_JOINED, _NOTIFICATION_ID, player.to_dict()
                )

        try:
            dto = match.to_dto(self.user_model)
        except Exception:
            logger.exception("could not build match view")
            await write_error(conn, WsStatus.SERVER_ERROR, req.id, "could not create match DTO")
            return
        await write_message(conn, WsStatus.OK, req.id, dto)

    async def _move(
        self,
        controller: MatchController2D | MatchController3D,
        payload_type: type[RegisterMovePayload] | type[RegisterMove3DPayload],
        coords: Callable[[Any], dict[str, int]],
        user_id: str,
        conn: Connection,
        req: WsRequest,
    ) -> None:
        try:
            payload = payload_type.from_dict(req.body)
        except ValueError:
            await write_error(conn, WsStatus.BAD_REQUEST, req.id, "invalid move payload")
            return
        try:
            match, result = controller.register_move(user_id, payload)
        except ConnectXError as exc:
            await write_error(conn, WsStatus.BAD_REQUEST, req.id, str(exc))
            return

        enemy_conn = self._conn_of(match.enemy_id(user_id))
        body: dict[str, Any] = {
            **coords(payload),
            "time_left_p1": match.p1.time_left,
            "time_left_p2": match.p2.time_left,
        }

        if result is None:
            await write_message(conn, WsStatus.OK, req.id, None)
            if enemy_conn is not None:
                await write_message(
                    enemy_conn, WsStatus.ENEMY_SENT_MOVE, _NOTIFICATION_ID, body
                )
        elif result.result_type is ResultType.WON:
            body["lines"] = result.to_dict()["lines"]
            await write_message(conn, WsStatus.GAMEOVER_WON, req.id, body)
            if enemy_conn is not None:
                await write_message(enemy_conn, WsStatus.GAMEOVER_LOST, _NOTIFICATION_ID, body)
        elif result.result_type is ResultType.DRAW:
            await write_message(conn, WsStatus.GAMEOVER_DRAW, req.id, body)
            if enemy_conn is not None:
                await write_message(enemy_conn, WsStatus.GAMEOVER_DRAW, _NOTIFICATION_ID, body)
        else:
            logger.error("unexpected move result %r for match %r", result, match)
            await write_error(
                conn,
                WsStatus.SERVER_ERROR,
                req.id,
                "unexpected scenario in HandleRegisterMove",
            )

    async def handle_create_match_2d(self, user_id: str, conn: Connection, req: WsRequest) -> None:
        await self._create(self.match_controller_2d, MatchOpts, user_id, conn, req)

    async def handle_join_match_2d(self, user_id: str, conn: Connection, req: WsRequest) -> None:
        await self._join(self.match_controller_2d, user_id, conn, req)

    async def handle_register_move_2d(
        self, user_id: str, conn: Connection, req: WsRequest
    ) -> None:
        await self._move(
            self.match_controller_2d,
            RegisterMovePayload,
            lambda p: {"col": p.col},
            user_id,
            conn,
            req,
        )

    async def handle_create_match_3d(self, user_id: str, conn: Connection, req: WsRequest) -> None:
        await self._create(self.match_controller_3d, MatchOpts3D, user_id, conn, req)

    async def handle_join_match_3d(self, user_id: str, conn: Connection, req: WsRequest) -> None:
        await self._join(self.match_controller_3d, user_id, conn, req)

    async def handle_register_move_3d(
        self, user_id: str, conn: Connection, req: WsRequest
    ) -> None:
        await self._move(
            self.match_controller_3d,
            RegisterMove3DPayload,
            lambda p: {"col": p.col, "row": p.row},
            user_id,
            conn,
            req,
        )