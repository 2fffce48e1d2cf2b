"""HTTP server exposing the game hub over a websocket endpoint."""

from __future__ import annotations

import argparse
import logging

from aiohttp import web

from connectx.hub import Hub
from connectx.models import UserModel

logger = logging.getLogger(__name__)

HUB_KEY = web.AppKey("hub", Hub)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080


async def handle_ws(request: web.Request) -> web.StreamResponse:
    """Upgrade an authenticated request to a websocket and serve it through the hub."""
    token = request.cookies.get("token")
    if token is None:
        logger.warning("token not found in cookie")
        return web.Response()
    logger.info("token is: %s", token)

    ws = web.WebSocketResponse(compress=True)
    if not ws.can_prepare(request).ok:
        logger.warning("err upgrading conn from %s", request.remote)
        return web.HTTPBadRequest(text="websocket upgrade required")
    await ws.prepare(request)

    hub = request.app[HUB_KEY]
    await hub.listen_from_user(token, ws)
    return ws


async def _index(request: web.Request) -> web.Response:
    return web.Response(text="hi")


def create_app(hub: Hub | None = None) -> web.Application:
    """Build the web application around ``hub`` (a fresh one if not given)."""
    app = web.Application()
    app[HUB_KEY] = hub if hub is not None else Hub(UserModel())
    app.router.add_get("/ws", handle_ws)
    app.router.add_get("/", _index)
    return app


def main(argv: list[str] | None = None) -> int:
    """Run the game server until interrupted."""
    parser = argparse.ArgumentParser(description="Run the connect-N game server.")
    parser.add_argument("--host", default=DEFAULT_HOST, help="address to listen on")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to listen on")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    print(f"running at {args.port}")
    web.run_app(create_app(), host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())