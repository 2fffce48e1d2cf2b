"""Small command-line client that talks to the game server once."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

import aiohttp

logger = logging.getLogger(__name__)

DEFAULT_URL = "ws://localhost:8080/ws"
DEFAULT_USER = "user123"
DEFAULT_MESSAGE = "Hello server"


async def run_client(url: str, user_id: str, message: bytes | str) -> bytes | str:
    """Connect as ``user_id``, send ``message`` as a binary frame and return the reply."""
    data = message.encode() if isinstance(message, str) else message
    async with aiohttp.ClientSession(cookies={"token": user_id}) as session:
        async with session.ws_connect(url) as ws:
            logger.info("websocket connected with cookies sent")
            await ws.send_bytes(data)
            reply = await ws.receive()
            if reply.type in (aiohttp.WSMsgType.BINARY, aiohttp.WSMsgType.TEXT):
                return reply.data
            raise ConnectionError(f"read error: connection ended with {reply.type.name}")


def main(argv: list[str] | None = None) -> int:
    """Send one message to the server and print its answer."""
    parser = argparse.ArgumentParser(description="Send one message to the game server.")
    parser.add_argument("--url", default=DEFAULT_URL, help="websocket URL of the server")
    parser.add_argument("--user", default=DEFAULT_USER, help="user identifier sent as token")
    parser.add_argument("--message", default=DEFAULT_MESSAGE, help="message to send")
    args = parser.parse_args(argv)

    try:
        reply = asyncio.run(run_client(args.url, args.user, args.message))
    except aiohttp.WSServerHandshakeError as exc:
        print(f"Dial error: {exc} (HTTP status code: {exc.status})", file=sys.stderr)
        return 1
    except aiohttp.ClientError as exc:
        print(f"Dial error: {exc}", file=sys.stderr)
        return 1
    except ConnectionError as exc:
        print(exc, file=sys.stderr)
        return 1

    text = reply.decode(errors="replace") if isinstance(reply, bytes) else reply
    print(f"Received from server: {text}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())