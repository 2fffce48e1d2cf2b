import json
import socket

import aiohttp
import pytest
from aiohttp.test_utils import TestServer

from connectx.client import main, run_client
from connectx.hub import Hub
from connectx.models import UserModel
from connectx.protocol import MessageType, WsStatus
from connectx.server import create_app


def _ws_url(server, path="/ws"):
    return str(server.make_url(path)).replace("http://", "ws://", 1)


def _free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.mark.asyncio
async def test_plain_greeting_gets_json_error_text():
    async with TestServer(create_app(Hub(UserModel()))) as server:
        reply = await run_client(_ws_url(server), "user123", "Hello server")
    assert isinstance(reply, str)
    assert reply.startswith("err unmarshaling json:")


@pytest.mark.asyncio
async def test_token_cookie_identifies_user():
    hub = Hub(UserModel())
    request = json.dumps(
        {
            "type": int(MessageType.CREATE_MATCH_3D),
            "id": "7",
            "body": {"r": 4, "c": 4, "h": 4, "a": 4},
        }
    ).encode()
    async with TestServer(create_app(hub)) as server:
        reply = await run_client(_ws_url(server), "user123", request)
    resp = json.loads(reply)
    assert resp["status"] == WsStatus.OK
    assert resp["req_id"] == "7"
    assert hub.match_controller_3d.matches[resp["body"]["id"]].p1.id == "user123"


@pytest.mark.asyncio
async def test_handshake_error_carries_status():
    async with TestServer(create_app(Hub(UserModel()))) as server:
        with pytest.raises(aiohttp.WSServerHandshakeError) as info:
            await run_client(_ws_url(server, "/missing"), "user123", "Hello server")
    assert info.value.status == 404


@pytest.mark.asyncio
async def test_unreachable_server_raises_client_error():
    with pytest.raises(aiohttp.ClientError):
        await run_client(f"ws://127.0.0.1:{_free_port()}/ws", "user123", "Hello server")


def test_main_reports_dial_error(capsys):
    code = main(["--url", f"ws://127.0.0.1:{_free_port()}/ws"])
    assert code == 1
    assert capsys.readouterr().err.startswith("Dial error")