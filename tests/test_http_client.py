"""
Tests for the HTTP / JSON-RPC transport.
"""

import asyncio
import socket
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp import test_utils

from core.error_handling import RpcError, TransportError
from core.http_client import HttpClient, decode_body
from core.models import HttpSpec, RpcSpec, ServiceConfig
from core.watcher import ServiceWatcher


class TestDecodeBody:

    def test_json_object(self):
        assert decode_body('{"status": "ok"}') == {"status": "ok"}

    def test_json_string_and_number(self):
        assert decode_body('"0x1a"') == "0x1a"
        assert decode_body("42") == 42

    def test_plain_text(self):
        assert decode_body("OK\n") == "OK"


class TestRequestRpc:

    @pytest.mark.asyncio
    async def test_returns_result(self):
        client = HttpClient()
        client._send = AsyncMock(return_value={"jsonrpc": "2.0", "id": 1, "result": "0x10"})
        spec = RpcSpec(uri="http://localhost:8545", method="eth_blockNumber")

        assert await client.request_rpc(spec) == "0x10"
        method, url, _, _, payload, _ = client._send.await_args.args
        assert (method, url) == ("POST", "http://localhost:8545")
        assert payload == {"jsonrpc": "2.0", "id": 1, "method": "eth_blockNumber", "params": []}

    @pytest.mark.asyncio
    async def test_error_member_raises(self):
        client = HttpClient()
        client._send = AsyncMock(return_value={"jsonrpc": "2.0", "id": 1, "error": {"code": -32601}})

        with pytest.raises(RpcError):
            await client.request_rpc(RpcSpec(uri="http://localhost:8545", method="nope"))

    @pytest.mark.asyncio
    async def test_non_object_reply_raises(self):
        client = HttpClient()
        client._send = AsyncMock(return_value="Bad Gateway")

        with pytest.raises(RpcError):
            await client.request_rpc(RpcSpec(uri="http://localhost:8545", method="eth_blockNumber"))


# ============================================================
# LOCAL SERVER
# ============================================================

async def healthy(request):
    return web.json_response({"status": "ok"})


async def broken(request):
    return web.Response(status=500, text="Internal Server Error")


async def slow(request):
    await asyncio.sleep(2)
    return web.json_response({"status": "late"})


async def latin1_report(request):
    # 0xff is not valid UTF-8
    return web.Response(body=b'{"callbacks": ["\xff"]}', content_type="application/json")


@pytest_asyncio.fixture
async def server():
    app = web.Application()
    app.router.add_get("/health", healthy)
    app.router.add_get("/broken", broken)
    app.router.add_get("/slow", slow)
    app.router.add_post("/report", latin1_report)
    test_server = test_utils.TestServer(app)
    await test_server.start_server()
    yield test_server
    await test_server.close()


def unused_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class TestSend:

    @pytest.mark.asyncio
    async def test_json_body(self, server):
        client = HttpClient()

        response = await client.get(HttpSpec(uri=str(server.make_url("/health"))))

        assert response == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_server_error_is_transport_error(self, server):
        client = HttpClient()

        with pytest.raises(TransportError) as exc_info:
            await client.get(HttpSpec(uri=str(server.make_url("/broken"))))
        assert "HTTP 500" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_refused_connection_is_transport_error(self):
        client = HttpClient()

        with pytest.raises(TransportError) as exc_info:
            await client.get(HttpSpec(uri=f"http://127.0.0.1:{unused_port()}/health"))
        assert isinstance(exc_info.value.__cause__, aiohttp.ClientError)

    @pytest.mark.asyncio
    async def test_timeout_is_transport_error(self, server):
        client = HttpClient()

        with pytest.raises(TransportError) as exc_info:
            await client.get(HttpSpec(uri=str(server.make_url("/slow")), timeout=0.2))
        assert "timed out" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_undecodable_body_is_replaced(self, server):
        client = HttpClient()

        response = await client.post(HttpSpec(uri=str(server.make_url("/report")), method="POST", body={}))

        assert response == {"callbacks": ["\ufffd"]}

    @pytest.mark.asyncio
    async def test_undecodable_monitor_reply_keeps_cycle(self, server):
        enumerator = MagicMock()
        enumerator.enumerate = AsyncMock(return_value=[])
        enumerator.restart = AsyncMock(return_value=(True, ""))
        watcher = ServiceWatcher(enumerator_factory=lambda _: enumerator)
        monitor_host = str(server.make_url("/")).rstrip("/")

        report = await watcher.watch("node", ServiceConfig(instance_type="geth"), monitor_host)

        assert report["serviceName"] == "node"
        enumerator.restart.assert_not_awaited()
