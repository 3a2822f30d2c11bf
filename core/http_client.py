import asyncio
import json
from typing import Any, Dict

import aiohttp

import config
from .error_handling import RpcError, TransportError
from .models import HttpSpec, RpcSpec

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "service-watch/1.0",
}

def decode_body(text: str) -> Any:
    """Parsed JSON when the body is JSON, otherwise the stripped text."""
    try:
        return json.loads(text)
    except ValueError:
        return text.strip()

class HttpClient:
    """
    Thin aiohttp transport. Every call opens and closes its own session so
    nothing outlives a watch cycle.
    """

    def __init__(self, timeout: float = None):
        self.timeout = timeout or config.HTTP_TIMEOUT_SECONDS

    async def _send(self, method: str, url: str, headers: Dict[str, str] = None,
                    params: Dict[str, Any] = None, body: Any = None, timeout: float = None) -> Any:
        client_timeout = aiohttp.ClientTimeout(total=timeout or self.timeout)
        try:
            async with aiohttp.ClientSession(timeout=client_timeout, headers=DEFAULT_HEADERS) as session:
                async with session.request(
                    method,
                    url,
                    headers=headers or None,
                    params=params or None,
                    json=body,
                ) as response:
                    text = await response.text(errors='replace')
                    if response.status >= 400:
                        raise TransportError(f"{method} {url} returned HTTP {response.status}: {text[:200]}")
                    return decode_body(text)
        except aiohttp.ClientError as e:
            raise TransportError(f"{method} {url} failed: {e}") from e
        except asyncio.TimeoutError as e:
            raise TransportError(f"{method} {url} timed out") from e

    async def request(self, spec: HttpSpec) -> Any:
        return await self._send(spec.method, spec.uri, spec.headers, spec.params, spec.body, spec.timeout)

    async def get(self, spec: HttpSpec) -> Any:
        return await self._send('GET', spec.uri, spec.headers, spec.params, spec.body, spec.timeout)

    async def post(self, spec: HttpSpec) -> Any:
        return await self._send('POST', spec.uri, spec.headers, spec.params, spec.body, spec.timeout)

    async def request_rpc(self, spec: RpcSpec) -> Any:
        """
        JSON-RPC 2.0 call.

        Returns:
            The `result` member of the reply.

        Raises:
            RpcError: the reply carries an `error` member or is not a JSON-RPC object.
            TransportError: the HTTP exchange failed.
        """
        payload = {"jsonrpc": "2.0", "id": 1, "method": spec.method, "params": spec.params}
        reply = await self._send('POST', spec.uri, spec.headers, None, payload, spec.timeout)
        if not isinstance(reply, dict):
            raise RpcError(f"{spec.method} returned a non JSON-RPC reply")
        if reply.get('error') is not None:
            raise RpcError(f"{spec.method} failed: {reply['error']}")
        return reply.get('result')
