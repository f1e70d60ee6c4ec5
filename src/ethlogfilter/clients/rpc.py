"""Lightweight JSON-RPC client for Ethereum-compatible nodes.

This module provides:
- `RPC`: an async client speaking JSON-RPC over http(s) (httpx) or ws(s)
  (websockets), with sane timeouts
- `dial`: build an `RPC` for a node URL, picking the transport from its scheme

It returns `LogRecord` records ready for filtering and serialization.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any
from urllib.parse import urlparse

import httpx
import websockets
from websockets.exceptions import WebSocketException

from ethlogfilter.core.errors import ClientDialError, FetchError, MissingNodeURL
from ethlogfilter.core.models import LogRecord
from ethlogfilter.core.query import FilterQuery

DEFAULT_TIMEOUT_S = 20

HTTP_SCHEMES = ("http", "https")
WS_SCHEMES = ("ws", "wss")


class _HTTPTransport:
    def __init__(self, url: str, timeout_s: int) -> None:
        self.url = url
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(
                connect=timeout_s,
                read=timeout_s,
                write=timeout_s,
                pool=max(30, timeout_s * 3),
            ),
        )

    async def send(self, payload: dict[str, Any]) -> Any:
        r = await self.client.post(self.url, json=payload)
        r.raise_for_status()
        return r.json()

    async def aclose(self) -> None:
        await self.client.aclose()


class _WSTransport:
    def __init__(self, url: str, timeout_s: int) -> None:
        self.url = url
        self.timeout_s = timeout_s
        self.conn: Any = None

    async def connect(self) -> None:
        self.conn = await websockets.connect(self.url, open_timeout=self.timeout_s)

    async def send(self, payload: dict[str, Any]) -> Any:
        if self.conn is None:
            await self.connect()
        await self.conn.send(json.dumps(payload))
        raw = await asyncio.wait_for(self.conn.recv(), timeout=self.timeout_s)
        return json.loads(raw)

    async def aclose(self) -> None:
        if self.conn is not None:
            await self.conn.close()
            self.conn = None


class RPC:
    """Minimal async JSON-RPC client.

    Parameters
    ----------
    url : str
        Node endpoint URL (http, https, ws or wss).
    timeout_s : int
        Per-operation timeout in seconds.
    """

    def __init__(self, url: str, *, timeout_s: int = DEFAULT_TIMEOUT_S) -> None:
        scheme = urlparse(url).scheme.lower()
        self.url = url
        self.scheme = scheme
        if scheme in HTTP_SCHEMES:
            self.transport: _HTTPTransport | _WSTransport = _HTTPTransport(url, timeout_s)
        elif scheme in WS_SCHEMES:
            self.transport = _WSTransport(url, timeout_s)
        else:
            raise ClientDialError(
                f"new client failed: unsupported scheme {scheme!r} in {url!r} "
                f"(supported: {', '.join(HTTP_SCHEMES + WS_SCHEMES)})"
            )
        self._next_id = 1

    async def call(self, method: str, params: list[Any]) -> Any:
        """Send one request and return its `result` member."""
        payload = {"jsonrpc": "2.0", "id": self._next_id, "method": method, "params": params}
        self._next_id += 1
        try:
            data = await self.transport.send(payload)
        except (httpx.HTTPError, WebSocketException, OSError, asyncio.TimeoutError) as e:
            raise FetchError(f"failed to filterLogs: {type(e).__name__}: {e}") from e
        except ValueError as e:
            raise FetchError(f"failed to filterLogs: invalid JSON response: {e}") from e

        if not isinstance(data, dict):
            raise FetchError(f"failed to filterLogs: unexpected response {data!r}")
        if "error" in data:
            err = data["error"]
            if isinstance(err, dict):
                raise FetchError(f"failed to filterLogs: RPC error {err.get('code')}: {err.get('message')}")
            raise FetchError(f"failed to filterLogs: RPC error: {err}")
        return data.get("result")

    async def filter_logs(self, query: FilterQuery) -> list[LogRecord]:
        """Run eth_getLogs for `query` and decode the result."""
        result = await self.call("eth_getLogs", [query.to_params()])
        if result is None:
            return []
        if not isinstance(result, list):
            raise FetchError(f"failed to filterLogs: result is not a list: {result!r}")
        try:
            return [LogRecord.from_rpc(raw) for raw in result]
        except ValueError as e:
            raise FetchError(f"failed to filterLogs: {e}") from e

    async def aclose(self) -> None:
        """Close the underlying transport."""
        await self.transport.aclose()


async def dial(url: str, *, timeout_s: int = DEFAULT_TIMEOUT_S) -> RPC:
    """Return a connected client for `url`.

    Websocket endpoints are connected eagerly so a bad endpoint fails here
    rather than at query time.
    """
    if not url:
        raise MissingNodeURL("no node URL: pass --node-url or set node_url in the config file")
    rpc = RPC(url, timeout_s=timeout_s)
    if rpc.scheme in WS_SCHEMES:
        try:
            await rpc.transport.connect()
        except (WebSocketException, OSError, asyncio.TimeoutError) as e:
            raise ClientDialError(f"new client failed: {type(e).__name__}: {e}") from e
    return rpc
