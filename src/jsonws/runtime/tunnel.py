"""
Tunnel - transport layer behind every generated proxy.

A tunnel turns RpcRequests into JSON-RPC 2.0 messages, correlates responses
by request id and forwards server-pushed ``{name, data}`` notifications.
RpcTunnel is the default implementation: HTTP calls go through httpx, socket
calls and event notifications through a single websocket.
"""

from __future__ import annotations

import asyncio
import itertools
import json
import logging
import ssl as ssl_module
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Protocol

import httpx
from websockets.asyncio.client import ClientConnection, connect as ws_connect
from websockets.exceptions import WebSocketException

from ..config import get_config
from ..errors import RpcError, TransportError

__all__ = [
    "Transport",
    "RpcRequest",
    "Completion",
    "EventHandler",
    "Tunnel",
    "TunnelFactory",
    "RpcTunnel",
]

logger = logging.getLogger(__name__)


class Transport(str, Enum):
    """Outbound channel for a call."""
    HTTP = "http"
    SOCKET = "socket"


@dataclass(frozen=True)
class RpcRequest:
    """A call handed from a proxy stub to its tunnel."""
    method: str
    params: list[Any] = field(default_factory=list)
    expect_return: bool = False
    transport: Transport = Transport.HTTP


Completion = Callable[[BaseException | None, Any], Any]
EventHandler = Callable[[dict[str, Any]], Any]


class Tunnel(Protocol):
    """Interface a proxy needs from its transport."""

    def call(self, request: RpcRequest, callback: Completion | None = None) -> Any:
        """Dispatch ``request``; report the outcome through ``callback(error, result)``."""
        ...

    async def close(self) -> None:
        ...


class TunnelFactory(Protocol):
    def __call__(
        self,
        url: str,
        *,
        ssl: ssl_module.SSLContext | bool | None = None,
        on_event: EventHandler | None = None,
    ) -> Tunnel:
        ...


def _build_ws_url(url: str) -> str:
    """
    Build the websocket URL for a service base URL.

    Args:
        url: Base URL of the service (http, https, ws or wss)

    Returns:
        The same endpoint with an ws:// or wss:// scheme
    """
    if url.startswith("wss://") or url.startswith("ws://"):
        return url
    if url.startswith("https://"):
        return "wss://" + url[len("https://"):]
    if url.startswith("http://"):
        return "ws://" + url[len("http://"):]
    return f"ws://{url}"


def _build_http_url(url: str) -> str:
    if url.startswith("wss://"):
        return "https://" + url[len("wss://"):]
    if url.startswith("ws://"):
        return "http://" + url[len("ws://"):]
    if url.startswith("https://") or url.startswith("http://"):
        return url
    return f"http://{url}"


class RpcTunnel:
    """
    Default tunnel: JSON-RPC 2.0 over HTTP (httpx) and a websocket.

    Calls never raise synchronously; the returned task and the optional
    completion callback carry the result or the error. A failed call leaves
    the tunnel usable: a dropped websocket is reopened by the next socket
    call.

    Example:
        tunnel = RpcTunnel("https://render.example.com/api", on_event=print)
        task = tunnel.call(RpcRequest("vray.start", [], expect_return=True))
        result = await task
        await tunnel.close()
    """

    def __init__(
        self,
        url: str,
        *,
        ssl: ssl_module.SSLContext | bool | None = None,
        on_event: EventHandler | None = None,
        timeout: float | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            url: Base URL of the service
            ssl: SSL context, or a bool toggling certificate verification
            on_event: Receives ``{name, data}`` notifications from the socket
            timeout: Per-call timeout in seconds (default from configuration)
            http_transport: Optional httpx transport, e.g. for testing
        """
        self._http_url = _build_http_url(url)
        self._ws_url = _build_ws_url(url)
        self._ssl = ssl
        self._on_event = on_event
        self._timeout = timeout if timeout is not None else get_config().timeout
        self._http_transport = http_transport
        self._http: httpx.AsyncClient | None = None
        self._ws: ClientConnection | None = None
        self._ws_lock: asyncio.Lock | None = None
        self._receive_task: asyncio.Task[None] | None = None
        self._pending: dict[int, asyncio.Future[Any]] = {}
        self._ids = itertools.count(1)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Calls
    # ------------------------------------------------------------------

    def call(self, request: RpcRequest, callback: Completion | None = None) -> asyncio.Task[Any]:
        """
        Schedule ``request`` on the running event loop.

        Returns:
            A task resolving to the call result (``None`` for calls that
            expect no return)
        """
        task = asyncio.get_running_loop().create_task(self._dispatch(request))
        task.add_done_callback(lambda done: self._complete(request, done, callback))
        return task

    def _complete(
        self,
        request: RpcRequest,
        task: asyncio.Task[Any],
        callback: Completion | None,
    ) -> None:
        if task.cancelled():
            error: BaseException | None = TransportError(f"call {request.method} was cancelled")
            result = None
        else:
            error = task.exception()
            result = None if error else task.result()

        if callback is None:
            if error is not None:
                logger.debug("Call %s failed without a callback: %s", request.method, error)
            return
        try:
            callback(error, result)
        except Exception:
            logger.exception("Completion callback for %s raised", request.method)

    async def _dispatch(self, request: RpcRequest) -> Any:
        if self._closed:
            raise TransportError("tunnel is closed")

        message = {
            "jsonrpc": "2.0",
            "method": request.method,
            "params": list(request.params),
            "id": next(self._ids),
        }
        logger.debug("Dispatching %s over %s (id=%s)", request.method, request.transport.value, message["id"])

        try:
            if request.transport is Transport.SOCKET:
                return await asyncio.wait_for(
                    self._send_socket(message, request.expect_return), self._timeout
                )
            return await asyncio.wait_for(
                self._send_http(message, request.expect_return), self._timeout
            )
        except asyncio.TimeoutError:
            self._pending.pop(message["id"], None)
            raise TransportError(f"RPC call timed out: {request.method}") from None

    async def _send_http(self, message: dict[str, Any], expect_return: bool) -> Any:
        if self._http is None:
            verify = self._ssl if self._ssl is not None else True
            self._http = httpx.AsyncClient(verify=verify, transport=self._http_transport)
        try:
            response = await self._http.post(self._http_url, json=message)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise TransportError(f"HTTP call {message['method']} failed: {e}") from e

        if not expect_return:
            return None
        try:
            body = response.json()
        except ValueError as e:
            raise TransportError(f"invalid JSON-RPC response for {message['method']}") from e
        return self._unwrap(body)

    async def _send_socket(self, message: dict[str, Any], expect_return: bool) -> Any:
        ws = await self._connect()
        future: asyncio.Future[Any] | None = None
        if expect_return:
            future = asyncio.get_running_loop().create_future()
            self._pending[message["id"]] = future
        try:
            await ws.send(json.dumps(message))
        except WebSocketException as e:
            self._pending.pop(message["id"], None)
            raise TransportError(f"socket call {message['method']} failed: {e}") from e
        if future is None:
            return None
        return await future

    @staticmethod
    def _unwrap(body: Any) -> Any:
        if not isinstance(body, dict):
            raise TransportError("invalid JSON-RPC response")
        if body.get("error") is not None:
            raise RpcError.from_response(body["error"])
        return body.get("result")

    # ------------------------------------------------------------------
    # Socket
    # ------------------------------------------------------------------

    async def _connect(self) -> ClientConnection:
        """Open the websocket once; concurrent callers share the attempt."""
        if self._ws_lock is None:
            self._ws_lock = asyncio.Lock()
        async with self._ws_lock:
            if self._ws is not None:
                return self._ws
            options: dict[str, Any] = {}
            if isinstance(self._ssl, ssl_module.SSLContext) and self._ws_url.startswith("wss://"):
                options["ssl"] = self._ssl
            try:
                self._ws = await ws_connect(self._ws_url, **options)
            except (OSError, WebSocketException) as e:
                raise TransportError(f"cannot connect to {self._ws_url}: {e}") from e
            logger.debug("Socket connected to %s", self._ws_url)
            self._receive_task = asyncio.create_task(self._receive_loop(self._ws))
            return self._ws

    async def _receive_loop(self, ws: ClientConnection) -> None:
        """Background task to receive and dispatch messages."""
        error: TransportError | None = None
        try:
            async for message in ws:
                try:
                    self._handle_message(message)
                except Exception:
                    logger.exception("Failed to handle socket message")
        except WebSocketException as e:
            error = TransportError(f"socket closed: {e}")
        finally:
            if self._ws is ws:
                self._ws = None
            logger.debug("Socket to %s disconnected", self._ws_url)
            self._fail_pending(error or TransportError("socket closed"))

    def _handle_message(self, message: str | bytes) -> None:
        """
        Handle one inbound websocket message.

        - ``{"id": n, "result": ...}`` / ``{"id": n, "error": ...}``: response
        - ``{"name": ..., "data": ...}``: event notification
        """
        try:
            msg = json.loads(message)
        except json.JSONDecodeError:
            logger.debug("Ignoring non-JSON socket message")
            return
        if not isinstance(msg, dict):
            return

        msg_id = msg.get("id")
        if isinstance(msg_id, int) and msg_id in self._pending:
            future = self._pending.pop(msg_id)
            if future.done():
                return
            if msg.get("error") is not None:
                future.set_exception(RpcError.from_response(msg["error"]))
            else:
                future.set_result(msg.get("result"))
        elif "name" in msg and self._on_event is not None:
            self._on_event({"name": msg["name"], "data": msg.get("data")})

    def _fail_pending(self, error: BaseException) -> None:
        pending, self._pending = self._pending, {}
        for future in pending.values():
            if not future.done():
                future.set_exception(error)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the HTTP client and the websocket. Safe to call repeatedly."""
        if self._closed:
            return
        self._closed = True

        receive_task, self._receive_task = self._receive_task, None
        ws, self._ws = self._ws, None
        http, self._http = self._http, None
        try:
            if receive_task is not None:
                receive_task.cancel()
                try:
                    await receive_task
                except asyncio.CancelledError:
                    pass
                except Exception:
                    logger.exception("Socket receive loop for %s failed", self._ws_url)
            if ws is not None:
                await ws.close()
        finally:
            if http is not None:
                await http.aclose()
            self._fail_pending(TransportError("tunnel is closed"))
