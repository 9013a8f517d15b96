"""
ProxyBase - base class of every generated Python proxy.

Generated classes only declare data: enum codecs and a class-level
namespace tree of MethodStubs. ProxyBase turns that into a working client:
it owns the tunnel, binds the tree to the instance, chooses the default
transport and manages event subscriptions.
"""

from __future__ import annotations

import asyncio
import logging
import ssl as ssl_module
from types import TracebackType
from typing import Any, ClassVar

from ..errors import InvalidArgumentError
from .events import EventEmitter
from .tree import MethodStub, NamespaceNode
from .tunnel import RpcRequest, RpcTunnel, Transport, Tunnel, TunnelFactory

__all__ = ["ProxyBase", "SUBSCRIBE", "UNSUBSCRIBE"]

logger = logging.getLogger(__name__)

SUBSCRIBE = "rpc.on"
UNSUBSCRIBE = "rpc.off"


class ProxyBase(EventEmitter):
    """
    Runtime behaviour shared by generated proxies.

    Example:
        proxy = RenderApi("https://render.example.com/api")
        proxy.vray.start(lambda error, result: print(error, result))

        proxy.on("vray.progress", print)      # subscribes over the socket
        proxy.use_socket().jobs.list()

        await proxy.close()
    """

    _tree: ClassVar[NamespaceNode] = NamespaceNode()
    _declared_events: ClassVar[tuple[str, ...]] = ()

    def __init__(
        self,
        url: str,
        *,
        ssl: ssl_module.SSLContext | bool | None = None,
        tunnel_factory: TunnelFactory | None = None,
    ) -> None:
        """
        Args:
            url: Base URL of the service
            ssl: Transport security settings handed to the tunnel
            tunnel_factory: Builds the tunnel (default: RpcTunnel)

        Raises:
            InvalidArgumentError: If ``url`` is not a non-empty string
        """
        if not isinstance(url, str) or not url.strip():
            raise InvalidArgumentError("a non-empty base URL string is required")
        super().__init__()
        self._url = url
        self._transport = Transport.HTTP
        self._closed = False
        factory = tunnel_factory or RpcTunnel
        self._tunnel: Tunnel = factory(url, ssl=ssl, on_event=self._handle_notification)
        type(self)._tree.bind_to(self)

    @property
    def url(self) -> str:
        return self._url

    @property
    def transport(self) -> Transport:
        """Default transport for method calls."""
        return self._transport

    @property
    def declared_events(self) -> tuple[str, ...]:
        """Event names described by the service metadata."""
        return self._declared_events

    @property
    def closed(self) -> bool:
        return self._closed

    def use_http(self) -> ProxyBase:
        """Send subsequent calls over HTTP."""
        self._transport = Transport.HTTP
        return self

    def use_socket(self) -> ProxyBase:
        """Send subsequent calls over the websocket."""
        self._transport = Transport.SOCKET
        return self

    def _invoke(self, stub: MethodStub, args: tuple[Any, ...]) -> Any:
        positional = list(args)
        callback = None
        if positional and callable(positional[-1]):
            callback = positional.pop()
        del positional[len(stub.params):]
        request = RpcRequest(
            method=stub.name,
            params=positional,
            expect_return=stub.expect_return,
            transport=self._transport,
        )
        return self._tunnel.call(request, callback)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def _first_listener_added(self, name: str) -> None:
        self._tunnel.call(RpcRequest(SUBSCRIBE, [name], transport=Transport.SOCKET))

    def _last_listener_removed(self, name: str) -> None:
        self._tunnel.call(RpcRequest(UNSUBSCRIBE, [name], transport=Transport.SOCKET))

    def _handle_notification(self, message: dict[str, Any]) -> None:
        """Queue a ``{name, data}`` notification for delivery to listeners."""
        name = message.get("name")
        if not isinstance(name, str):
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._deliver(name, message.get("data"))
        else:
            loop.call_soon(self._deliver, name, message.get("data"))

    def _deliver(self, name: str, data: Any) -> None:
        try:
            self.emit(name, data)
        except Exception:
            logger.exception("Listener for event %s raised", name)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Release the tunnel. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        await self._tunnel.close()

    async def __aenter__(self) -> ProxyBase:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._url!r}, transport={self._transport.value})"
