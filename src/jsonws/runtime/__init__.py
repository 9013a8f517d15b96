"""
Runtime support imported by generated Python proxies.
"""

from __future__ import annotations

from .codec import EnumCodec
from .events import EventEmitter
from .proxy import SUBSCRIBE, UNSUBSCRIBE, ProxyBase
from .tree import MethodStub, Namespace, NamespaceNode
from .tunnel import RpcRequest, RpcTunnel, Transport, Tunnel, TunnelFactory

__all__ = [
    "EnumCodec",
    "EventEmitter",
    "MethodStub",
    "Namespace",
    "NamespaceNode",
    "ProxyBase",
    "RpcRequest",
    "RpcTunnel",
    "SUBSCRIBE",
    "Transport",
    "Tunnel",
    "TunnelFactory",
    "UNSUBSCRIBE",
]
