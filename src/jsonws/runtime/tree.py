"""
Namespace tree of a generated proxy class.

The class-level tree is a tagged structure: NamespaceNode containers hold
further NamespaceNodes and MethodStubs. At construction a proxy walks it
once; containers become plain Namespace holders and stubs become methods
bound to the proxy itself, however deep they sit.
"""

from __future__ import annotations

import logging
from types import MethodType
from typing import TYPE_CHECKING, Any, Union

from ..namespaces import split_name

if TYPE_CHECKING:
    from .proxy import ProxyBase

__all__ = ["MethodStub", "NamespaceNode", "Namespace"]

logger = logging.getLogger(__name__)


class MethodStub:
    """
    Callable description of one remote method.

    Invoked with the proxy as first argument, it forwards the positional
    arguments to :meth:`ProxyBase._invoke`.
    """

    def __init__(
        self,
        name: str,
        params: tuple[str, ...] = (),
        *,
        expect_return: bool = False,
        doc: str | None = None,
    ) -> None:
        self.name = name
        self.params = tuple(params)
        self.expect_return = expect_return
        self.__doc__ = doc

    def __call__(self, proxy: ProxyBase, *args: Any) -> Any:
        return proxy._invoke(self, args)

    def bind(self, proxy: ProxyBase) -> MethodType:
        return MethodType(self, proxy)

    def __repr__(self) -> str:
        return f"MethodStub({self.name}({', '.join(self.params)}))"


Node = Union["NamespaceNode", MethodStub]


class NamespaceNode:
    """Container node; the root node stands for the proxy itself."""

    __slots__ = ("path", "children")

    def __init__(self, path: str = "") -> None:
        self.path = path
        self.children: dict[str, Node] = {}

    def _parent_of(self, name: str) -> tuple[NamespaceNode, str]:
        parent_path, leaf = split_name(name)
        node = self
        if parent_path:
            for part in parent_path.split("."):
                child = node.children.get(part)
                if not isinstance(child, NamespaceNode):
                    raise KeyError(f"namespace {parent_path!r} must be added before {name!r}")
                node = child
        if leaf in node.children:
            raise ValueError(f"{name!r} is already defined")
        return node, leaf

    def add_namespace(self, path: str) -> NamespaceNode:
        """Attach the container for ``path``; its parent must already exist."""
        parent, leaf = self._parent_of(path)
        node = NamespaceNode(path)
        parent.children[leaf] = node
        return node

    def add_method(self, stub: MethodStub) -> MethodStub:
        """Attach ``stub`` under its namespace, which must already exist."""
        parent, leaf = self._parent_of(stub.name)
        parent.children[leaf] = stub
        return stub

    def bind(self, proxy: ProxyBase) -> Namespace:
        container = Namespace(self.path)
        for key, child in self.children.items():
            setattr(container, key, child.bind(proxy))
        return container

    def bind_to(self, proxy: ProxyBase) -> None:
        """Install the bound children of this (root) node onto ``proxy``."""
        for key, child in self.children.items():
            if hasattr(type(proxy), key):
                logger.warning("%r shadows %s.%s", key, type(proxy).__name__, key)
            setattr(proxy, key, child.bind(proxy))

    def __repr__(self) -> str:
        return f"NamespaceNode({self.path or '<root>'}, {list(self.children)})"


class Namespace:
    """Plain attribute holder for one namespace of a proxy instance."""

    def __init__(self, path: str) -> None:
        self._path = path

    def __repr__(self) -> str:
        members = ", ".join(k for k in vars(self) if not k.startswith("_"))
        return f"<Namespace {self._path}: {members}>"
