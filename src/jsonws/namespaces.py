"""
Namespace paths implied by dotted method and event names.

Namespaces are never registered; ``"a.b.c"`` implies ``"a"`` and ``"a.b"``.
"""

from __future__ import annotations

from collections.abc import Iterable

__all__ = ["namespace_of", "ancestors", "namespace_paths", "split_name"]


def namespace_of(name: str) -> str:
    """Return the namespace of a dotted name, ``""`` for the root."""
    head, _, _ = name.rpartition(".")
    return head


def split_name(name: str) -> tuple[str, str]:
    """Split a dotted name into ``(namespace, leaf)``."""
    head, _, leaf = name.rpartition(".")
    return head, leaf


def ancestors(name: str) -> list[str]:
    """
    Namespace paths implied by ``name``, shallowest first.

    >>> ancestors("a.b.c")
    ['a', 'a.b']
    """
    parts = name.split(".")[:-1]
    return [".".join(parts[: i + 1]) for i in range(len(parts))]


def namespace_paths(names: Iterable[str]) -> list[str]:
    """
    Distinct namespace paths implied by ``names``, in parent-first order.

    Paths appear in order of first appearance across ``names``, and every
    path comes after its parent, so containers can be attached to an
    already-emitted parent.

    >>> namespace_paths(["x.y.m", "a.n", "x.z.m", "top"])
    ['x', 'x.y', 'a', 'x.z']
    """
    seen: dict[str, None] = {}
    for name in names:
        for path in ancestors(name):
            seen.setdefault(path, None)
    return list(seen)
