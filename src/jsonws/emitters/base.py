"""
LanguageDescriptor - syntax rules for one proxy target language.

The compiler decides what is emitted and in which order; a descriptor only
renders each piece. Hooks return lists of lines without surrounding blank
lines; the compiler separates sections. Hooks must not keep state between
calls, so one descriptor instance can serve concurrent compilations.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from ..metadata import EnumType, EventDef, MethodDef, ServiceMetadata

__all__ = ["EmitContext", "LanguageDescriptor", "literal"]


def literal(value: Any) -> str:
    """Render a JSON-compatible value as a literal valid in Python and JavaScript."""
    return json.dumps(value, ensure_ascii=True)


@dataclass(frozen=True)
class EmitContext:
    """Everything known about one compilation."""

    snapshot: ServiceMetadata
    local_name: str
    namespaces: tuple[str, ...]
    root_members: tuple[str, ...]

    @property
    def title(self) -> str:
        name = self.snapshot.friendly_name or self.local_name
        return f"{name} {self.snapshot.version}".strip()


class LanguageDescriptor:
    """
    Base class for proxy emitters.

    Subclasses set ``name`` and ``file_extension`` and override the hooks;
    the defaults emit nothing.
    """

    name: str = ""
    file_extension: str = ""
    indent: str = "    "
    separate_items: bool = False

    def begin(self, ctx: EmitContext) -> list[str]:
        return []

    def enum(self, ctx: EmitContext, name: str, enum: EnumType) -> list[str]:
        return []

    def begin_tree(self, ctx: EmitContext) -> list[str]:
        return []

    def namespace(self, ctx: EmitContext, path: str) -> list[str]:
        return []

    def method(self, ctx: EmitContext, method: MethodDef) -> list[str]:
        return []

    def events(self, ctx: EmitContext, events: list[EventDef]) -> list[str]:
        return []

    def end(self, ctx: EmitContext) -> list[str]:
        return []

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"
