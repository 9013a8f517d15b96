"""
Python proxy emitter.

The emitted module declares a ProxyBase subclass holding enum codecs and a
namespace tree of MethodStubs; all behaviour lives in ``jsonws.runtime``.
"""

from __future__ import annotations

import keyword

from ..errors import InvalidArgumentError
from ..metadata import EnumType, EventDef, MethodDef
from ..runtime import EnumCodec, ProxyBase
from .base import EmitContext, LanguageDescriptor, literal

__all__ = ["PythonEmitter"]


def _is_identifier(name: str) -> bool:
    return name.isidentifier() and not keyword.iskeyword(name)


def _reserved(name: str, owner: type) -> bool:
    return name.startswith("_") or name in dir(owner)


def _check_names(ctx: EmitContext) -> None:
    """Reject names that would shadow the proxy or codec API."""
    for member in ctx.root_members:
        if _reserved(member, ProxyBase):
            raise InvalidArgumentError(f"{member!r} would shadow ProxyBase.{member}")
    for name, enum in ctx.snapshot.enums.items():
        if _reserved(name, ProxyBase) or name in ctx.root_members:
            raise InvalidArgumentError(f"enum {name!r} clashes with a proxy attribute")
        for label in enum.members:
            if _reserved(label, EnumCodec):
                raise InvalidArgumentError(f"enum {name!r} label {label!r} is reserved by EnumCodec")


def _doc_text(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"""', r'\"\"\"')


def _method_doc(method: MethodDef) -> str | None:
    lines = []
    if method.description:
        lines.append(method.description)
    if method.params:
        if lines:
            lines.append("")
        for param in method.params:
            line = f":param {param.name}: ({param.type_ref})"
            if param.optional:
                line += " optional"
            if param.description:
                line += f" {param.description}"
            lines.append(line)
    if method.returns is not None:
        lines.append(f":returns: {method.returns}")
    return "\n".join(lines) or None


class PythonEmitter(LanguageDescriptor):
    name = "Python"
    file_extension = ".py"

    def begin(self, ctx: EmitContext) -> list[str]:
        if not _is_identifier(ctx.local_name):
            raise InvalidArgumentError(
                f"{ctx.local_name!r} is not a valid Python class name"
            )
        _check_names(ctx)
        return [
            '"""',
            f"Client proxy for {_doc_text(ctx.title)}.",
            "",
            "Generated by jsonws. Do not edit.",
            '"""',
            "",
            "from jsonws.runtime import EnumCodec, MethodStub, NamespaceNode, ProxyBase",
            "",
            "",
            f"class {ctx.local_name}(ProxyBase):",
            f'{self.indent}"""{_doc_text(ctx.title)} proxy."""',
        ]

    def enum(self, ctx: EmitContext, name: str, enum: EnumType) -> list[str]:
        if not _is_identifier(name):
            return []
        return [f"{self.indent}{name} = EnumCodec({literal(name)}, {literal(enum.members)})"]

    def begin_tree(self, ctx: EmitContext) -> list[str]:
        return [f"{self.indent}_tree = NamespaceNode()"]

    def namespace(self, ctx: EmitContext, path: str) -> list[str]:
        return [f"{self.indent}_tree.add_namespace({literal(path)})"]

    def method(self, ctx: EmitContext, method: MethodDef) -> list[str]:
        i2 = self.indent * 2
        params = ", ".join(literal(p.name) for p in method.params)
        if len(method.params) == 1:
            params += ","
        lines = [
            f"{self.indent}_tree.add_method(MethodStub(",
            f"{i2}{literal(method.name)},",
            f"{i2}({params}),",
            f"{i2}expect_return={method.expects_return},",
        ]
        doc = _method_doc(method)
        if doc:
            lines.append(f"{i2}doc={literal(doc)},")
        lines.append(f"{self.indent}))")
        return lines

    def events(self, ctx: EmitContext, events: list[EventDef]) -> list[str]:
        if not events:
            return []
        lines = [f"{self.indent}_declared_events = ("]
        lines.extend(f"{self.indent * 2}{literal(event.name)}," for event in events)
        lines.append(f"{self.indent})")
        return lines

    def end(self, ctx: EmitContext) -> list[str]:
        lines = []
        for name, enum in ctx.snapshot.enums.items():
            if not _is_identifier(name):
                lines.append(
                    f"setattr({ctx.local_name}, {literal(name)}, "
                    f"EnumCodec({literal(name)}, {literal(enum.members)}))"
                )
        if lines:
            lines.insert(0, "")
        return lines
