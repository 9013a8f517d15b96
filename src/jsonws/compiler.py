"""
Proxy compiler.

Turns a ServiceMetadata snapshot into the source text of a client proxy for
a target language. Compilation is a pure function of its inputs: the same
snapshot, language and local name always produce byte-identical text.

Example::

    from jsonws import Service, get_language_proxy

    service = Service("1.0", "Render API")
    service.register_enum("Mode", {"A": 0, "B": 1})
    service.register_method(name="vray.start", returns="async")

    source = get_language_proxy(service, "Python", "Tester")
"""

from __future__ import annotations

import logging
from typing import Protocol

from .config import get_config
from .emitters import JavaScriptEmitter, PythonEmitter
from .emitters.base import EmitContext, LanguageDescriptor
from .errors import UnsupportedLanguageError
from .metadata import ServiceMetadata
from .namespaces import namespace_paths

__all__ = [
    "MetadataSource",
    "register_emitter",
    "get_emitter",
    "available_languages",
    "compile_proxy",
    "get_language_proxy",
]

logger = logging.getLogger(__name__)

_emitters: dict[str, LanguageDescriptor] = {}


class MetadataSource(Protocol):
    """Anything that can hand out a metadata snapshot, e.g. a Service."""

    def get_metadata_snapshot(self) -> ServiceMetadata:
        ...


def register_emitter(descriptor: LanguageDescriptor) -> LanguageDescriptor:
    """
    Register (or replace) the emitter for ``descriptor.name``.

    Language names are matched case-insensitively.
    """
    if not descriptor.name:
        raise ValueError("emitter must have a language name")
    _emitters[descriptor.name.lower()] = descriptor
    return descriptor


def get_emitter(language: str) -> LanguageDescriptor:
    """
    Look up the emitter for ``language``.

    Raises:
        UnsupportedLanguageError: If no emitter is registered
    """
    try:
        return _emitters[language.lower()]
    except (KeyError, AttributeError):
        raise UnsupportedLanguageError(str(language), available_languages()) from None


def available_languages() -> tuple[str, ...]:
    """Names of all registered target languages, sorted."""
    return tuple(sorted(descriptor.name for descriptor in _emitters.values()))


def _root_members(snapshot: ServiceMetadata, namespaces: list[str]) -> tuple[str, ...]:
    members: dict[str, None] = {}
    for path in namespaces:
        if "." not in path:
            members.setdefault(path, None)
    for name in snapshot.methods:
        if "." not in name:
            members.setdefault(name, None)
    return tuple(members)


def compile_proxy(
    snapshot: ServiceMetadata,
    language: str,
    local_name: str = "Proxy",
) -> str:
    """
    Render the proxy source for ``snapshot``.

    Sections come out in a fixed order: preamble, enum codecs, namespace
    containers (parents before children), method stubs, events, epilogue.
    Enums, methods and events keep registration order.

    Args:
        snapshot: Frozen service metadata
        language: Target language, e.g. "Python" or "JavaScript"
        local_name: Name of the generated proxy class

    Returns:
        The generated source text

    Raises:
        UnsupportedLanguageError: If no emitter exists for ``language``
        InvalidArgumentError: If the emitter rejects ``local_name``
    """
    emitter = get_emitter(language)
    logger.debug("Compiling %s proxy %s", emitter.name, local_name)

    namespaces = namespace_paths([*snapshot.methods, *snapshot.events])
    ctx = EmitContext(
        snapshot=snapshot,
        local_name=local_name,
        namespaces=tuple(namespaces),
        root_members=_root_members(snapshot, namespaces),
    )

    def items(chunks: list[list[str]]) -> list[str]:
        lines: list[str] = []
        for chunk in chunks:
            if not chunk:
                continue
            if lines and emitter.separate_items:
                lines.append("")
            lines.extend(chunk)
        return lines

    sections = [
        emitter.begin(ctx),
        items([emitter.enum(ctx, name, enum) for name, enum in snapshot.enums.items()]),
        emitter.begin_tree(ctx) + [line for path in namespaces for line in emitter.namespace(ctx, path)],
        items([emitter.method(ctx, method) for method in snapshot.methods.values()]),
        emitter.events(ctx, list(snapshot.events.values())),
        emitter.end(ctx),
    ]

    out: list[str] = []
    for section in sections:
        if not section:
            continue
        if out:
            out.append("")
        out.extend(section)
    source = "\n".join(out) + "\n"
    logger.debug("Compiled %s proxy %s (%d lines)", emitter.name, local_name, len(out))
    return source


def get_language_proxy(
    service_instance: MetadataSource,
    language: str,
    local_name: str | None = None,
) -> str:
    """
    Return a language proxy for a service instance.

    Args:
        service_instance: Object exposing ``get_metadata_snapshot()``
        language: Target language, e.g. "JavaScript" or "Python"
        local_name: Name of the proxy class (default from configuration,
            normally "Proxy")

    Raises:
        UnsupportedLanguageError: If no emitter exists for ``language``
    """
    emitter = get_emitter(language)
    return compile_proxy(
        service_instance.get_metadata_snapshot(),
        emitter.name,
        local_name or get_config().local_name,
    )


register_emitter(JavaScriptEmitter())
register_emitter(PythonEmitter())
