"""
Service metadata model.

A Service collects type, enum, method and event definitions during a
registration phase and hands the compiler an immutable ServiceMetadata
snapshot. Definitions are frozen pydantic models; the snapshot holds deep
copies behind read-only mappings, so later registrations never leak into a
snapshot that was already taken.

Example::

    from jsonws import Service

    service = Service("1.0", "Render API")
    service.register_enum("Mode", ["A", "B"])
    service.register_method(name="vray.start", returns="async")
    service.register_event("vray.progress", "int")

    snapshot = service.get_metadata_snapshot()
"""

from __future__ import annotations

import copy
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import AlreadyDefinedError, DuplicateValueError, UnknownTypeError
from .namespaces import ancestors, namespace_of

__all__ = [
    "ASYNC",
    "BUILTIN_TYPES",
    "TypeRef",
    "FieldDef",
    "EnumType",
    "StructType",
    "TypeDef",
    "ParamDef",
    "MethodDef",
    "EventDef",
    "ServiceMetadata",
    "Service",
]


ASYNC = "async"
"""Return marker for methods that complete asynchronously without a typed result."""

BUILTIN_TYPES = frozenset({
    "*", "any", "int", "integer", "number", "float", "date", "bool", "boolean",
    "string", "url", "object", "json", "buffer", "binary", "error",
})


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class TypeRef(_Frozen):
    """
    Reference to a builtin or registered type.

    Written as a bare name (``"string"``) or as a one-element list for an
    array (``["string"]``); see :meth:`parse`.
    """

    name: str
    is_array: bool = False

    @classmethod
    def parse(cls, value: TypeRef | str | Sequence[str]) -> TypeRef:
        if isinstance(value, TypeRef):
            return value
        if isinstance(value, str):
            return cls(name=value)
        if isinstance(value, Sequence) and len(value) == 1 and isinstance(value[0], str):
            return cls(name=value[0], is_array=True)
        raise ValueError(f"invalid type reference: {value!r}")

    def __str__(self) -> str:
        return f"{self.name}[]" if self.is_array else self.name


def _coerce_type_ref(value: Any) -> Any:
    if value is None or isinstance(value, (TypeRef, dict)):
        return value
    return TypeRef.parse(value)


class FieldDef(_Frozen):
    """A struct field."""

    type_ref: TypeRef
    required: bool = True
    default: Any = None
    description: str | None = None

    @field_validator("type_ref", mode="before")
    @classmethod
    def coerce_type_ref(cls, value: Any) -> Any:
        return _coerce_type_ref(value)

    @property
    def is_array(self) -> bool:
        return self.type_ref.is_array


class EnumType(_Frozen):
    """Enumeration: label to unique integer."""

    kind: Literal["enum"] = "enum"
    members: dict[str, int]


class StructType(_Frozen):
    """Structured type with named fields."""

    kind: Literal["struct"] = "struct"
    fields: dict[str, FieldDef] = Field(default_factory=dict)


TypeDef = Annotated[Union[EnumType, StructType], Field(discriminator="kind")]


class ParamDef(_Frozen):
    """
    A positional method parameter.

    The parameter is optional exactly when ``default`` was supplied, even if
    the supplied default is ``None``.
    """

    name: str
    type_ref: TypeRef = TypeRef(name="any")
    default: Any = None
    description: str | None = None

    @field_validator("type_ref", mode="before")
    @classmethod
    def coerce_type_ref(cls, value: Any) -> Any:
        return _coerce_type_ref(value)

    @property
    def optional(self) -> bool:
        return "default" in self.model_fields_set


class MethodDef(_Frozen):
    """A remote method, addressed by its fully-qualified dotted name."""

    name: str
    params: tuple[ParamDef, ...] = ()
    returns: TypeRef | None = None
    description: str | None = None

    @field_validator("returns", mode="before")
    @classmethod
    def coerce_returns(cls, value: Any) -> Any:
        return _coerce_type_ref(value)

    @field_validator("params", mode="before")
    @classmethod
    def coerce_params(cls, value: Any) -> Any:
        if value is None:
            return ()
        return tuple(ParamDef(name=p) if isinstance(p, str) else p for p in value)

    @property
    def namespace(self) -> str:
        return namespace_of(self.name)

    @property
    def is_async(self) -> bool:
        return self.returns is not None and self.returns.name == ASYNC

    @property
    def expects_return(self) -> bool:
        """True when ``returns`` is a concrete type or the ``"async"`` marker."""
        return self.returns is not None


class EventDef(_Frozen):
    """A server-pushed event."""

    name: str
    type_ref: TypeRef | None = None
    description: str | None = None

    @field_validator("type_ref", mode="before")
    @classmethod
    def coerce_type_ref(cls, value: Any) -> Any:
        return _coerce_type_ref(value)

    @property
    def namespace(self) -> str:
        return namespace_of(self.name)


@dataclass(frozen=True)
class ServiceMetadata:
    """
    Read-only snapshot of a Service.

    Mappings iterate in registration order.
    """

    version: str
    friendly_name: str
    types: Mapping[str, TypeDef]
    methods: Mapping[str, MethodDef]
    events: Mapping[str, EventDef]

    @property
    def enums(self) -> dict[str, EnumType]:
        return {name: t for name, t in self.types.items() if isinstance(t, EnumType)}

    @property
    def structs(self) -> dict[str, StructType]:
        return {name: t for name, t in self.types.items() if isinstance(t, StructType)}


class Service:
    """
    Live, mutable metadata model of a JSON-WS service.

    Registration is append-only: every name can be registered once, and every
    type reference must resolve when it is registered.
    """

    def __init__(self, version: str = "1.0", friendly_name: str = "") -> None:
        self.version = version
        self.friendly_name = friendly_name
        self._types: dict[str, TypeDef] = {}
        self._methods: dict[str, MethodDef] = {}
        self._events: dict[str, EventDef] = {}

    def __repr__(self) -> str:
        return (
            f"Service({self.friendly_name!r}, version={self.version!r}, "
            f"types={len(self._types)}, methods={len(self._methods)}, "
            f"events={len(self._events)})"
        )

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_type(
        self, name: str, definition: EnumType | StructType | Mapping[str, Any]
    ) -> EnumType | StructType:
        """
        Register a struct (or enum) type under ``name``.

        ``definition`` may be a model or a mapping such as
        ``{"fields": {"id": {"type_ref": "int"}}}``; a mapping without a
        ``kind`` is a struct.
        """
        self._check_type_name(name)
        if isinstance(definition, Mapping):
            data = dict(definition)
            if data.get("kind", "struct") == "enum":
                return self.register_enum(name, data["members"])
            definition = StructType.model_validate(data)
        if isinstance(definition, EnumType):
            return self.register_enum(name, definition.members)
        for field_name, field_def in definition.fields.items():
            if field_def.type_ref.name != name:
                self._resolve(field_def.type_ref, f"{name}.{field_name}")
        self._types[name] = definition
        return definition

    def register_enum(self, name: str, values: Mapping[str, int] | Sequence[str]) -> EnumType:
        """
        Register an enum from a label->value mapping or an ordered label list.

        Raises:
            AlreadyDefinedError: If ``name`` is taken
            DuplicateValueError: If two labels share a value
        """
        self._check_type_name(name)
        if isinstance(values, Mapping):
            members = dict(values)
        else:
            if isinstance(values, str):
                raise ValueError(f"enum {name!r} values must be a mapping or a list of labels")
            members = {}
            for index, label in enumerate(values):
                if label in members:
                    raise AlreadyDefinedError(f"{name}.{label}", "enum label")
                members[label] = index

        seen: dict[int, str] = {}
        for label, value in members.items():
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"enum {name!r} value for {label!r} must be an integer")
            if value in seen:
                raise DuplicateValueError(name, value, (seen[value], label))
            seen[value] = label

        enum = EnumType(members=members)
        self._types[name] = enum
        return enum

    def register_method(self, definition: MethodDef | None = None, /, **fields: Any) -> MethodDef:
        """
        Register a method.

        Accepts a MethodDef, or its fields as keywords::

            service.register_method(
                name="jobs.submit",
                params=["scene", {"name": "priority", "type_ref": "int", "default": 0}],
                returns="string",
            )

        Raises:
            AlreadyDefinedError: If the fully-qualified name (or an implied
                namespace of the same name) exists
            UnknownTypeError: If a parameter or return type does not resolve
        """
        if definition is None:
            definition = MethodDef.model_validate(fields)
        elif fields:
            raise TypeError("pass either a MethodDef or keyword fields, not both")

        if definition.name in self._methods:
            raise AlreadyDefinedError(definition.name, "method")
        self._check_namespace_clash(definition.name)
        for param in definition.params:
            self._resolve(param.type_ref, definition.name)
        if definition.returns is not None and not definition.is_async:
            self._resolve(definition.returns, definition.name)

        self._methods[definition.name] = definition
        return definition

    def register_event(
        self,
        name: str,
        type_ref: TypeRef | str | Sequence[str] | None = None,
        description: str | None = None,
    ) -> EventDef:
        """Register an event, optionally typed."""
        if name in self._events:
            raise AlreadyDefinedError(name, "event")
        event = EventDef(name=name, type_ref=type_ref, description=description)
        for ancestor in ancestors(name):
            if ancestor in self._methods:
                raise AlreadyDefinedError(ancestor, "method")
        if event.type_ref is not None:
            self._resolve(event.type_ref, name)
        self._events[name] = event
        return event

    def namespace(self, prefix: str) -> NamespaceScope:
        """Return a registrar that prefixes method and event names with ``prefix``."""
        return NamespaceScope(self, prefix)

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def snapshot(self) -> ServiceMetadata:
        """Return a deep, read-only copy for compilation."""
        return ServiceMetadata(
            version=self.version,
            friendly_name=self.friendly_name,
            types=MappingProxyType(copy.deepcopy(self._types)),
            methods=MappingProxyType(copy.deepcopy(self._methods)),
            events=MappingProxyType(copy.deepcopy(self._events)),
        )

    get_metadata_snapshot = snapshot

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _check_type_name(self, name: str) -> None:
        if name in self._types or name in BUILTIN_TYPES:
            raise AlreadyDefinedError(name, "type")

    def _resolve(self, ref: TypeRef, referenced_by: str) -> None:
        if ref.name not in BUILTIN_TYPES and ref.name not in self._types:
            raise UnknownTypeError(ref.name, referenced_by)

    def _implied_namespaces(self) -> Iterator[str]:
        for name in (*self._methods, *self._events):
            yield from ancestors(name)

    def _check_namespace_clash(self, name: str) -> None:
        if name in set(self._implied_namespaces()):
            raise AlreadyDefinedError(name, "namespace")
        for ancestor in ancestors(name):
            if ancestor in self._methods:
                raise AlreadyDefinedError(ancestor, "method")


class NamespaceScope:
    """Registrar view of a Service rooted at a namespace prefix."""

    def __init__(self, service: Service, prefix: str) -> None:
        if not prefix or prefix.startswith(".") or prefix.endswith("."):
            raise ValueError(f"invalid namespace prefix: {prefix!r}")
        self._service = service
        self.prefix = prefix

    def _qualify(self, name: str) -> str:
        return f"{self.prefix}.{name}"

    def register_method(self, definition: MethodDef | None = None, /, **fields: Any) -> MethodDef:
        if definition is not None:
            definition = definition.model_copy(update={"name": self._qualify(definition.name)})
            return self._service.register_method(definition, **fields)
        fields["name"] = self._qualify(fields["name"])
        return self._service.register_method(**fields)

    def register_event(
        self,
        name: str,
        type_ref: TypeRef | str | Sequence[str] | None = None,
        description: str | None = None,
    ) -> EventDef:
        return self._service.register_event(self._qualify(name), type_ref, description)

    def namespace(self, prefix: str) -> NamespaceScope:
        return NamespaceScope(self._service, self._qualify(prefix))

    def __enter__(self) -> NamespaceScope:
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None
