"""
Build a Service from a declarative YAML or JSON description.

Document layout::

    name: Render API
    version: "1.0"
    enums:
      Mode: [A, B]                 # or {A: 0, B: 1}
    types:
      Job:
        fields:
          id: {type: int}
          tags: {type: [string], required: false}
    methods:
      - name: vray.start
        params:
          - {name: mode, type: Mode, default: 0}
        returns: async
        description: Start rendering.
    events:
      - {name: vray.progress, type: int}

Registration follows document order, so registration errors (duplicate
names, unknown types) surface exactly as they would from code.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .errors import InvalidArgumentError
from .metadata import Service

__all__ = ["load_service", "service_from_mapping"]

logger = logging.getLogger(__name__)

_SUFFIXES = (".yaml", ".yml", ".json")


def _required(raw: Mapping[str, Any], key: str, what: str) -> Any:
    try:
        return raw[key]
    except (KeyError, TypeError):
        raise InvalidArgumentError(f"{what} description needs a {key!r}: {raw!r}") from None


def _param(raw: Any) -> Any:
    if isinstance(raw, str):
        return raw
    if not isinstance(raw, Mapping):
        raise InvalidArgumentError(f"invalid parameter description: {raw!r}")
    param = {"name": _required(raw, "name", "parameter"), "type_ref": raw.get("type", "any")}
    if "default" in raw:
        param["default"] = raw["default"]
    if raw.get("description"):
        param["description"] = raw["description"]
    return param


def _mapping(raw: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise InvalidArgumentError(f"{what} description must be a mapping: {raw!r}")
    return raw


def _field(name: str, raw: Any) -> dict[str, Any]:
    if isinstance(raw, (str, list)):
        return {"type_ref": raw}
    raw = _mapping(raw, f"field {name!r}")
    field = {"type_ref": raw.get("type", "any")}
    for key in ("required", "default", "description"):
        if key in raw:
            field[key] = raw[key]
    return field


def service_from_mapping(document: Mapping[str, Any]) -> Service:
    """
    Build a Service from an already parsed description.

    Raises:
        InvalidArgumentError: If ``document`` is not a mapping
    """
    if not isinstance(document, Mapping):
        raise InvalidArgumentError("service description must be a mapping")

    service = Service(
        version=str(document.get("version", "1.0")),
        friendly_name=str(document.get("name", "")),
    )
    for name, values in _mapping(document.get("enums") or {}, "enums").items():
        service.register_enum(name, values)
    for name, definition in _mapping(document.get("types") or {}, "types").items():
        definition = _mapping(definition or {}, f"type {name!r}")
        fields = _mapping(definition.get("fields") or {}, f"type {name!r} fields")
        service.register_type(name, {"fields": {k: _field(k, v) for k, v in fields.items()}})
    for raw in document.get("methods") or ():
        raw = _mapping(raw, "method")
        method: dict[str, Any] = {
            "name": _required(raw, "name", "method"),
            "params": [_param(p) for p in raw.get("params") or ()],
        }
        if raw.get("returns") is not None:
            method["returns"] = raw["returns"]
        if raw.get("description"):
            method["description"] = raw["description"]
        service.register_method(**method)
    for raw in document.get("events") or ():
        if isinstance(raw, str):
            service.register_event(raw)
        else:
            raw = _mapping(raw, "event")
            service.register_event(_required(raw, "name", "event"), raw.get("type"), raw.get("description"))
    return service


def load_service(source: str | Path | Mapping[str, Any]) -> Service:
    """
    Load a Service from a mapping or from a .yaml/.yml/.json file.

    Raises:
        InvalidArgumentError: If the file type is unsupported or the
            document is not a mapping
    """
    if isinstance(source, Mapping):
        return service_from_mapping(source)

    path = Path(source)
    if path.suffix.lower() not in _SUFFIXES:
        raise InvalidArgumentError(
            f"unsupported description file {path.name!r} (expected {', '.join(_SUFFIXES)})"
        )
    logger.debug("Loading service description from %s", path)
    with open(path, encoding="utf-8") as f:
        try:
            document = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise InvalidArgumentError(f"cannot parse {path.name}: {e}") from e
    return service_from_mapping(document)
