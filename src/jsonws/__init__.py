"""
jsonws - JSON-WS service metadata and client proxy generator.

This package provides:
- A registration-phase metadata model for JSON-WS services
- A proxy compiler with pluggable per-language emitters
- JavaScript and Python proxy emitters
- The runtime that generated Python proxies run on

Example usage:
    from jsonws import Service, get_language_proxy

    service = Service("1.0", "Render API")
    service.register_enum("Mode", ["A", "B"])
    service.register_method(name="vray.start", returns="async")
    service.register_event("vray.progress", "int")

    print(get_language_proxy(service, "JavaScript", "RenderApi"))

A generated Python proxy is used from asyncio code:

    async def main():
        async with RenderApi("https://render.example.com/api") as api:
            api.on("vray.progress", print)
            await api.vray.start()
"""

from __future__ import annotations

__version__ = "0.1.0"

from .compiler import (
    available_languages,
    compile_proxy,
    get_emitter,
    get_language_proxy,
    register_emitter,
)
from .config import ProxyConfig, configure, configure_from_env, get_config
from .emitters import EmitContext, JavaScriptEmitter, LanguageDescriptor, PythonEmitter
from .errors import (
    AlreadyDefinedError,
    DuplicateValueError,
    ErrorCode,
    InvalidArgumentError,
    JsonWsError,
    RpcError,
    TransportError,
    UnknownTypeError,
    UnsupportedLanguageError,
)
from .loader import load_service
from .metadata import (
    ASYNC,
    BUILTIN_TYPES,
    EnumType,
    EventDef,
    FieldDef,
    MethodDef,
    ParamDef,
    Service,
    ServiceMetadata,
    StructType,
    TypeRef,
)
from .runtime import EnumCodec, ProxyBase, RpcTunnel

__all__ = [
    # Metadata
    "Service",
    "ServiceMetadata",
    "TypeRef",
    "FieldDef",
    "EnumType",
    "StructType",
    "ParamDef",
    "MethodDef",
    "EventDef",
    "ASYNC",
    "BUILTIN_TYPES",
    "load_service",
    # Compiler
    "compile_proxy",
    "get_language_proxy",
    "get_emitter",
    "register_emitter",
    "available_languages",
    "LanguageDescriptor",
    "EmitContext",
    "JavaScriptEmitter",
    "PythonEmitter",
    # Runtime
    "ProxyBase",
    "EnumCodec",
    "RpcTunnel",
    # Config
    "ProxyConfig",
    "configure",
    "configure_from_env",
    "get_config",
    # Errors
    "ErrorCode",
    "JsonWsError",
    "AlreadyDefinedError",
    "UnknownTypeError",
    "DuplicateValueError",
    "UnsupportedLanguageError",
    "InvalidArgumentError",
    "TransportError",
    "RpcError",
    # Version
    "__version__",
]
