"""
Error types for jsonws.

Every error raised by the package extends JsonWsError, so callers can catch
compile-time and runtime failures with a single except clause.

Error Code Ranges:
- 1xxx: Metadata registration errors
- 2xxx: Compilation errors
- 3xxx: Proxy construction errors
- 4xxx: Transport and RPC errors
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any


# ============================================================================
# Error Codes
# ============================================================================


class ErrorCode(IntEnum):
    """Numeric codes attached to every JsonWsError."""

    ALREADY_DEFINED = 1001
    UNKNOWN_TYPE = 1002
    DUPLICATE_VALUE = 1003

    UNSUPPORTED_LANGUAGE = 2001

    INVALID_ARGUMENT = 3001

    TRANSPORT_ERROR = 4001
    RPC_ERROR = 4002


# ============================================================================
# Base Error Class
# ============================================================================


class JsonWsError(Exception):
    """
    Base error class for jsonws.

    Error Hierarchy:
    - JsonWsError (base)
      - AlreadyDefinedError: duplicate type/enum/method/event name
      - UnknownTypeError: unresolved type reference
      - DuplicateValueError: enum integer collision
      - UnsupportedLanguageError: no emitter for the requested target
      - InvalidArgumentError: bad proxy construction or compiler argument
      - TransportError: network or connection failure in a tunnel
      - RpcError: JSON-RPC error response from the service

    Attributes:
        message: Human-readable error message.
        code: Numeric error code.
    """

    code: ErrorCode

    def __init__(self, message: str, code: ErrorCode | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def __str__(self) -> str:
        return f"{self.code.name}({int(self.code)}): {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, code={int(self.code)})"


# ============================================================================
# Metadata Errors
# ============================================================================


class AlreadyDefinedError(JsonWsError):
    """
    Raised when a type, enum, method or event name is registered twice.

    Attributes:
        name: The name that was already taken.
    """

    code = ErrorCode.ALREADY_DEFINED

    def __init__(self, name: str, kind: str = "name") -> None:
        super().__init__(f"{kind} {name!r} is already defined")
        self.name = name


class UnknownTypeError(JsonWsError):
    """
    Raised when a type reference resolves neither to a builtin nor to a
    previously registered type.

    Attributes:
        type_name: The unresolved type name.
        referenced_by: Name of the definition holding the reference.
    """

    code = ErrorCode.UNKNOWN_TYPE

    def __init__(self, type_name: str, referenced_by: str | None = None) -> None:
        message = f"unknown type {type_name!r}"
        if referenced_by:
            message += f" referenced by {referenced_by!r}"
        super().__init__(message)
        self.type_name = type_name
        self.referenced_by = referenced_by


class DuplicateValueError(JsonWsError):
    """Raised when two labels of one enum share an integer value."""

    code = ErrorCode.DUPLICATE_VALUE

    def __init__(self, enum_name: str, value: int, labels: tuple[str, str]) -> None:
        super().__init__(
            f"enum {enum_name!r} assigns {value} to both {labels[0]!r} and {labels[1]!r}"
        )
        self.enum_name = enum_name
        self.value = value
        self.labels = labels


# ============================================================================
# Compiler Errors
# ============================================================================


class UnsupportedLanguageError(JsonWsError):
    """
    Raised when no emitter is registered for the requested target language.

    Attributes:
        language: The requested language.
        available: Languages that do have an emitter.
    """

    code = ErrorCode.UNSUPPORTED_LANGUAGE

    def __init__(self, language: str, available: tuple[str, ...] = ()) -> None:
        message = f"no proxy emitter for language {language!r}"
        if available:
            message += f" (available: {', '.join(available)})"
        super().__init__(message)
        self.language = language
        self.available = available


# ============================================================================
# Runtime Errors
# ============================================================================


class InvalidArgumentError(JsonWsError, ValueError):
    """Raised synchronously for a missing or invalid argument."""

    code = ErrorCode.INVALID_ARGUMENT


class TransportError(JsonWsError):
    """
    Error raised when a tunnel cannot deliver a call.

    Common causes:
    - Network unreachable or server down
    - Non-2xx HTTP status
    - Websocket closed while the call was pending
    - Per-call timeout exceeded
    - Call issued after the proxy was closed
    """

    code = ErrorCode.TRANSPORT_ERROR


class RpcError(JsonWsError):
    """
    Error response returned by the service for a JSON-RPC call.

    Attributes:
        rpc_code: The JSON-RPC error code, if provided.
        data: Additional error data, if provided.
    """

    code = ErrorCode.RPC_ERROR

    def __init__(
        self,
        message: str,
        rpc_code: int | None = None,
        data: Any = None,
    ) -> None:
        super().__init__(message)
        self.rpc_code = rpc_code
        self.data = data

    @classmethod
    def from_response(cls, error: Any) -> RpcError:
        """Build an RpcError from the ``error`` member of a JSON-RPC response."""
        if isinstance(error, dict):
            return cls(
                str(error.get("message", "RPC error")),
                rpc_code=error.get("code"),
                data=error.get("data"),
            )
        return cls(str(error))
