"""
Bidirectional enum accessors for generated proxies.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

__all__ = ["EnumCodec"]


class EnumCodec:
    """
    Label <-> integer accessor for one enum type.

    Calling the codec with a label returns its value, calling it with a value
    returns its label. Every label is also a read-only attribute. The codec
    is frozen once constructed.

    Example:
        Mode = EnumCodec("Mode", {"A": 0, "B": 1})
        Mode("A")   # 0
        Mode(1)     # "B"
        Mode.A      # 0
    """

    __frozen = False

    def __init__(self, name: str, members: Mapping[str, int]) -> None:
        self._enum_name = name
        self._enum_members = MappingProxyType(dict(members))
        self._enum_labels = MappingProxyType({value: label for label, value in members.items()})
        if len(self._enum_labels) != len(self._enum_members):
            raise ValueError(f"enum {name!r} has duplicate values")
        for label, value in members.items():
            if label.startswith("_") or label in dir(type(self)):
                raise ValueError(f"enum {name!r} label {label!r} is reserved by EnumCodec")
            object.__setattr__(self, label, value)
        self.__frozen = True

    def __call__(self, key: str | int) -> int | str:
        if isinstance(key, bool):
            raise TypeError(f"{self._enum_name} expects a label or an integer, got bool")
        if isinstance(key, int):
            try:
                return self._enum_labels[key]
            except KeyError:
                raise ValueError(f"{key} is not a value of enum {self._enum_name}") from None
        if isinstance(key, str):
            try:
                return self._enum_members[key]
            except KeyError:
                raise ValueError(f"{key!r} is not a label of enum {self._enum_name}") from None
        raise TypeError(
            f"{self._enum_name} expects a label or an integer, got {type(key).__name__}"
        )

    def __setattr__(self, name: str, value: Any) -> None:
        if self.__frozen:
            raise AttributeError(f"enum {self._enum_name} is read-only")
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"enum {self._enum_name} is read-only")

    def __contains__(self, key: object) -> bool:
        return key in self._enum_members or key in self._enum_labels

    def __iter__(self) -> Iterator[str]:
        return iter(self._enum_members)

    def __len__(self) -> int:
        return len(self._enum_members)

    def items(self) -> Iterator[tuple[str, int]]:
        """(label, value) pairs in declaration order."""
        return iter(self._enum_members.items())

    def __repr__(self) -> str:
        pairs = ", ".join(f"{label}={value}" for label, value in self._enum_members.items())
        return f"EnumCodec({self._enum_name}: {pairs})"
