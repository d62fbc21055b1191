"""Case-insensitive registry keys."""

from __future__ import annotations

from typing import Any

from .errors import InvalidArgumentError


class RegistryKey:
    """Immutable key that compares and hashes ignoring case.

    ``str()`` returns the text exactly as it was supplied, so the table keeps
    displaying a key in the case it was first inserted with.
    """

    __slots__ = ("_text", "_folded")

    def __init__(self, text: str) -> None:
        if text is None:
            raise InvalidArgumentError("key value must not be None")
        if not isinstance(text, str):
            raise InvalidArgumentError(f"key value must be a string (received {type(text).__name__})")
        object.__setattr__(self, "_text", text)
        object.__setattr__(self, "_folded", text.lower())

    @classmethod
    def of(cls, key: "str | RegistryKey") -> "RegistryKey":
        return key if isinstance(key, RegistryKey) else cls(key)

    @property
    def text(self) -> str:
        return self._text

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("RegistryKey is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("RegistryKey is immutable")

    def __eq__(self, other: object) -> bool:
        if other is self:
            return True
        if not isinstance(other, RegistryKey):
            return NotImplemented
        return other._folded == self._folded

    def __hash__(self) -> int:
        return hash(self._folded)

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"RegistryKey({self._text!r})"
