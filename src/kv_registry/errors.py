"""Exception hierarchy for the registry engine.

Every fault raised by the core derives from :class:`RegistryError`, so callers
that only care about "the operation failed" can catch a single type while the
CLI maps each subclass to its own exit code.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

PathLike = Union[str, Path]


class RegistryError(Exception):
    """Base exception for registry errors."""


class InvalidArgumentError(RegistryError, ValueError):
    """Raised for malformed or contradictory operation requests."""


class DuplicateKeyError(InvalidArgumentError):
    """Raised when an entry targets an existing key without force."""

    def __init__(self, key: object) -> None:
        self.key = str(key)
        super().__init__(f"Key already present: {self.key}")


class RegistryIOError(RegistryError):
    """Raised when reading, creating or writing a registry file fails."""

    def __init__(self, message: str, path: Optional[PathLike] = None) -> None:
        self.path = Path(path) if path is not None else None
        super().__init__(message)


class MissingExternalDatabaseError(RegistryIOError):
    """Raised when an explicitly supplied database file does not exist."""

    def __init__(self, path: PathLike) -> None:
        super().__init__(f"External database not found: {path}", path)


class CorruptRegistryDataError(RegistryError):
    """Raised when a registry file does not follow the two-line record format."""

    def __init__(self, error_detail: str, corrupt_row: str, file_loaded_from: PathLike) -> None:
        self.error_detail = error_detail
        self.corrupt_row = corrupt_row
        self.file_loaded_from = str(file_loaded_from)
        super().__init__(self._render())

    def _render(self) -> str:
        return (
            f"  File loaded from: {self.file_loaded_from}\n"
            f"  Corrupt row: {self.corrupt_row}\n"
            f"  Error detail: {self.error_detail}\n"
        )


class RegistryInvariantError(RegistryError):
    """Raised for states the engine should never reach."""
