"""In-memory registry table."""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .errors import DuplicateKeyError
from .keys import RegistryKey

logger = logging.getLogger(__name__)

KeyLike = Union[str, RegistryKey]


class RegistryTable:
    """Mapping of :class:`RegistryKey` to value plus a dirty flag.

    The dirty flag tracks whether the table differs from the file it was
    loaded from. ``put`` never touches it; the parser and engine decide when
    a change needs to be persisted.
    """

    def __init__(self) -> None:
        self._entries: Dict[RegistryKey, str] = {}
        self._dirty = False

    # ------------------------------------------------------------------ #
    # Lookup
    # ------------------------------------------------------------------ #
    def contains(self, key: KeyLike) -> bool:
        return RegistryKey.of(key) in self._entries

    __contains__ = contains

    def get(self, key: KeyLike) -> Optional[str]:
        return self._entries.get(RegistryKey.of(key))

    def entries(self) -> List[Tuple[RegistryKey, str]]:
        """Return ``(key, value)`` pairs in insertion order."""
        return list(self._entries.items())

    def __iter__(self) -> Iterator[RegistryKey]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    # ------------------------------------------------------------------ #
    # Mutation
    # ------------------------------------------------------------------ #
    def put(self, key: KeyLike, value: str, force: bool = False) -> bool:
        """Store ``value`` under ``key``.

        Returns ``True`` when the stored value changed. Raises
        :class:`DuplicateKeyError` if the key exists and ``force`` is false.
        A forced overwrite keeps the key's original casing.
        """
        registry_key = RegistryKey.of(key)
        current = self._entries.get(registry_key)
        if current is not None:
            if not force:
                raise DuplicateKeyError(registry_key)
            if current == value:
                logger.debug("Same value already present for key %s", registry_key)
                return False
        self._entries[registry_key] = value
        return True

    # ------------------------------------------------------------------ #
    # Dirty tracking
    # ------------------------------------------------------------------ #
    @property
    def dirty(self) -> bool:
        return self._dirty

    def mark_dirty(self) -> None:
        self._dirty = True

    def mark_clean(self) -> None:
        self._dirty = False
