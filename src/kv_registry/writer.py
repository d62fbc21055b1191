"""Canonical serialization of a registry table."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Union

from .errors import RegistryIOError
from .parser import KEY_PREFIX, VALUE_PREFIX
from .table import RegistryTable

logger = logging.getLogger(__name__)


def render_table(table: RegistryTable) -> str:
    """Return the file content for ``table``: two lines per pair, key first."""
    return "".join(
        f"{KEY_PREFIX}{key}\n{VALUE_PREFIX}{value}\n" for key, value in table.entries()
    )


def write_table(table: RegistryTable, path: Union[str, Path]) -> int:
    """Replace the content of ``path`` with ``table``; returns pairs written.

    The file is opened in truncate mode, so a failure part-way leaves a
    truncated file rather than a mix of old and new records.
    """
    file_path = Path(path)
    payload = render_table(table)
    try:
        with open(file_path, "w", encoding="utf-8", newline="\n") as handle:
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
    except OSError as exc:
        raise RegistryIOError(
            f"While writing to registry database file ({file_path})", file_path
        ) from exc
    logger.debug("Wrote %d pair(s) to %s", len(table), file_path)
    return len(table)


def truncate_file(path: Union[str, Path]) -> None:
    """Truncate ``path`` to zero bytes."""
    file_path = Path(path)
    try:
        with open(file_path, "r+b") as handle:
            handle.truncate(0)
    except OSError as exc:
        raise RegistryIOError(
            f"While writing to registry database file ({file_path})", file_path
        ) from exc
    logger.debug("Truncated %s", file_path)
