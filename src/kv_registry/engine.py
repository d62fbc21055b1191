"""Registry engine: carries out one operation request against a registry file.

Each run walks the same stages:

- resolve: make sure the database file exists (the default database is
  created on demand, an external one must already be there);
- load: parse the file into a fresh :class:`RegistryTable` (strict for every
  mode except ``repair``; ``merge`` then imports the source file leniently);
- mutate: apply the mode-specific change (``entry``) or lookup (``query``);
- persist: truncate (``reset``) or rewrite the whole file when the table is
  dirty.

The table is never cached across runs.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Optional

from .errors import MissingExternalDatabaseError, RegistryIOError, RegistryInvariantError
from .parser import load_file
from .operations import (
    EntryRequest,
    MergeRequest,
    OperationRequest,
    QueryRequest,
    RepairRequest,
    ResetRequest,
)
from .table import RegistryTable
from .writer import truncate_file, write_table

logger = logging.getLogger(__name__)


class EngineState(str, Enum):
    UNRESOLVED = "unresolved"
    FILE_RESOLVED = "file_resolved"
    LOADED = "loaded"
    MUTATED = "mutated"
    PERSISTED = "persisted"
    DONE = "done"


def merge_message(count: int) -> str:
    return f"{count} new {'entry' if count == 1 else 'entries'} merged"


class RegistryEngine:
    """Run a single :data:`OperationRequest`."""

    def __init__(self, request: OperationRequest) -> None:
        self.request = request
        self.table = RegistryTable()
        self.state = EngineState.UNRESOLVED
        self.pairs_written: Optional[int] = None

    @property
    def db_file(self) -> Path:
        return self.request.db_file

    def process(self) -> Optional[str]:
        """Execute the request and return the response text, if any."""
        request = self.request
        logger.debug("Requested operation: %s", request.mode)

        created = self._resolve_file()
        self.state = EngineState.FILE_RESOLVED

        response: Optional[str] = None
        if not isinstance(request, ResetRequest):
            if not created:
                self._load_target()
            if isinstance(request, MergeRequest):
                response = self._merge_source(request)
            self.state = EngineState.LOADED

        if isinstance(request, RepairRequest):
            logger.debug("Db audit complete, require file writing: %s", self.table.dirty)
        elif isinstance(request, EntryRequest):
            self._apply_entry(request)
            self.state = EngineState.MUTATED
        elif isinstance(request, QueryRequest):
            response = self.table.get(request.registry_key)
            logger.debug("Query returned value: %s", response is not None)

        if self.table.dirty or isinstance(request, ResetRequest):
            self._persist()
            self.state = EngineState.PERSISTED

        self.state = EngineState.DONE
        return response

    # ------------------------------------------------------------------ #
    # Stages
    # ------------------------------------------------------------------ #
    def _resolve_file(self) -> bool:
        """Ensure the database file exists; returns True if it was just created."""
        db_file = self.db_file
        if db_file.exists():
            return False

        logger.debug("Database file (%s) not found", db_file)
        if self.request.external_db:
            raise MissingExternalDatabaseError(db_file)

        logger.debug("Creating database file (%s)", db_file)
        try:
            db_file.parent.mkdir(parents=True, exist_ok=True)
            db_file.touch(exist_ok=False)
        except OSError as exc:
            raise RegistryIOError(f"While creating database file: {db_file}", db_file) from exc
        return True

    def _load_target(self) -> None:
        strict = not isinstance(self.request, RepairRequest)
        logger.debug("Loading registry database (%s), strict=%s", self.db_file, strict)
        parser = load_file(self.db_file, self.table, raise_on_corruption=strict)
        logger.debug("%d pair(s) loaded, %d row(s) dropped", parser.loaded, len(parser.dropped))

    def _merge_source(self, request: MergeRequest) -> str:
        source = request.source_file
        logger.debug("Loading external source file to merge from (%s)", source)
        merged = load_file(source, self.table, raise_on_corruption=False).loaded
        if merged > 0:
            self.table.mark_dirty()
        else:
            self.table.mark_clean()
        logger.debug(
            "%d new pair(s) loaded, file writing required: %s", merged, self.table.dirty
        )
        return merge_message(merged)

    def _apply_entry(self, request: EntryRequest) -> None:
        logger.debug("Inserting key-value pair in internal map")
        if self.table.put(request.registry_key, request.value, force=request.force):
            self.table.mark_dirty()
        else:
            logger.debug("Same value already present, file writing skipped")

    def _persist(self) -> None:
        request = self.request
        logger.debug("Updating registry database (%s)", self.db_file)
        if isinstance(request, ResetRequest):
            truncate_file(self.db_file)
            self.pairs_written = 0
        elif isinstance(request, (RepairRequest, MergeRequest, EntryRequest)):
            self.pairs_written = write_table(self.table, self.db_file)
        else:
            raise RegistryInvariantError(
                f"Should not get here: persist requested for mode={request.mode}"
            )
        self.table.mark_clean()
        logger.debug("%d pair(s) written in registry database file (%s)", self.pairs_written, self.db_file)


def process(request: OperationRequest) -> Optional[str]:
    """Run ``request`` with a fresh engine."""
    return RegistryEngine(request).process()
