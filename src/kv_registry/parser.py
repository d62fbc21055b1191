"""Tolerant parser for the two-line registry record format.

A registry file is a sequence of ``K: <key>`` / ``V: <value>`` line pairs.
The parser walks the lines once with a single pending-key slot. In strict mode
the first structural fault raises :class:`CorruptRegistryDataError`; in lenient
mode the offending row is dropped, logged and scanning carries on. Either way
the destination table is marked dirty so the next persist rewrites the file
without the bad rows.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .errors import CorruptRegistryDataError, RegistryIOError
from .fields import clean_field
from .table import RegistryTable

logger = logging.getLogger(__name__)

KEY_PREFIX = "K: "
VALUE_PREFIX = "V: "


@dataclass(frozen=True)
class DroppedRow:
    """A row discarded during a lenient load."""

    row: str
    reason: str


class RecordParser:
    """Stream registry lines from ``source`` into ``table``."""

    def __init__(self, table: RegistryTable, source: Union[str, Path]) -> None:
        self.table = table
        self.source = Path(source)
        self.dropped: List[DroppedRow] = []
        self.loaded = 0

    def parse(self, lines: Iterable[str], raise_on_corruption: bool) -> int:
        """Insert every valid pair from ``lines`` and return how many were loaded."""
        loaded = 0
        pending_key: Optional[str] = None
        pending_line = ""

        for line in lines:
            fault: Optional[CorruptRegistryDataError] = None

            if not _is_valid_utf8(line):
                fault = self._fault("Invalid character encoding", _printable(line))
            elif line.startswith(KEY_PREFIX):
                if pending_key is None:
                    pending_key = clean_field(line[len(KEY_PREFIX):])
                    pending_line = line
                    if pending_key is None:
                        fault = self._fault("Invalid key format", line)
                else:
                    fault = self._fault("Expecting a VALUE line", line)
            elif line.startswith(VALUE_PREFIX):
                if pending_key is None:
                    fault = self._fault("Expecting a KEY line", line)
                elif pending_key in self.table:
                    fault = self._fault("Duplicate key", pending_line)
                else:
                    value = clean_field(line[len(VALUE_PREFIX):])
                    if value is None:
                        fault = self._fault("Invalid value format", line)
                    else:
                        self.table.put(pending_key, value)
                        pending_key = None
                        loaded += 1
            else:
                fault = self._fault("Invalid line format", line)

            if fault is not None:
                pending_key = None
                self._handle(fault, raise_on_corruption)

        if pending_key is not None:
            fault = self._fault(
                f"Couldn't find corresponding value of key='{pending_key}'", pending_line
            )
            self._handle(fault, raise_on_corruption)

        self.loaded += loaded
        return loaded

    def _fault(self, detail: str, row: str) -> CorruptRegistryDataError:
        return CorruptRegistryDataError(detail, row, self.source)

    def _handle(self, fault: CorruptRegistryDataError, raise_on_corruption: bool) -> None:
        self.table.mark_dirty()
        if raise_on_corruption:
            raise fault
        self.dropped.append(DroppedRow(row=fault.corrupt_row, reason=fault.error_detail))
        logger.warning(
            "Dropping corrupt row from %s: %r (%s)",
            fault.file_loaded_from,
            fault.corrupt_row,
            fault.error_detail,
        )


def _is_valid_utf8(line: str) -> bool:
    try:
        line.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def _printable(line: str) -> str:
    return line.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def read_lines(path: Union[str, Path]) -> List[str]:
    """Read a registry file as a list of lines without terminators.

    Bytes that are not valid UTF-8 are kept as surrogate escapes so the
    parser can report or drop just the lines that carry them.
    """
    file_path = Path(path)
    try:
        with open(file_path, "r", encoding="utf-8", errors="surrogateescape") as handle:
            return [line.rstrip("\n") for line in handle]
    except OSError as exc:
        raise RegistryIOError(f"While loading data from file: {file_path}", file_path) from exc


def load_file(path: Union[str, Path], table: RegistryTable, raise_on_corruption: bool) -> RecordParser:
    """Parse ``path`` into ``table``.

    Returns the parser, whose ``loaded`` and ``dropped`` describe the load.
    """
    parser = RecordParser(table, path)
    parser.parse(read_lines(path), raise_on_corruption)
    return parser
