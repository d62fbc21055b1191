"""
kv-registry: a local key-value registry stored in a flat text file.

The engine supports five operations (reset, repair, merge, entry, query) over
a file of ``K: <key>`` / ``V: <value>`` line pairs.
"""

__version__ = "1.0.0"

from .engine import EngineState, RegistryEngine, process
from .errors import (
    CorruptRegistryDataError,
    DuplicateKeyError,
    InvalidArgumentError,
    MissingExternalDatabaseError,
    RegistryError,
    RegistryInvariantError,
    RegistryIOError,
)
from .keys import RegistryKey
from .parser import RecordParser, load_file
from .operations import (
    EntryRequest,
    MergeRequest,
    OperationRequest,
    QueryRequest,
    RepairRequest,
    ResetRequest,
    build_request,
    parse_request,
)
from .table import RegistryTable
from .writer import render_table, truncate_file, write_table

__all__ = [
    "CorruptRegistryDataError",
    "DuplicateKeyError",
    "EngineState",
    "EntryRequest",
    "InvalidArgumentError",
    "MergeRequest",
    "MissingExternalDatabaseError",
    "OperationRequest",
    "QueryRequest",
    "RecordParser",
    "RegistryEngine",
    "RegistryError",
    "RegistryInvariantError",
    "RegistryIOError",
    "RegistryKey",
    "RegistryTable",
    "RepairRequest",
    "ResetRequest",
    "build_request",
    "load_file",
    "parse_request",
    "process",
    "render_table",
    "truncate_file",
    "write_table",
]
