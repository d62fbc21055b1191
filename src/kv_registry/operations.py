"""Operation requests: one frozen model per registry mode.

The ``mode`` literal is the discriminator, so an ``OperationRequest`` is always
exactly one of the five kinds and carries only the fields that kind needs.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any, Literal, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from .errors import InvalidArgumentError
from .fields import clean_field
from .keys import RegistryKey


def _check_path(value: Any, label: str) -> Any:
    if isinstance(value, (str, Path)) and clean_field(str(value)) is None:
        raise ValueError(f"Invalid {label}: {value}")
    return value


class _RequestBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    db_file: Path
    external_db: bool = False

    @field_validator("db_file", mode="before")
    @classmethod
    def _validate_db_file(cls, value: Any) -> Any:
        return _check_path(value, "database file name")


class ResetRequest(_RequestBase):
    """Truncate the database file."""

    mode: Literal["reset"] = "reset"


class RepairRequest(_RequestBase):
    """Drop corrupted rows from the database file."""

    mode: Literal["repair"] = "repair"


class MergeRequest(_RequestBase):
    """Import every valid, new pair from ``source_file``."""

    mode: Literal["merge"] = "merge"
    source_file: Path

    @field_validator("source_file", mode="before")
    @classmethod
    def _validate_source_file(cls, value: Any) -> Any:
        return _check_path(value, "external source database name")


class EntryRequest(_RequestBase):
    """Insert ``key`` -> ``value``; ``force`` replaces an existing value."""

    mode: Literal["entry"] = "entry"
    key: str
    value: str
    force: bool = False

    @field_validator("key", "value")
    @classmethod
    def _validate_fields(cls, value: str, info) -> str:
        cleaned = clean_field(value)
        if cleaned is None:
            raise ValueError(f"Invalid {info.field_name} format: {value!r}")
        return cleaned

    @property
    def registry_key(self) -> RegistryKey:
        return RegistryKey(self.key)


class QueryRequest(_RequestBase):
    """Look up the value stored under ``key``."""

    mode: Literal["query"] = "query"
    key: str

    @field_validator("key")
    @classmethod
    def _validate_key(cls, value: str) -> str:
        cleaned = clean_field(value)
        if cleaned is None:
            raise ValueError(f"Invalid query key format: {value!r}")
        return cleaned

    @property
    def registry_key(self) -> RegistryKey:
        return RegistryKey(self.key)


OperationRequest = Annotated[
    Union[ResetRequest, RepairRequest, MergeRequest, EntryRequest, QueryRequest],
    Field(discriminator="mode"),
]

_REQUEST_ADAPTER: TypeAdapter = TypeAdapter(OperationRequest)


def parse_request(payload: Mapping[str, Any]) -> OperationRequest:
    """Build the request variant named by ``payload["mode"]``."""
    try:
        return _REQUEST_ADAPTER.validate_python(dict(payload))
    except ValidationError as exc:
        details = "; ".join(error["msg"] for error in exc.errors())
        raise InvalidArgumentError(f"Invalid operation request: {details}") from exc


def build_request(mode: str, **fields: Any) -> OperationRequest:
    return parse_request({"mode": mode, **fields})
