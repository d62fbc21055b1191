from pathlib import Path

import pytest
from pydantic import ValidationError

from kv_registry.errors import InvalidArgumentError
from kv_registry.keys import RegistryKey
from kv_registry.operations import (
    EntryRequest,
    MergeRequest,
    QueryRequest,
    RepairRequest,
    ResetRequest,
    build_request,
    parse_request,
)


class TestBuildRequest:
    @pytest.mark.parametrize(
        "mode, extra, expected",
        [
            ("reset", {}, ResetRequest),
            ("repair", {}, RepairRequest),
            ("merge", {"source_file": "other.db"}, MergeRequest),
            ("entry", {"key": "k", "value": "v"}, EntryRequest),
            ("query", {"key": "k"}, QueryRequest),
        ],
    )
    def test_mode_selects_variant(self, mode, extra, expected):
        request = build_request(mode, db_file="reg.db", **extra)

        assert isinstance(request, expected)
        assert request.mode == mode
        assert request.db_file == Path("reg.db")
        assert request.external_db is False

    def test_entry_fields_trimmed(self):
        request = build_request("entry", db_file="reg.db", key="  Colour ", value=" blue  ")

        assert request.key == "Colour"
        assert request.value == "blue"
        assert request.force is False
        assert request.registry_key == RegistryKey("colour")

    @pytest.mark.parametrize("bad", ["", "   ", "-x", "x\ny", "a\rb"])
    def test_invalid_entry_fields_rejected(self, bad):
        with pytest.raises(InvalidArgumentError):
            build_request("entry", db_file="reg.db", key=bad, value="v")
        with pytest.raises(InvalidArgumentError):
            build_request("entry", db_file="reg.db", key="k", value=bad)

    @pytest.mark.parametrize("bad", ["", "  ", "-q", "a\nb"])
    def test_invalid_query_key_rejected(self, bad):
        with pytest.raises(InvalidArgumentError):
            build_request("query", db_file="reg.db", key=bad)

    def test_unknown_mode_rejected(self):
        with pytest.raises(InvalidArgumentError):
            build_request("backup", db_file="reg.db")

    def test_fields_of_other_modes_rejected(self):
        with pytest.raises(InvalidArgumentError):
            build_request("reset", db_file="reg.db", key="k")

    def test_merge_requires_source(self):
        with pytest.raises(InvalidArgumentError):
            build_request("merge", db_file="reg.db")

    @pytest.mark.parametrize("bad", ["", "  ", "-db"])
    def test_invalid_paths_rejected(self, bad):
        with pytest.raises(InvalidArgumentError):
            build_request("repair", db_file=bad)
        with pytest.raises(InvalidArgumentError):
            build_request("merge", db_file="reg.db", source_file=bad)


class TestParseRequest:
    def test_from_mapping(self):
        request = parse_request(
            {"mode": "entry", "db_file": "reg.db", "external_db": True, "key": "k", "value": "v", "force": True}
        )

        assert isinstance(request, EntryRequest)
        assert request.force is True
        assert request.external_db is True

    def test_requests_are_frozen(self):
        request = parse_request({"mode": "query", "db_file": "reg.db", "key": "k"})

        with pytest.raises(ValidationError):
            request.key = "other"
