"""Test configuration ensuring the src/ package is importable without install."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterable

import pytest


def _ensure_src_on_sys_path() -> None:
    """Insert the src/ directory at the beginning of sys.path."""
    src_root = Path(__file__).resolve().parents[1] / "src"
    src_str = str(src_root)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)


_ensure_src_on_sys_path()


def write_registry(path: Path, lines: Iterable[str]) -> Path:
    """Write ``lines`` as a newline-terminated registry file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
    return path


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Path of a registry database that does not exist yet."""
    return tmp_path / "registry" / "data" / "db"


@pytest.fixture
def external_db(tmp_path: Path) -> Path:
    """An existing, empty registry database file."""
    path = tmp_path / "external.db"
    path.write_text("", encoding="utf-8")
    return path


@pytest.fixture
def make_registry():
    """Factory writing registry lines to a path."""
    return write_registry
