"""Configuration and logging setup for the registry CLI."""

from __future__ import annotations

import logging
import sys
import tempfile
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def default_db_file() -> str:
    """Central database shared by every run that does not pass ``--db``."""
    return (Path(tempfile.gettempdir()) / "registry" / "data" / "db").as_posix()


class RegistryConfig(BaseModel):
    """Settings for one CLI invocation."""

    model_config = ConfigDict(validate_assignment=True, extra="ignore", populate_by_name=True)

    db_file: str = Field(default_factory=default_db_file, validation_alias=AliasChoices("db_file", "database"))
    log_level: str = Field(default="WARNING")
    log_file: Optional[str] = Field(default=None)
    interactive: bool = Field(default=True)

    @field_validator("db_file", mode="before")
    @classmethod
    def _normalize_path(cls, value: Any) -> str:
        return Path(value).expanduser().as_posix()

    @field_validator("log_file", mode="before")
    @classmethod
    def _normalize_log_file(cls, value: Any) -> Optional[str]:
        if value is None or value == "":
            return None
        return Path(value).expanduser().as_posix()

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {value}")
        return level


def load_config(config_path: Optional[str]) -> RegistryConfig:
    """Read a YAML config file; falls back to defaults when it is unusable."""
    if not config_path:
        return RegistryConfig()
    try:
        with open(config_path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
        if not isinstance(data, dict):
            raise ValueError("top level must be a mapping")
        return RegistryConfig(**data)
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", config_path)
    except Exception as exc:
        logger.warning("Config load failed (%s); using defaults", exc)
    return RegistryConfig()


def setup_logging(config: RegistryConfig) -> None:
    numeric_level = getattr(logging, config.log_level.upper(), logging.WARNING)
    root = logging.getLogger()
    root.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(console_handler)

    if config.log_file:
        Path(config.log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(config.log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(file_handler)

    root.setLevel(numeric_level)
