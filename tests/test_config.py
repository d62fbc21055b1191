import logging
from contextlib import contextmanager
from pathlib import Path

import pytest
from pydantic import ValidationError

from kv_registry.config import RegistryConfig, default_db_file, load_config, setup_logging


@contextmanager
def preserved_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    try:
        yield root
    finally:
        _restore(root, handlers, level)


def _restore(root, handlers, level):
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestRegistryConfig:
    def test_defaults(self):
        config = RegistryConfig()

        assert config.db_file == default_db_file()
        assert config.db_file.endswith("registry/data/db")
        assert config.log_level == "WARNING"
        assert config.log_file is None
        assert config.interactive is True

    def test_log_level_normalized(self):
        assert RegistryConfig(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError):
            RegistryConfig(log_level="chatty")

    def test_database_alias(self, tmp_path):
        config = RegistryConfig(database=tmp_path / "db")

        assert config.db_file == (tmp_path / "db").as_posix()


class TestLoadConfig:
    def test_none_uses_defaults(self):
        assert load_config(None) == RegistryConfig()

    def test_missing_file_uses_defaults(self, tmp_path, caplog):
        with caplog.at_level("WARNING"):
            config = load_config(str(tmp_path / "missing.yaml"))

        assert config == RegistryConfig()
        assert "not found" in caplog.text

    def test_reads_yaml(self, tmp_path):
        path = tmp_path / "registry.yaml"
        path.write_text(
            f"db_file: {tmp_path / 'db'}\nlog_level: info\ninteractive: false\nunknown: 1\n",
            encoding="utf-8",
        )

        config = load_config(str(path))

        assert config.db_file == (tmp_path / "db").as_posix()
        assert config.log_level == "INFO"
        assert config.interactive is False

    def test_non_mapping_yaml_uses_defaults(self, tmp_path, caplog):
        path = tmp_path / "registry.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")

        with caplog.at_level("WARNING"):
            config = load_config(str(path))

        assert config == RegistryConfig()
        assert "Config load failed" in caplog.text


class TestSetupLogging:
    def test_console_only(self):
        with preserved_root_logger() as root:
            setup_logging(RegistryConfig(log_level="DEBUG"))

            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "registry.log"

        with preserved_root_logger() as root:
            setup_logging(RegistryConfig(log_level="INFO", log_file=str(log_file)))
            logging.getLogger("kv_registry.test").info("hello registry")
            for handler in root.handlers:
                handler.flush()

        assert "hello registry" in Path(log_file).read_text(encoding="utf-8")
