"""Tests for logging configuration helpers."""

import logging

import pytest
from storefront.utils.logging import get_environment, get_log_level, setup_stdlib_logging


@pytest.fixture()
def clean_env(monkeypatch):
    for name in ("ENV", "ENVIRONMENT", "PROTEAN_ENV", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture()
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


class TestEnvironment:
    def test_defaults_to_development(self, clean_env):
        assert get_environment() == "development"
        assert get_log_level() == "DEBUG"

    def test_protean_env_is_honoured(self, clean_env):
        clean_env.setenv("PROTEAN_ENV", "TEST")
        assert get_environment() == "test"
        assert get_log_level() == "WARNING"

    def test_env_wins_over_protean_env(self, clean_env):
        clean_env.setenv("PROTEAN_ENV", "test")
        clean_env.setenv("ENV", "production")
        assert get_log_level() == "INFO"

    def test_explicit_log_level(self, clean_env):
        clean_env.setenv("LOG_LEVEL", "ERROR")
        assert get_log_level() == "ERROR"


class TestStdlibLogging:
    def test_writes_rotating_files_under_log_dir(self, clean_env, tmp_path, restore_root_logger):
        clean_env.setenv("ENV", "production")

        setup_stdlib_logging(log_dir=str(tmp_path / "logs"), log_file_prefix="shop")
        logging.getLogger("storefront.test").error("boom")

        assert (tmp_path / "logs" / "shop.log").exists()
        assert (tmp_path / "logs" / "shop_error.log").exists()
        assert logging.getLogger("protean").level == logging.WARNING
        assert logging.getLogger("asyncio").level == logging.WARNING
