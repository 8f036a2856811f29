"""Tests for environment-driven settings and logging setup."""

import logging
from pathlib import Path

import pytest
import structlog
from pydantic import ValidationError

from slotledger.config import configure_logging, get_settings, reset_settings
from slotledger.config.logging import add_service_fields
from slotledger.config.settings import LedgerSettings, StorageSettings


class TestSettings:
    def test_defaults(self, tmp_path: Path):
        settings = get_settings()

        assert settings.storage.db_path == tmp_path / "data" / "slotledger.db"
        assert settings.storage.data_dir.is_dir()
        assert settings.ledger.movement_no_prefix == "T"
        assert settings.ledger.default_page_size == 20
        assert settings.json_logs is False

    def test_cached_until_reset(self, monkeypatch: pytest.MonkeyPatch):
        first = get_settings()
        monkeypatch.setenv("LEDGER_MOVEMENT_NO_PREFIX", "WH")

        assert get_settings() is first
        reset_settings()
        assert get_settings().ledger.movement_no_prefix == "WH"

    def test_log_level_is_case_insensitive(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert get_settings().log_level == "DEBUG"

    def test_production_logs_json(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        assert get_settings().json_logs is True

    @pytest.mark.parametrize("prefix", ["", "t", "TOOLONG", "T-1"])
    def test_rejects_bad_movement_prefix(self, prefix: str):
        with pytest.raises(ValidationError):
            LedgerSettings(movement_no_prefix=prefix)

    def test_rejects_zero_page_size(self):
        with pytest.raises(ValidationError):
            LedgerSettings(default_page_size=0)

    def test_rejects_db_name_with_directory(self):
        with pytest.raises(ValidationError):
            StorageSettings(db_name="nested/ledger.db")

    def test_rejects_empty_reader_pool(self):
        with pytest.raises(ValidationError):
            StorageSettings(pool_size=0)


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    level, handlers = root.level, root.handlers[:]
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


@pytest.mark.usefixtures("restore_logging")
class TestLogging:
    def test_level_override(self):
        configure_logging("warning")
        assert logging.getLogger().level == logging.WARNING

    def test_service_fields_keep_explicit_values(self):
        event = add_service_fields(None, "info", {"event": "stock_received", "env": "replay"})

        assert event["service"] == "SlotLedger"
        assert event["version"] == get_settings().app_version
        assert event["env"] == "replay"

    def test_aiosqlite_quietened(self):
        configure_logging("DEBUG")
        assert logging.getLogger("aiosqlite").level == logging.WARNING
