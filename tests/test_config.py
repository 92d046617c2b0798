"""Tests for configuration loading."""

import pytest

from spendwise.config import (
    AppSettings,
    LedgerSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestDefaults:
    """Tests for default values."""

    def test_ledger_defaults(self):
        settings = LedgerSettings()
        assert settings.settled_tolerance == 1e-9
        assert settings.recent_expenses_limit == 5
        assert settings.currency_symbol == "$"

    def test_storage_defaults(self, monkeypatch):
        monkeypatch.delenv("SPENDWISE_STORAGE_BACKEND", raising=False)
        monkeypatch.delenv("SPENDWISE_STORAGE_DATA_DIR", raising=False)
        settings = StorageSettings()
        assert settings.backend == "file"
        assert settings.data_dir == ".spendwise"


class TestEnvironment:
    """Tests for environment overrides and validation."""

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("SPENDWISE_LEDGER_RECENT_EXPENSES_LIMIT", "10")
        monkeypatch.setenv("SPENDWISE_STORAGE_BACKEND", "memory")
        settings = get_settings()
        assert settings.ledger.recent_expenses_limit == 10
        assert settings.storage.backend == "memory"

    def test_rejects_unknown_backend(self, monkeypatch):
        monkeypatch.setenv("SPENDWISE_STORAGE_BACKEND", "cloud")
        with pytest.raises(ValueError):
            StorageSettings()

    def test_rejects_non_positive_tolerance(self):
        with pytest.raises(ValueError):
            LedgerSettings(settled_tolerance=0)

    def test_log_level_is_normalized(self):
        assert AppSettings(log_level="debug").log_level == "DEBUG"
        with pytest.raises(ValueError):
            AppSettings(log_level="chatty")

    def test_validate_all_settings_reports_failures(self, monkeypatch):
        monkeypatch.setenv("SPENDWISE_LEDGER_RECENT_EXPENSES_LIMIT", "0")
        results = validate_all_settings()
        assert results["storage"] is True
        assert results["ledger"] is False
        assert "ledger_error" in results
