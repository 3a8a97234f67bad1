"""Tests for configuration loading."""

import pytest

from family_ledger.config import LedgerSettings, get_settings, validate_all_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "FAMILY_LEDGER_ENFORCE_OWNERSHIP",
        "FAMILY_LEDGER_DENORMALIZE_FAMILY_NAME",
        "FAMILY_LEDGER_STORAGE_BACKEND",
        "GOOGLE_SHEETS_CREDENTIALS_PATH",
        "GOOGLE_SHEETS_SPREADSHEET_ID",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestLedgerSettings:
    """Tests for the main settings section."""

    def test_defaults(self):
        """Test the defaults enforce ownership and keep data in memory."""
        settings = LedgerSettings()
        assert settings.enforce_ownership is True
        assert settings.denormalize_family_name is True
        assert settings.storage_backend == "memory"
        assert settings.uses_google_sheets is False

    def test_environment_overrides(self, monkeypatch):
        """Test flags are read from prefixed environment variables."""
        monkeypatch.setenv("FAMILY_LEDGER_ENFORCE_OWNERSHIP", "false")
        monkeypatch.setenv("FAMILY_LEDGER_STORAGE_BACKEND", "google_sheets")
        settings = LedgerSettings()
        assert settings.enforce_ownership is False
        assert settings.uses_google_sheets is True

    def test_unknown_backend_rejected(self):
        """Test only known storage backends are accepted."""
        with pytest.raises(ValueError):
            LedgerSettings(storage_backend="postgres")


class TestValidateAllSettings:
    """Tests for the startup check."""

    def test_sheets_section_reports_missing_config(self):
        """Test a missing Sheets configuration is reported, not raised."""
        results = validate_all_settings()
        assert results["ledger"] is True
        assert results["google_sheets"] is False
        assert "google_sheets_error" in results

    def test_sheets_section_loads_when_configured(self, monkeypatch, tmp_path):
        """Test the Sheets section loads once its variables are set."""
        credentials = tmp_path / "credentials.json"
        credentials.write_text("{}")
        monkeypatch.setenv("GOOGLE_SHEETS_CREDENTIALS_PATH", str(credentials))
        monkeypatch.setenv("GOOGLE_SHEETS_SPREADSHEET_ID", "sheet-123")

        results = validate_all_settings()

        assert results["google_sheets"] is True
        assert get_settings().google_sheets.families_sheet_name == "Families"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
