"""Unit tests for configuration and settings."""
import pytest
from pydantic import ValidationError

from roomboard.config import Settings, get_settings, reset_settings_cache
from roomboard.grid import GridGeometry
from roomboard.store import JsonFileBookingStore, SqlBookingStore, build_store


@pytest.fixture()
def fresh_settings():
    reset_settings_cache()
    yield
    reset_settings_cache()


class TestSettings:
    """Test configuration management."""

    def test_get_settings_returns_same_instance(self):
        """Test that get_settings returns cached instance."""
        assert get_settings() is get_settings()

    def test_reset_settings_cache(self, fresh_settings):
        """Test that cache can be reset."""
        settings1 = get_settings()
        reset_settings_cache()
        settings2 = get_settings()

        assert settings1 is not settings2

    def test_grid_defaults(self):
        """Test the calendar grid defaults."""
        settings = Settings()

        assert settings.start_hour == 7
        assert settings.end_hour == 22
        assert settings.slot_minutes == 30
        assert settings.slot_height_px == 28
        assert settings.snap_minutes == 15

    def test_environment_overrides(self, monkeypatch, fresh_settings):
        """Test values are read from the environment."""
        monkeypatch.setenv("SLOT_HEIGHT_PX", "40")
        monkeypatch.setenv("STORAGE_BACKEND", "sql")

        settings = get_settings()

        assert settings.slot_height_px == 40
        assert settings.storage_backend == "sql"
        assert GridGeometry.from_settings(settings).slot_height_px == 40

    def test_invalid_values_rejected(self, monkeypatch):
        """Test out-of-range hours and unknown backends fail fast."""
        monkeypatch.setenv("END_HOUR", "30")
        with pytest.raises(ValidationError):
            Settings()

        monkeypatch.delenv("END_HOUR")
        monkeypatch.setenv("STORAGE_BACKEND", "redis")
        with pytest.raises(ValidationError):
            Settings()

    def test_cors_origins_configuration(self):
        """Test CORS origins configuration."""
        settings = Settings()

        assert isinstance(settings.cors_origins, list)
        assert len(settings.cors_origins) > 0


class TestBuildStore:
    """Test store selection from settings."""

    def test_json_backend(self, tmp_path):
        store = build_store(Settings(data_file=tmp_path / "data.json"))

        assert isinstance(store, JsonFileBookingStore)
        assert store.path == tmp_path / "data.json"

    def test_sql_backend(self, tmp_path):
        settings = Settings(storage_backend="sql", database_url=f"sqlite:///{tmp_path / 'bookings.db'}")

        assert isinstance(build_store(settings), SqlBookingStore)
