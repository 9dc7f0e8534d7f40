"""Unit tests for infrastructure settings."""

import pytest
from pydantic import ValidationError

from infrastructure.settings import DatabaseSettings, HusbandrySettings, Settings


class TestDatabaseSettingsPoolConfiguration:
    """Tests for connection pool configuration."""

    def test_default_pool_settings(self):
        """Should have sensible pool defaults."""
        settings = DatabaseSettings()
        assert settings.pool_min_connections >= 1
        assert settings.pool_max_connections >= settings.pool_min_connections
        assert settings.pool_max_connections <= 20

    def test_pool_max_must_be_greater_than_or_equal_to_min(self):
        """Should validate max >= min."""
        with pytest.raises(ValidationError) as exc_info:
            DatabaseSettings(pool_min_connections=10, pool_max_connections=5)

        assert "pool_max_connections" in str(exc_info.value)

    def test_pool_max_equal_to_min_is_valid(self):
        settings = DatabaseSettings(pool_min_connections=5, pool_max_connections=5)
        assert settings.pool_max_connections == 5

    def test_pool_min_must_be_positive(self):
        with pytest.raises(ValidationError):
            DatabaseSettings(pool_min_connections=0)

    def test_pool_max_respects_upper_limit(self):
        with pytest.raises(ValidationError):
            DatabaseSettings(pool_max_connections=101)


class TestDatabaseSettingsEnvironment:
    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("HENHOUSE_DB_HOST", "db.internal")
        monkeypatch.setenv("HENHOUSE_DB_PORT", "6543")
        monkeypatch.setenv("HENHOUSE_DB_PASSWORD", "s3cret")

        settings = DatabaseSettings()

        assert settings.host == "db.internal"
        assert settings.port == 6543
        assert settings.password.get_secret_value() == "s3cret"

    def test_connection_string_omits_password(self, mock_db_settings):
        assert mock_db_settings.connection_string == (
            "postgresql://testuser@testhost:5432/testdb"
        )
        assert "testpass" not in mock_db_settings.connection_string


class TestHusbandrySettings:
    def test_defaults(self):
        settings = HusbandrySettings()
        assert settings.default_search_limit == 20
        assert settings.max_search_limit == 100

    def test_max_must_cover_default(self):
        with pytest.raises(ValidationError):
            HusbandrySettings(default_search_limit=50, max_search_limit=10)

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("HENHOUSE_HUSBANDRY_MAX_SEARCH_LIMIT", "40")

        assert HusbandrySettings().max_search_limit == 40


def test_debug_flag_from_environment(monkeypatch):
    monkeypatch.setenv("HENHOUSE_DEBUG", "true")

    assert Settings().debug is True
