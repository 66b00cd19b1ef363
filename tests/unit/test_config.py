"""
Unit Tests - Configuration
"""
import pytest
from pydantic import ValidationError

from ticket_analytics.config import AnalyticsSettings
from ticket_analytics.analytics import calculators
from ticket_analytics.config.settings import DEFAULT_TICKET_PRICES, DatabaseSettings, RedisSettings


class TestAnalyticsSettings:
    """Tests for AnalyticsSettings"""

    def test_defaults(self):
        settings = AnalyticsSettings()

        assert settings.collection == "analytics"
        assert settings.ticket_prices == {"Standard": 0, "Premium": 49, "VIP": 99}
        assert settings.retention_days == 90
        assert settings.min_forecast_days == 7

    def test_price_table_shared_with_calculators(self):
        settings = AnalyticsSettings()

        assert calculators.DEFAULT_TICKET_PRICES is DEFAULT_TICKET_PRICES
        assert settings.ticket_prices == DEFAULT_TICKET_PRICES

        settings.ticket_prices["VIP"] = 120
        assert DEFAULT_TICKET_PRICES["VIP"] == 99
        assert AnalyticsSettings().ticket_prices["VIP"] == 99

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("ANALYTICS_RETENTION_DAYS", "30")
        monkeypatch.setenv("ANALYTICS_TICKET_PRICES", '{"Standard": 5, "Gold": 150}')

        settings = AnalyticsSettings()

        assert settings.retention_days == 30
        assert settings.ticket_prices == {"Standard": 5, "Gold": 150}

    def test_invalid_backend(self):
        with pytest.raises(ValidationError):
            AnalyticsSettings(store_backend="mongo")

    def test_backend_normalised(self):
        assert AnalyticsSettings(store_backend="SQL").store_backend == "sql"


class TestConnectionSettings:
    """Tests for database and cache URLs"""

    def test_database_url_built_from_parts(self):
        settings = DatabaseSettings(host="db", port=5433, db="tix", user="svc", password="pw")

        assert settings.async_url == "postgresql+asyncpg://svc:pw@db:5433/tix"

    def test_database_url_override(self):
        settings = DatabaseSettings(url="sqlite+aiosqlite:///local.db")

        assert settings.async_url == "sqlite+aiosqlite:///local.db"

    def test_redis_url_with_password(self):
        settings = RedisSettings(host="cache", password="secret", db=2)

        assert settings.get_url() == "redis://:secret@cache:6379/2"
