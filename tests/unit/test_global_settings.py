# tests/unit/test_global_settings.py
"""Tests for the global settings instance."""

from taxi_etl.config.settings import settings, Settings


class TestGlobalSettings:
    """Test the global settings instance."""

    def test_global_settings_exists(self):
        assert settings is not None
        assert hasattr(settings, 'snowflake')
        assert hasattr(settings, 'etl')

    def test_global_settings_is_settings_instance(self):
        assert isinstance(settings, Settings)

    def test_global_settings_validate_returns_bool(self):
        assert isinstance(settings.validate(), bool)
