"""
Unit tests for backend/settings.py
"""

import pytest
from pydantic import ValidationError

from backend.settings import Settings, get_settings


# Environment variables that CI might set which we need to clear for default tests
CI_ENV_VARS = [
    "ENVIRONMENT",
    "SUPABASE_URL",
    "SUPABASE_SERVICE_ROLE_KEY",
    "SUPABASE_ANON_KEY",
    "DEFAULT_MINIMUM_INCREMENT",
    "MAX_SUBSTITUTION_SERIES",
    "SENTRY_DSN",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Clear CI environment variables to test true defaults."""
    for var in CI_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.mark.unit
class TestSettingsDefaults:
    """Test that Settings applies correct defaults."""

    def test_environment_default(self, clean_env):
        """Default environment should be development."""
        settings = Settings(_env_file=None)
        assert settings.environment == "development"

    def test_supabase_fields_default_to_none(self, clean_env):
        """Supabase fields should default to None."""
        settings = Settings(_env_file=None)
        assert settings.supabase_url is None
        assert settings.supabase_service_role_key is None
        assert settings.supabase_anon_key is None

    def test_progression_defaults(self, clean_env):
        """Progression defaults: 2.5 increment, 5 substitution sets."""
        settings = Settings(_env_file=None)
        assert settings.default_minimum_increment == 2.5
        assert settings.max_substitution_series == 5

    def test_sentry_dsn_default_to_none(self, clean_env):
        """Sentry DSN should default to None."""
        settings = Settings(_env_file=None)
        assert settings.sentry_dsn is None


@pytest.mark.unit
class TestSettingsValidation:
    """Test Settings validation behavior."""

    def test_valid_environments_accepted(self):
        """Valid environment values should be accepted."""
        for env in ["development", "staging", "production", "test"]:
            settings = Settings(environment=env)
            assert settings.environment == env

    def test_environment_case_insensitive(self):
        """Environment validation should be case-insensitive."""
        settings = Settings(environment="PRODUCTION")
        assert settings.environment == "production"

    def test_invalid_environment_raises_error(self):
        """Invalid environment should raise ValidationError."""
        with pytest.raises(ValidationError) as exc_info:
            Settings(environment="invalid")
        assert "Invalid environment" in str(exc_info.value)

    @pytest.mark.parametrize("value", [0, -1.25])
    def test_minimum_increment_must_be_positive(self, value):
        """A zero or negative default increment is rejected."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, default_minimum_increment=value)

    def test_substitution_cap_at_least_one(self):
        """The substitution set cap must allow at least one set."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, max_substitution_series=0)


@pytest.mark.unit
class TestSettingsProperties:
    """Test Settings computed properties."""

    def test_supabase_key_prefers_service_role(self, clean_env):
        """supabase_key should prefer service role key over anon key."""
        settings = Settings(
            _env_file=None,
            supabase_service_role_key="service-key",
            supabase_anon_key="anon-key",
        )
        assert settings.supabase_key == "service-key"

    def test_supabase_key_falls_back_to_anon(self, clean_env):
        """supabase_key should fall back to anon key if no service role."""
        settings = Settings(
            _env_file=None,
            supabase_service_role_key=None,
            supabase_anon_key="anon-key",
        )
        assert settings.supabase_key == "anon-key"

    def test_supabase_key_returns_none_if_neither(self, clean_env):
        """supabase_key should return None if no keys set."""
        settings = Settings(_env_file=None)
        assert settings.supabase_key is None


@pytest.mark.unit
class TestGetSettings:
    """Test get_settings() function."""

    def test_get_settings_returns_settings_instance(self):
        """get_settings() should return a Settings instance."""
        get_settings.cache_clear()
        settings = get_settings()
        assert isinstance(settings, Settings)

    def test_get_settings_is_cached(self):
        """get_settings() should return the same cached instance."""
        get_settings.cache_clear()
        settings1 = get_settings()
        settings2 = get_settings()
        assert settings1 is settings2


@pytest.mark.unit
class TestSettingsFromEnv:
    """Test Settings loading from environment variables."""

    def test_settings_loads_from_env(self, monkeypatch):
        """Settings should load values from environment variables."""
        monkeypatch.setenv("ENVIRONMENT", "staging")
        monkeypatch.setenv("SUPABASE_URL", "https://test.supabase.co")
        monkeypatch.setenv("DEFAULT_MINIMUM_INCREMENT", "1.25")
        monkeypatch.setenv("MAX_SUBSTITUTION_SERIES", "6")

        settings = Settings(_env_file=None)

        assert settings.environment == "staging"
        assert settings.supabase_url == "https://test.supabase.co"
        assert settings.default_minimum_increment == 1.25
        assert settings.max_substitution_series == 6
