"""
Tests for configuration validation
"""
import pytest
from pydantic import ValidationError
from academic_calendar.core.config import Settings


def test_prod_settings_rejects_wildcard_origins():
    """Production settings must list explicit origins"""
    settings = Settings(
        DATABASE_URL="postgresql://test",
        APP_ENV="prod",
        ALLOWED_ORIGINS="*"
    )

    with pytest.raises(ValueError, match="ALLOWED_ORIGINS"):
        settings.validate_production()


def test_local_settings_allows_wildcard_origins():
    """Test that local settings allow wildcard origins"""
    settings = Settings(
        DATABASE_URL="postgresql://test",
        APP_ENV="local",
        ALLOWED_ORIGINS="*"
    )

    settings.validate_production()
    assert settings.get_allowed_origins_list() == ["*"]


def test_origins_list_is_split_and_trimmed():
    settings = Settings(
        APP_ENV="prod",
        ALLOWED_ORIGINS="https://a.example.com, https://b.example.com ,"
    )

    settings.validate_production()
    assert settings.get_allowed_origins_list() == ["https://a.example.com", "https://b.example.com"]


def test_invalid_app_env_rejected():
    with pytest.raises(ValidationError):
        Settings(APP_ENV="production")


def test_log_level_is_upper_cased():
    assert Settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"


@pytest.mark.parametrize("month", [0, 13])
def test_fiscal_year_start_month_out_of_range(month):
    with pytest.raises(ValidationError):
        Settings(FISCAL_YEAR_START_MONTH=month)
