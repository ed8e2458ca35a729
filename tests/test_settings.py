"""
Tests for `settings.py`.
"""

from __future__ import annotations

import pytest

from settings import Settings


def test_defaults_use_memory_store() -> None:
    settings = Settings.from_env({})

    assert settings.use_supabase is False
    assert settings.report_timezone == "UTC"
    assert settings.checkout_conflict_retries == 2
    assert settings.seed_sample_sales is True
    assert settings.gemini_model == "gemini-2.5-flash"
    assert settings.log_level == "INFO"


def test_supabase_requires_both_credentials() -> None:
    assert Settings.from_env({"SUPABASE_URL": "https://x.supabase.co"}).use_supabase is False
    assert Settings.from_env({"SUPABASE_URL": "https://x.supabase.co", "SUPABASE_KEY": "k"}).use_supabase is True


def test_api_key_alias() -> None:
    assert Settings.from_env({"API_KEY": "legacy"}).gemini_api_key == "legacy"
    assert Settings.from_env({"API_KEY": "legacy", "GEMINI_API_KEY": "new"}).gemini_api_key == "new"


def test_parses_values() -> None:
    settings = Settings.from_env(
        {
            "REPORT_TIMEZONE": "America/Chicago",
            "CHECKOUT_CONFLICT_RETRIES": "0",
            "SEED_SAMPLE_SALES": "off",
            "LOG_LEVEL": "debug",
        }
    )

    assert settings.report_tz.key == "America/Chicago"
    assert settings.checkout_conflict_retries == 0
    assert settings.seed_sample_sales is False
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize(
    "env",
    [
        {"REPORT_TIMEZONE": "Mars/Olympus"},
        {"CHECKOUT_CONFLICT_RETRIES": "many"},
        {"CHECKOUT_CONFLICT_RETRIES": "-1"},
        {"SEED_SAMPLE_SALES": "maybe"},
        {"LOG_LEVEL": "verbose"},
    ],
)
def test_invalid_values_raise(env) -> None:
    with pytest.raises(RuntimeError):
        Settings.from_env(env)


def test_invalid_log_level_names_the_variable() -> None:
    with pytest.raises(RuntimeError) as exc:
        Settings.from_env({"LOG_LEVEL": "verbose"})
    assert "LOG_LEVEL" in str(exc.value)
