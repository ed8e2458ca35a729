"""
Application settings.

Values come from the process environment, after loading the `.env` file at the
project root (if present).

Environment variables:
- SUPABASE_URL / SUPABASE_KEY: when both are set the Supabase-backed stores are
  used; otherwise data lives in memory and is not persisted.
- GEMINI_API_KEY (or API_KEY): key for the sales insight assistant.
- GEMINI_MODEL: model name for insights (default: gemini-2.5-flash).
- REPORT_TIMEZONE: IANA timezone that defines report day boundaries (default: UTC).
- CHECKOUT_CONFLICT_RETRIES: automatic retries of a checkout after a store
  conflict (default: 2).
- SEED_SAMPLE_SALES: generate sample sales history for the in-memory store
  (default: true).
- LOG_LEVEL: root logging level (default: INFO).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

_ENV_PATH = Path(__file__).parent / ".env"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}
_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _read_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise RuntimeError(f"Invalid value for {name}: {raw!r}. Use true or false.")


def _read_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise RuntimeError(f"Invalid value for {name}: {raw!r}. Expected an integer.") from None
    if value < 0:
        raise RuntimeError(f"Invalid value for {name}: {raw!r}. Must be >= 0.")
    return value


def _read_log_level(env: Mapping[str, str]) -> str:
    value = (env.get("LOG_LEVEL") or "INFO").strip().upper()
    if value not in _LOG_LEVELS:
        raise RuntimeError(
            f"Invalid value for LOG_LEVEL: {env.get('LOG_LEVEL')!r}. Use one of: {', '.join(_LOG_LEVELS)}."
        )
    return value


@dataclass(frozen=True, slots=True)
class Settings:
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash"
    report_timezone: str = "UTC"
    checkout_conflict_retries: int = 2
    seed_sample_sales: bool = True
    log_level: str = "INFO"

    @property
    def use_supabase(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    @property
    def report_tz(self) -> ZoneInfo:
        return ZoneInfo(self.report_timezone)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from an environment mapping (defaults to os.environ).

        Raises:
            RuntimeError: if a variable holds a value that cannot be used.
        """

        if env is None:
            load_dotenv(dotenv_path=_ENV_PATH)
            env = os.environ

        report_timezone = (env.get("REPORT_TIMEZONE") or "UTC").strip()
        try:
            ZoneInfo(report_timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise RuntimeError(
                f"Invalid value for REPORT_TIMEZONE: {report_timezone!r}. "
                "Use an IANA timezone name such as 'UTC' or 'America/Chicago'."
            ) from None

        return cls(
            supabase_url=env.get("SUPABASE_URL") or None,
            supabase_key=env.get("SUPABASE_KEY") or None,
            gemini_api_key=env.get("GEMINI_API_KEY") or env.get("API_KEY") or None,
            gemini_model=env.get("GEMINI_MODEL") or "gemini-2.5-flash",
            report_timezone=report_timezone,
            checkout_conflict_retries=_read_int(env, "CHECKOUT_CONFLICT_RETRIES", 2),
            seed_sample_sales=_read_bool(env, "SEED_SAMPLE_SALES", True),
            log_level=_read_log_level(env),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


__all__ = ["Settings", "get_settings"]
