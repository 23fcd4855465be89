"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    environment: str = _ENVIRONMENT
    log_level: str = "INFO"
    kitchen_timezone: str = "Europe/Berlin"
    haccp_checks_per_day: int = 2
    haccp_baseline_days: int = 7
    haccp_default_range_days: int = 30
    leavening_sqrt_weight: float = 0.5
    cooking_fat_sqrt_weight: float = 0.6
    liquid_sqrt_weight: float = 0.3
    default_pax: str = "city=60,sued=45,ak=80"
    default_pax_fallback: int = 50
    forecast_meals: tuple[str, ...] = ("mittag", "abend")

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_default_pax(raw: str | None) -> dict[str, int]:
    """Parse ``slug=count`` pairs such as ``city=60,sued=45`` from env."""
    if raw is None:
        return {}
    defaults: dict[str, int] = {}
    for chunk in raw.split(","):
        slug, _, value = chunk.partition("=")
        slug = slug.strip()
        value = value.strip()
        if not slug or not value.isdigit():
            continue
        defaults[slug] = int(value)
    return defaults
