"""
Application configuration using Pydantic Settings.
All environment-specific values are centralized here.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── App ──────────────────────────────────────────────
    app_name: str = "SST Compliance Engine"
    debug: bool = False

    # ── Requirement views ────────────────────────────────
    dedupe_latest_version: bool = False  # "show latest version only" toggle

    # ── Training compliance ──────────────────────────────
    default_certificate_threshold: int = 1  # certificates per worker per year

    # ── Logging ──────────────────────────────────────────
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings (singleton)."""
    return Settings()
