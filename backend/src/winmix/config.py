"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env relative to the project root (WinMix/)
_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        env_prefix="WINMIX_",
        extra="ignore",
    )

    # --- Supabase (public schema, matches table) ---
    supabase_url: str = ""
    supabase_key: str = ""
    matches_table: str = "matches"

    # --- Dashboard ---
    default_page_size: int = 50
    analytics_limit: int = 1000

    # --- Local state (saved filters, dashboard layout) ---
    state_dir: Path = Path.home() / ".winmix"

    # --- App ---
    app_env: str = "development"
    log_level: str = "INFO"


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
