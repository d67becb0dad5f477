"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - All settings come from ENDWARE_* environment variables (or .env)
    - get_settings() is cached (lru_cache): single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Settings hold plain values only; the EndwareConfig object (clock, hook,
      projection) is assembled from them at the composition root in main.py
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ENDWARE_", env_file=".env", case_sensitive=False,
    )

    # Observability
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    # Route InternalError diagnostics to the logging tree (library default: no-op)
    log_internal_errors: bool = True


@lru_cache
def get_settings() -> Settings:
    return Settings()
