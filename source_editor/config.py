"""
Application configuration management.
"""

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from SOURCE_EDITOR_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SOURCE_EDITOR_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Source files
    encoding: str = "utf-8"
    source_roots: List[str] = ["src/main/java", "src/test/java"]

    # Parsing
    allow_syntax_errors: bool = False
    plugin_config_dir: Optional[Path] = None


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
