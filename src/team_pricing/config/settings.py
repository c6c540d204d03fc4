"""
Centralized settings and path configuration for team pricing.
Values can be overridden with TEAM_PRICING_* environment variables or a .env file.
"""
import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

PACKAGE_DATA_DIR = Path(__file__).resolve().parent.parent / 'data'


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 4 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── Paths ────────────────────────────────────────────
    project_root: Path = Field(default_factory=get_project_root)
    data_dir: Path = PACKAGE_DATA_DIR

    # ── Logging ──────────────────────────────────────────
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="TEAM_PRICING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def team_items_csv(self) -> Path:
        return self.data_dir / 'team_items.csv'

    @property
    def participants_csv(self) -> Path:
        return self.data_dir / 'team_item_participants.csv'


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings (singleton)."""
    return Settings()


def configure_logging(settings: Optional[Settings] = None):
    """Configure root logging once for the API, UI and scripts."""
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
