from __future__ import annotations

from typing import Optional

from pydantic import AnyUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from sluggable.domain.models import SlugConfig


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SLUGGABLE_",
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=False,
        extra="ignore",
    )

    SEPARATOR: str = "-"
    MAX_LENGTH: Optional[int] = Field(default=None, gt=0)
    UNIQUE: bool = True
    ON_UPDATE: bool = False
    INCLUDE_TRASHED: bool = False
    RESERVED: Optional[list[str]] = None

    # Locales a slug map may carry; anything else is stripped.
    LOCALES: list[str] = Field(default_factory=lambda: ["en"])
    FALLBACK_LOCALE: str = "en"

    SUPABASE_URL: Optional[AnyUrl] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None


settings = Settings()


def build_default_config(source: Settings | None = None) -> SlugConfig:
    """Process-wide default options; per-attribute overrides merge on top."""
    s = source or settings
    return SlugConfig(
        separator=s.SEPARATOR,
        max_length=s.MAX_LENGTH,
        reserved=s.RESERVED,
        unique=s.UNIQUE,
        on_update=s.ON_UPDATE,
        include_trashed=s.INCLUDE_TRASHED,
    )
