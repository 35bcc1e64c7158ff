"""Application settings loaded from environment variables or .env."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SpeechlensSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SPEECHLENS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Correspondence analysis
    vocabulary_size: int = Field(default=200, ge=1)
    ca_dimensions: int = Field(default=2, ge=1)

    # tf-idf: the cap bounds rendered table size whatever top_n asks for
    tfidf_top_n: int = Field(default=15, ge=1)
    tfidf_top_n_cap: int = Field(default=15, ge=1)

    # Stopwords
    remove_stopwords: bool = True
    stopwords_file: Path | None = None  # replaces the built-in English list


def load_settings(**overrides: object) -> SpeechlensSettings:
    """Load settings with optional CLI overrides.

    ``None`` overrides (flags the user didn't pass) are dropped so they
    don't mask environment values.
    """
    provided = {k: v for k, v in overrides.items() if v is not None}
    return SpeechlensSettings(**provided)  # type: ignore[arg-type]
