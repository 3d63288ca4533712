"""Configuration management for the Duende events API."""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Data store
    mongo_uri: str = Field(default="", description="MongoDB connection string")
    events_db_name: str = Field(default="DuendeDB", description="Database holding events")
    analytics_db_name: str = Field(
        default="duende_analytics", description="Database holding user interactions"
    )

    # Content generation
    openai_api_key: str = Field(default="", description="OpenAI API key")
    content_model: str = Field(
        default="gpt-4o-mini", description="Model used for night plans and trip itineraries"
    )
    admin_secret_key: str = Field(default="", description="Secret for admin batch endpoints")
    night_plan_batch_size: int = Field(default=25, description="Events per batch run")
    night_plan_pause_seconds: float = Field(
        default=0.5, description="Pause between generation calls in batch runs"
    )

    # Search
    search_index_name: str = Field(default="buscador", description="Atlas Search index")
    search_cache_seconds: int = Field(
        default=60, description="Shared cache lifetime for search responses"
    )
    fuzzy_max_edits: int = Field(default=1, description="Typo tolerance for text search")
    loose_country_match: bool = Field(
        default=False,
        description="Classify a term as a country when it is contained in a country name",
    )
    reference_data_path: str = Field(
        default="", description="Override for the bundled city/country reference file"
    )
    top_artists_limit: int = Field(default=5, description="Default size of the top artists list")

    # Server config
    cors_origins: str = Field(
        default=(
            "https://buscador.afland.es,https://afland.es,"
            "https://duende-frontend.vercel.app,http://localhost:3000,http://localhost:5173"
        ),
        description="Comma-separated CORS origins",
    )
    log_level: str = Field(default="INFO", description="Logging level")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin]

    @property
    def has_database(self) -> bool:
        """Check if a data store is configured."""
        return bool(self.mongo_uri)

    @property
    def has_content_generation(self) -> bool:
        """Check if the content generation service can be called."""
        return bool(self.openai_api_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Configure application logging."""
    if settings is None:
        settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Suppress verbose third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)
