"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "AisHub Signal K Bridge"
    environment: Literal["development", "testing", "staging", "production"] = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Own vessel identity (Signal K self id, without the "vessels." prefix)
    self_id: str = "urn:mrn:imo:mmsi:000000000"

    # Redis (observer position store)
    redis_url: str = "redis://redis:6379/0"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # AisHub
    aishub_api_key: str = ""
    aishub_url: str = "http://data.aishub.net/ws.php"
    aishub_update_rate: int = 61  # seconds, AisHub allows one request per minute
    aishub_box_size: float = 10.0  # km
    aishub_timeout: float = 30.0  # seconds

    # Optional YAML source configuration
    ais_config_file: Optional[str] = None

    @property
    def self_context(self) -> str:
        """Signal K context of the own vessel."""
        return f"vessels.{self.self_id}"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
