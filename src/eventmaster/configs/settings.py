"""Centralized settings management for the Eventmaster backend."""

from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import make_url


class Settings(BaseSettings):
    """
    Application settings powered by pydantic-settings.

    Loads configuration from environment variables and a .env file in the
    current working directory.
    """

    # -------------------------------------------------------------------------
    # DATABASE
    # -------------------------------------------------------------------------
    DATABASE_URL: str = Field(..., min_length=1)
    DB_POOL_MIN: int = Field(default=1, ge=1)
    DB_POOL_MAX: int = Field(default=10, ge=1)

    # -------------------------------------------------------------------------
    # TICKETMASTER FEED
    # -------------------------------------------------------------------------
    TICKETMASTER_API_KEY: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("TICKETMASTER_API_KEY", "TICKETMASTER_KEY"),
    )
    TICKETMASTER_BASE_URL: str = "https://app.ticketmaster.com"
    TICKETMASTER_COUNTRY_CODE: str = "US"
    TICKETMASTER_PAGE_SIZE: int = Field(default=100, ge=1, le=200)
    TICKETMASTER_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0)

    # -------------------------------------------------------------------------
    # INGESTION
    # -------------------------------------------------------------------------
    INGESTION_ENABLED: bool = True
    INGESTION_INTERVAL_HOURS: float = Field(default=6.0, gt=0)
    INGESTION_INITIAL_DELAY_SECONDS: float = Field(default=5.0, ge=0)
    FAKE_PARTICIPANTS_PER_EVENT: int = Field(default=2, ge=0)
    PARTICIPANT_BATCH_SIZE: int = Field(default=50, ge=1)
    SYSTEM_USER_EMAIL: str = "ticketmaster@eventmaster.local"
    # Seeds the synthetic participant generator; None means nondeterministic
    RANDOM_SEED: int | None = None
    # Seconds to wait for an in-flight run on shutdown; None waits until it finishes
    SHUTDOWN_GRACE_SECONDS: float | None = Field(default=None, ge=0)

    # -------------------------------------------------------------------------
    # LOGGING
    # -------------------------------------------------------------------------
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # -------------------------------------------------------------------------
    # CONFIGURATION
    # -------------------------------------------------------------------------
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        # Allow extra fields in .env but ignore them in the model
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def ingestion_interval_seconds(self) -> float:
        """Scheduler interval expressed in seconds."""
        return self.INGESTION_INTERVAL_HOURS * 3600

    def get_psycopg2_params(self) -> dict:
        """
        Parse DATABASE_URL into psycopg2-compatible connection parameters.

        Uses sqlalchemy.make_url so driver-qualified schemes such as
        ``postgresql+psycopg2://`` are accepted.

        Returns
        -------
        dict
            psycopg2 connection arguments (host, port, dbname, user, password).
        """
        url = make_url(self.DATABASE_URL)
        return {
            "host": url.host,
            "port": url.port,
            "dbname": url.database,
            "user": url.username,
            "password": url.password,
        }


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns
    -------
    Settings
        The singleton settings instance.
    """
    return Settings()
