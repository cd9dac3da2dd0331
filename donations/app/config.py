"""
Configuration management for the donations API.

All configuration is loaded from environment variables with sensible defaults
for local development. The Saweria shared secret is read from SAWERIA_SECRET;
an empty secret disables signature verification.
"""

from functools import lru_cache
from typing import List

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


DEFAULT_SIGNATURE_HEADERS = [
    "x-saweria-sig",
    "x-saweria-signature",
    "x-signature",
    "saweria-callback-signature",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Service settings
    service_name: str = Field(default="donations-api", description="Service name for logging")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # HTTP server settings (used by the CLI)
    host: str = Field(default="0.0.0.0", description="Bind address for the API server")
    port: int = Field(default=8000, description="Bind port for the API server")

    # Saweria webhook settings
    saweria_secret: str = Field(
        default="",
        validation_alias=AliasChoices("SAWERIA_SECRET", "DONATIONS_SAWERIA_SECRET", "saweria_secret"),
        description="Shared HMAC secret; empty disables signature verification",
    )
    signature_headers: List[str] = Field(
        default_factory=lambda: list(DEFAULT_SIGNATURE_HEADERS),
        description="Header names checked, in order, for the webhook signature",
    )
    paid_status: str = Field(
        default="PAID",
        description="Payment status accepted for storage (case-insensitive)",
    )

    # In-memory storage limits
    recent_donations_capacity: int = Field(
        default=100,
        ge=1,
        description="Max donations kept in the recent-donations buffer",
    )
    latest_donations_limit: int = Field(
        default=10,
        ge=1,
        description="Donations returned by the latest-donations endpoint",
    )
    top_donators_default_limit: int = Field(
        default=20,
        ge=1,
        description="Leaderboard size when no limit is requested",
    )
    top_donators_max_limit: int = Field(
        default=200,
        ge=1,
        description="Upper bound for the requested leaderboard size",
    )

    # Observability
    metrics_enabled: bool = Field(
        default=True,
        description="Expose Prometheus metrics on /metrics",
    )

    # CORS
    cors_allow_origins: List[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed by the CORS middleware",
    )

    class Config:
        env_prefix = "DONATIONS_"
        env_file = ".env"
        case_sensitive = False
        populate_by_name = True

    @property
    def signature_verification_enabled(self) -> bool:
        """Whether incoming webhooks must carry a valid signature."""
        return bool(self.saweria_secret)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
