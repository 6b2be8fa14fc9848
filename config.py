"""
Centralized configuration for the keyword tracker service.

Loads all environment variables and provides typed configuration objects.
No hardcoded secrets - all sensitive values must come from environment.
"""

import os
from typing import Optional
from dataclasses import dataclass, field

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


DEFAULT_SCOPES = (
    "https://www.googleapis.com/auth/webmasters.readonly,"
    "https://www.googleapis.com/auth/webmasters"
)


@dataclass
class GoogleConfig:
    """Google OAuth and Search Console endpoint configuration."""

    client_id: Optional[str] = field(
        default_factory=lambda: os.getenv("GOOGLE_CLIENT_ID"))
    client_secret: Optional[str] = field(
        default_factory=lambda: os.getenv("GOOGLE_CLIENT_SECRET"))
    redirect_uri: str = field(default_factory=lambda: os.getenv(
        "GOOGLE_REDIRECT_URI", "http://localhost:3001/api/auth/callback"))
    scopes: list[str] = field(
        default_factory=lambda: os.getenv(
            "GOOGLE_SCOPES", DEFAULT_SCOPES).split(",")
    )

    auth_uri: str = "https://accounts.google.com/o/oauth2/v2/auth"
    token_uri: str = "https://oauth2.googleapis.com/token"
    token_info_uri: str = "https://www.googleapis.com/oauth2/v1/tokeninfo"
    search_analytics_base_url: str = field(default_factory=lambda: os.getenv(
        "SEARCH_CONSOLE_BASE_URL", "https://www.googleapis.com/webmasters/v3"))
    # Seconds a consent state stays valid after /api/auth/login
    consent_state_ttl: int = field(default_factory=lambda: int(
        os.getenv("GOOGLE_CONSENT_STATE_TTL", "600")))


@dataclass
class AnalyticsConfig:
    """Search analytics query limits."""

    row_limit: int = field(default_factory=lambda: int(
        os.getenv("ANALYTICS_ROW_LIMIT", "100")))
    # Upper bound on in-flight follow-up queries per request
    max_concurrency: int = field(default_factory=lambda: int(
        os.getenv("ANALYTICS_MAX_CONCURRENCY", "5")))
    default_period_days: int = field(default_factory=lambda: int(
        os.getenv("ANALYTICS_DEFAULT_PERIOD_DAYS", "90")))


@dataclass
class RedisConfig:
    """Redis connection configuration for the OAuth token slot."""

    host: str = field(default_factory=lambda: os.getenv(
        "REDIS_HOST", "localhost"))
    port: int = field(default_factory=lambda: int(
        os.getenv("REDIS_PORT", "6379")))
    password: Optional[str] = field(
        default_factory=lambda: os.getenv("REDIS_PASSWORD"))
    db: int = field(default_factory=lambda: int(os.getenv("REDIS_DB", "0")))
    ssl: bool = field(default_factory=lambda: os.getenv(
        "REDIS_SSL", "false").lower() == "true")
    key_prefix: str = field(default_factory=lambda: os.getenv(
        "REDIS_KEY_PREFIX", "keyword_tracker"))

    @property
    def url(self) -> str:
        """Build Redis connection URL."""
        protocol = "rediss" if self.ssl else "redis"
        auth = f":{self.password}@" if self.password else ""
        return f"{protocol}://{auth}{self.host}:{self.port}/{self.db}"


@dataclass
class PostgresConfig:
    """PostgreSQL connection configuration for the keyword store."""

    # Support direct DATABASE_URL or individual components
    database_url: Optional[str] = field(
        default_factory=lambda: os.getenv("DATABASE_URL"))
    host: str = field(default_factory=lambda: os.getenv(
        "POSTGRES_HOST", "localhost"))
    port: int = field(default_factory=lambda: int(
        os.getenv("POSTGRES_PORT", "5432")))
    user: str = field(
        default_factory=lambda: os.getenv("POSTGRES_USER", "keyword_tracker"))
    password: Optional[str] = field(
        default_factory=lambda: os.getenv("POSTGRES_PASSWORD"))
    database: str = field(default_factory=lambda: os.getenv(
        "POSTGRES_DB", "keyword_tracker"))
    ssl_mode: str = field(default_factory=lambda: os.getenv(
        "POSTGRES_SSL_MODE", "prefer"))

    @property
    def url(self) -> str:
        """
        Build PostgreSQL connection URL.

        Prioritizes DATABASE_URL if set, otherwise builds from components.
        """
        if self.database_url:
            url = self.database_url
            # Normalize postgres:// to postgresql://
            if url.startswith("postgres://"):
                return url.replace("postgres://", "postgresql://", 1)
            return url

        auth = f"{self.user}:{self.password}@" if self.password else f"{self.user}@"
        return f"postgresql://{auth}{self.host}:{self.port}/{self.database}?sslmode={self.ssl_mode}"


@dataclass
class ServerConfig:
    """Server runtime configuration."""

    host: str = field(default_factory=lambda: os.getenv(
        "SERVER_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(
        os.getenv("PORT", "3001")))
    debug: bool = field(default_factory=lambda: os.getenv(
        "DEBUG", "false").lower() == "true")
    log_level: str = field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    cors_origins: list[str] = field(
        default_factory=lambda: os.getenv("CORS_ORIGINS", "*").split(",")
    )
    # Dashboard origin used when building shareable preset URLs
    public_url: str = field(default_factory=lambda: os.getenv(
        "PUBLIC_URL", "http://localhost:5173/"))


@dataclass
class Config:
    """
    Root configuration object aggregating all config sections.

    Usage:
        config = Config()
        row_limit = config.analytics.row_limit
        token_uri = config.google.token_uri
    """

    google: GoogleConfig = field(default_factory=GoogleConfig)
    analytics: AnalyticsConfig = field(default_factory=AnalyticsConfig)
    redis: RedisConfig = field(default_factory=RedisConfig)
    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    def validate(self) -> list[str]:
        """
        Validate configuration and return list of warnings/errors.

        Returns:
            List of validation messages (empty if all valid)
        """
        warnings = []

        if not self.google.client_id or not self.google.client_secret:
            warnings.append(
                "GOOGLE_CLIENT_ID / GOOGLE_CLIENT_SECRET not set - Google sign-in will fail")

        if self.analytics.max_concurrency < 1:
            warnings.append(
                "ANALYTICS_MAX_CONCURRENCY must be at least 1 - falling back to 1")

        if not self.redis.password and not self.server.debug:
            warnings.append("REDIS_PASSWORD not set in production mode")

        if not self.postgres.password and not self.server.debug:
            warnings.append("POSTGRES_PASSWORD not set in production mode")

        return warnings


# Global config instance - import and use this
config = Config()
