"""Centralized configuration — all env vars in one place."""

import os

from errors import ConfigError
from models import ServiceConfig

DEFAULT_METEO_BASE_URL = "https://api.open-meteo.com"


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
        self.git_sha: str = os.getenv("GIT_SHA", "unknown")
        self.environment: str = os.getenv("ENVIRONMENT", "local")

        # Upstream provider and local store
        self.meteo_base_url: str = os.getenv("METEO_BASE_URL", DEFAULT_METEO_BASE_URL).rstrip("/")
        self.database_url: str = os.getenv("DATABASE_URL", "sqlite:///weather_cache.db")

        # Initial runtime config, replaceable later via PUT /config
        self.request_timeout: str = os.getenv("REQUEST_TIMEOUT", "3")
        self.cache_ttl: str = os.getenv("CACHE_TTL", "3600")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def service_config(self) -> ServiceConfig:
        """Build the startup ServiceConfig, raising ConfigError on bad values."""
        try:
            timeout = int(self.request_timeout)
            ttl = int(self.cache_ttl)
        except ValueError as e:
            raise ConfigError(f"REQUEST_TIMEOUT and CACHE_TTL must be integers: {e}") from e
        return ServiceConfig(request_timeout=timeout, ttl=ttl)

    def validate(self) -> list[str]:
        """Return a list of configuration problems worth warning about."""
        problems = []
        if not self.meteo_base_url.startswith(("http://", "https://")):
            problems.append(f"METEO_BASE_URL is not an http(s) URL: {self.meteo_base_url}")
        if self.database_url.startswith("sqlite://") and self.is_production:
            problems.append("DATABASE_URL points at SQLite in production")
        return problems


settings = Settings()
