"""Value objects shared by the cache services and the HTTP routes."""

from dataclasses import dataclass

from pydantic import BaseModel, Field

from errors import ConfigError


class CacheQuery(BaseModel):
    """Coordinates of an inbound weather request."""

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class WeatherRecord(BaseModel):
    latitude: float
    longitude: float
    temperature: float
    created_at: int = 0
    id: int | None = None


@dataclass(frozen=True)
class ServiceConfig:
    """Runtime-tunable settings. Replaced wholesale, never mutated."""

    request_timeout: int
    ttl: int

    def __post_init__(self):
        if self.request_timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.request_timeout}")
        if self.ttl < 0:
            raise ConfigError(f"ttl must not be negative, got {self.ttl}")
