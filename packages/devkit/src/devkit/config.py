from __future__ import annotations

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServiceSettings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")

    SERVICE_NAME: str = "service"
    LOG_LEVEL: str = "INFO"
    STATION_DATA_PATH: str | None = None
    FIRE_DISTRICTS_PATH: str | None = None
    FIRE_DISTRICTS_CRS: str = "EPSG:2100"
    DISTRICT_CACHE_TTL_SECONDS: float = 24 * 60 * 60
    STATION_CACHE_TTL_SECONDS: float = 24 * 60 * 60
    BOUNDARY_CACHE_TTL_SECONDS: float = 10 * 60
    GEOJSON_CACHE_TTL_SECONDS: float = 10 * 60
    LOOKUP_CACHE_TTL_SECONDS: float = 10 * 60
    CACHE_MAX_ENTRIES: int | None = None
    NEAREST_MAX_DISTANCE_METERS: float | None = None

    @field_validator(
        "DISTRICT_CACHE_TTL_SECONDS",
        "STATION_CACHE_TTL_SECONDS",
        "BOUNDARY_CACHE_TTL_SECONDS",
        "GEOJSON_CACHE_TTL_SECONDS",
        "LOOKUP_CACHE_TTL_SECONDS",
    )
    @classmethod
    def _positive_ttl(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("cache ttl must be > 0")
        return value

    @field_validator("CACHE_MAX_ENTRIES")
    @classmethod
    def _positive_capacity(cls, value: int | None) -> int | None:
        if value is not None and value <= 0:
            raise ValueError("CACHE_MAX_ENTRIES must be > 0")
        return value

    @field_validator("NEAREST_MAX_DISTANCE_METERS")
    @classmethod
    def _non_negative_distance(cls, value: float | None) -> float | None:
        if value is not None and value < 0:
            raise ValueError("NEAREST_MAX_DISTANCE_METERS must be >= 0")
        return value


def load_settings(service_name: str) -> ServiceSettings:
    return ServiceSettings(SERVICE_NAME=service_name)
