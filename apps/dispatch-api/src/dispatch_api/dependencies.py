from __future__ import annotations

from fastapi import Depends, Request

from devkit.config import ServiceSettings, load_settings
from geo_assignment import CacheTtlPolicy, GeometryCache, StationAssigner

from dispatch_api.repositories.district_geojson import load_fire_districts
from dispatch_api.repositories.station_repository import StationRepository
from dispatch_api.services.assignment_service import AssignmentService

_settings = load_settings("dispatch-api")
_station_repository = StationRepository.from_path(_settings.STATION_DATA_PATH)
if _settings.FIRE_DISTRICTS_PATH:
    _station_repository = _station_repository.with_fire_districts(
        load_fire_districts(_settings.FIRE_DISTRICTS_PATH, source_crs=_settings.FIRE_DISTRICTS_CRS)
    )
_geometry_cache = GeometryCache(max_entries=_settings.CACHE_MAX_ENTRIES)
_station_assigner = StationAssigner(
    source=_station_repository,
    cache=_geometry_cache,
    ttl=CacheTtlPolicy(
        districts_seconds=_settings.DISTRICT_CACHE_TTL_SECONDS,
        stations_seconds=_settings.STATION_CACHE_TTL_SECONDS,
        boundaries_seconds=_settings.BOUNDARY_CACHE_TTL_SECONDS,
        geojson_seconds=_settings.GEOJSON_CACHE_TTL_SECONDS,
        lookup_seconds=_settings.LOOKUP_CACHE_TTL_SECONDS,
    ),
    max_nearest_distance_meters=_settings.NEAREST_MAX_DISTANCE_METERS,
)


def get_settings() -> ServiceSettings:
    return _settings


def get_station_repository() -> StationRepository:
    return _station_repository


def get_geometry_cache() -> GeometryCache:
    return _geometry_cache


def get_station_assigner() -> StationAssigner:
    return _station_assigner


def get_assignment_service(
    request: Request,
    assigner: StationAssigner = Depends(get_station_assigner),
) -> AssignmentService:
    return AssignmentService(assigner, metrics=getattr(request.app.state, "prom_metrics", None))
