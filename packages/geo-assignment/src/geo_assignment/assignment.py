from __future__ import annotations

import copy
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Protocol

from geo_assignment.boundaries import build_boundary_records, build_feature_collection
from geo_assignment.cache import (
    AssignmentPayload,
    BoundaryListPayload,
    CachePriority,
    DistrictIndexPayload,
    DistrictLookupPayload,
    FeatureCollectionPayload,
    GeometryCache,
    StationListPayload,
)
from geo_assignment.containment import ContainmentIndex
from geo_assignment.errors import InvalidInputError
from geo_assignment.models import (
    AgencyType,
    AssignmentResult,
    BoundaryRecord,
    Coordinate,
    DistrictResult,
    IncidentAssignment,
    Station,
)
from geo_assignment.nearest import find_nearest

logger = logging.getLogger(__name__)

DEFAULT_SIMPLIFY_TOLERANCE = 0.001

DISTRICT_INDEX_CACHE_KEY = "fire_districts:index"
GEOJSON_CACHE_KEY = "boundaries:geojson"
BOUNDARIES_CACHE_PREFIX = "boundaries:"
STATIONS_CACHE_PREFIX = "stations:"
LOOKUP_CACHE_PREFIX = "lookup:"

METHOD_DISTRICT = "district"
METHOD_NEAREST = "nearest"

_AGENCY_LABELS = {
    AgencyType.FIRE: "fire station",
    AgencyType.COASTGUARD: "coast guard station",
    AgencyType.POLICE: "police station",
    AgencyType.HOSPITAL: "hospital",
}


class StationSource(Protocol):
    def list_stations(self, agency: AgencyType) -> Sequence[Station]: ...


@dataclass(frozen=True)
class CacheTtlPolicy:
    districts_seconds: float = 24 * 60 * 60
    stations_seconds: float = 24 * 60 * 60
    boundaries_seconds: float = 10 * 60
    geojson_seconds: float = 10 * 60
    lookup_seconds: float = 10 * 60


@dataclass(frozen=True)
class CacheStatistics:
    cached: bool
    cache_key: str
    timestamp: datetime
    entries: int
    hits: int
    misses: int


class StationAssigner:
    """Resolves the responsible station for a coordinate.

    Fire incidents are matched against district boundaries first and fall back
    to the nearest fire station. Coast guard, police and hospitals only have
    point locations and always use the nearest one. Parsed districts, station
    lists, rendered boundaries and per-coordinate lookups are memoised in the
    injected ``GeometryCache``.
    """

    def __init__(
        self,
        source: StationSource,
        cache: GeometryCache,
        ttl: CacheTtlPolicy | None = None,
        max_nearest_distance_meters: float | None = None,
    ) -> None:
        self._source = source
        self._cache = cache
        self._ttl = ttl or CacheTtlPolicy()
        self._max_nearest_distance_meters = max_nearest_distance_meters

    def assign_station(
        self,
        latitude: float,
        longitude: float,
        agency_type: AgencyType | str,
    ) -> AssignmentResult:
        point = Coordinate(lat=latitude, lng=longitude)
        agency = AgencyType.parse(agency_type)
        cache_key = _lookup_key(agency.value, point)
        cached = self._cache.get_as(cache_key, AssignmentPayload)
        if cached is not None:
            return cached.result

        if agency is AgencyType.FIRE:
            result = self._assign_by_district(point)
            if result is None:
                result = self._assign_nearest(point, agency)
        else:
            result = self._assign_nearest(point, agency)

        self._cache.set(cache_key, AssignmentPayload(result=result), self._ttl.lookup_seconds)
        logger.info(
            "station_assigned" if result.found else "station_not_found",
            extra={
                "component": "geo_assignment",
                "agency": agency.value,
                "method": result.method,
                "station_id": result.station_id,
            },
        )
        return result

    def find_containing_district(self, latitude: float, longitude: float) -> DistrictResult:
        point = Coordinate(lat=latitude, lng=longitude)
        cache_key = _lookup_key("district", point)
        cached = self._cache.get_as(cache_key, DistrictLookupPayload)
        if cached is not None:
            return cached.result

        districts = self._district_index()
        match = districts.index.find(point)
        station = districts.stations.get(match.station_id) if match else None
        if station is None:
            result = DistrictResult(
                found=False,
                message="No responsible fire district found for the given coordinates",
            )
        else:
            result = DistrictResult(
                found=True,
                station_id=station.id,
                station_name=station.name,
                region=station.region,
                area=station.area,
                message=f"Incident should be handled by {station.name}",
            )
        self._cache.set(cache_key, DistrictLookupPayload(result=result), self._ttl.lookup_seconds)
        return result

    def assign_incident(self, incident_id: int, latitude: float, longitude: float) -> IncidentAssignment:
        district = self.find_containing_district(latitude, longitude)
        if not district.found:
            return IncidentAssignment(
                success=False,
                incident_id=incident_id,
                message="No responsible fire district found for incident location",
            )
        logger.info(
            "incident_assigned",
            extra={"component": "geo_assignment", "incident_id": incident_id, "station_id": district.station_id},
        )
        return IncidentAssignment(
            success=True,
            incident_id=incident_id,
            assigned_station_id=district.station_id,
            assigned_station_name=district.station_name,
            region=district.region,
            message=f"Incident {incident_id} assigned to {district.station_name}",
        )

    def get_boundaries(
        self,
        limit: int | None = None,
        simplify: bool = False,
        tolerance: float = DEFAULT_SIMPLIFY_TOLERANCE,
    ) -> list[BoundaryRecord]:
        if simplify and tolerance < 0:
            raise InvalidInputError("tolerance must be >= 0")
        cache_key = f"{BOUNDARIES_CACHE_PREFIX}{limit}:{simplify}:{tolerance}"
        cached = self._cache.get_as(cache_key, BoundaryListPayload)
        if cached is not None:
            return list(cached.items)

        stations: Sequence[Station] = self._stations(AgencyType.FIRE)
        if limit is not None and limit > 0:
            stations = stations[:limit]
        records = build_boundary_records(stations, simplify=simplify, tolerance=tolerance)
        self._cache.set(cache_key, BoundaryListPayload(items=tuple(records)), self._ttl.boundaries_seconds)
        logger.info(
            "boundaries_built",
            extra={"component": "geo_assignment", "count": len(records), "limit": limit, "simplify": simplify},
        )
        return records

    def get_boundaries_geojson(self) -> dict[str, Any]:
        cached = self._cache.get_as(GEOJSON_CACHE_KEY, FeatureCollectionPayload)
        if cached is None:
            collection = build_feature_collection(self._stations(AgencyType.FIRE))
            cached = FeatureCollectionPayload(collection=collection)
            self._cache.set(GEOJSON_CACHE_KEY, cached, self._ttl.geojson_seconds)
            logger.info(
                "geojson_built",
                extra={"component": "geo_assignment", "features": len(collection["features"])},
            )
        return copy.deepcopy(cached.collection)

    def clear_cache(self) -> int:
        removed = self._cache.invalidate_all()
        logger.info("geometry_cache_cleared", extra={"component": "geo_assignment", "removed": removed})
        return removed

    def cache_statistics(self) -> CacheStatistics:
        stats = self._cache.statistics()
        return CacheStatistics(
            cached=self._cache.contains(DISTRICT_INDEX_CACHE_KEY),
            cache_key=DISTRICT_INDEX_CACHE_KEY,
            timestamp=datetime.now(timezone.utc),
            entries=stats.entries,
            hits=stats.hits,
            misses=stats.misses,
        )

    def _assign_by_district(self, point: Coordinate) -> AssignmentResult | None:
        districts = self._district_index()
        match = districts.index.find(point)
        if match is None:
            return None
        station = districts.stations.get(match.station_id)
        if station is None:
            return None
        return AssignmentResult(
            found=True,
            station_id=station.id,
            station_name=station.name,
            region=station.region,
            method=METHOD_DISTRICT,
            message=f"Incident should be handled by {station.name}",
        )

    def _assign_nearest(self, point: Coordinate, agency: AgencyType) -> AssignmentResult:
        label = _AGENCY_LABELS[agency]
        match = find_nearest(
            point,
            self._stations(agency),
            max_distance_meters=self._max_nearest_distance_meters,
        )
        if match is None:
            return AssignmentResult(found=False, message=f"No {label} found for the given coordinates")
        station = match.station
        return AssignmentResult(
            found=True,
            station_id=station.id,
            station_name=station.name,
            region=station.region,
            method=METHOD_NEAREST,
            distance_meters=round(match.distance_meters, 2),
            message=f"Nearest {label} is {station.name}",
        )

    def _district_index(self) -> DistrictIndexPayload:
        cached = self._cache.get_as(DISTRICT_INDEX_CACHE_KEY, DistrictIndexPayload)
        if cached is not None:
            return cached
        stations = self._stations(AgencyType.FIRE)
        index = ContainmentIndex.from_stations(stations)
        payload = DistrictIndexPayload(index=index, stations={station.id: station for station in stations})
        self._cache.set(
            DISTRICT_INDEX_CACHE_KEY,
            payload,
            self._ttl.districts_seconds,
            priority=CachePriority.HIGH,
        )
        logger.info(
            "fire_districts_loaded",
            extra={"component": "geo_assignment", "districts": len(index), "skipped": index.skipped},
        )
        return payload

    def _stations(self, agency: AgencyType) -> tuple[Station, ...]:
        cache_key = f"{STATIONS_CACHE_PREFIX}{agency.value}"
        cached = self._cache.get_as(cache_key, StationListPayload)
        if cached is not None:
            return cached.stations
        stations = tuple(self._source.list_stations(agency))
        self._cache.set(
            cache_key,
            StationListPayload(stations=stations),
            self._ttl.stations_seconds,
            priority=CachePriority.HIGH,
        )
        return stations


def _lookup_key(kind: str, point: Coordinate) -> str:
    return f"{LOOKUP_CACHE_PREFIX}{kind}:{point.lat:.6f}:{point.lng:.6f}"
