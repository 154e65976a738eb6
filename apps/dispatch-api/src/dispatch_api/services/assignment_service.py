from __future__ import annotations

from dataclasses import asdict
from typing import Any

from geo_assignment import AgencyType, StationAssigner

from dispatch_api.observability import AssignmentMetric, AssignmentMetricCollector
from dispatch_api.schemas.assignment import (
    IncidentAssignmentResult,
    ResponsibleDistrictResult,
    StationAssignmentResult,
)
from dispatch_api.schemas.boundaries import (
    CacheClearResult,
    CacheStatisticsResult,
    FireStationBoundaryItem,
    FireStationBoundaryList,
)


class AssignmentService:
    def __init__(
        self,
        assigner: StationAssigner,
        metrics: AssignmentMetricCollector | None = None,
    ) -> None:
        self._assigner = assigner
        self._metrics = metrics

    async def find_station(self, latitude: float, longitude: float, agency_type: str) -> StationAssignmentResult:
        agency = AgencyType.parse(agency_type)
        result = self._assigner.assign_station(latitude, longitude, agency)
        if self._metrics is not None:
            self._metrics.observe_assignment(
                AssignmentMetric(agency=agency.value, method=result.method, found=result.found)
            )
        return StationAssignmentResult(**asdict(result))

    async def find_responsible_district(self, latitude: float, longitude: float) -> ResponsibleDistrictResult:
        result = self._assigner.find_containing_district(latitude, longitude)
        return ResponsibleDistrictResult(**asdict(result))

    async def assign_incident(self, incident_id: int, latitude: float, longitude: float) -> IncidentAssignmentResult:
        result = self._assigner.assign_incident(incident_id, latitude, longitude)
        return IncidentAssignmentResult(**asdict(result))

    async def list_boundaries(
        self,
        limit: int | None,
        simplify: bool,
        tolerance: float,
    ) -> FireStationBoundaryList:
        records = self._assigner.get_boundaries(limit=limit, simplify=simplify, tolerance=tolerance)
        items = [
            FireStationBoundaryItem(
                boundary_id=record.boundary_id,
                station_id=record.station_id,
                station_name=record.station_name,
                region=record.region,
                area=record.area,
                coordinates=record.coordinates_as_lists(),
            )
            for record in records
        ]
        return FireStationBoundaryList(items=items, count=len(items))

    async def boundaries_geojson(self) -> dict[str, Any]:
        return self._assigner.get_boundaries_geojson()

    async def clear_cache(self) -> CacheClearResult:
        removed = self._assigner.clear_cache()
        return CacheClearResult(cleared=True, removed_entries=removed)

    async def cache_statistics(self) -> CacheStatisticsResult:
        stats = self._assigner.cache_statistics()
        return CacheStatisticsResult(**asdict(stats))
