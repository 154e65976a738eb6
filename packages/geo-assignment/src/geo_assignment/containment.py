from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

from geo_assignment.errors import MalformedGeometryError
from geo_assignment.models import BoundingBox, Coordinate, Ring, Station, StationBoundary
from geo_assignment.polygon import parse_ring_payload, point_in_ring

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DistrictPolygon:
    station_id: int
    boundary_id: int
    ring: Ring
    bbox: BoundingBox

    def contains(self, point: Coordinate) -> bool:
        return self.bbox.contains(point) and point_in_ring(point, self.ring)


class ContainmentIndex:
    """Parsed district rings, searched in the order they were supplied.

    When districts overlap the first containing ring wins. No area or
    centroid tie-break is attempted.
    """

    def __init__(self, polygons: Sequence[DistrictPolygon], skipped: int = 0) -> None:
        self._polygons = tuple(polygons)
        self.skipped = skipped

    @classmethod
    def from_boundaries(cls, boundaries: Iterable[StationBoundary]) -> ContainmentIndex:
        polygons: list[DistrictPolygon] = []
        skipped = 0
        for boundary in boundaries:
            try:
                ring = parse_ring_payload(boundary.coordinates_json)
            except MalformedGeometryError as exc:
                skipped += 1
                logger.warning(
                    "malformed_boundary_skipped",
                    extra={
                        "component": "geo_assignment",
                        "boundary_id": boundary.id,
                        "station_id": boundary.station_id,
                        "reason": str(exc),
                    },
                )
                continue
            polygons.append(
                DistrictPolygon(
                    station_id=boundary.station_id,
                    boundary_id=boundary.id,
                    ring=ring,
                    bbox=BoundingBox.from_ring(ring),
                )
            )
        return cls(polygons, skipped=skipped)

    @classmethod
    def from_stations(cls, stations: Iterable[Station]) -> ContainmentIndex:
        return cls.from_boundaries(boundary for station in stations for boundary in station.boundaries)

    def find(self, point: Coordinate) -> DistrictPolygon | None:
        for polygon in self._polygons:
            if polygon.contains(point):
                return polygon
        return None

    def __iter__(self) -> Iterator[DistrictPolygon]:
        return iter(self._polygons)

    def __len__(self) -> int:
        return len(self._polygons)


def find_containing_station(point: Coordinate, boundaries: Iterable[StationBoundary]) -> int | None:
    match = ContainmentIndex.from_boundaries(boundaries).find(point)
    return match.station_id if match else None
