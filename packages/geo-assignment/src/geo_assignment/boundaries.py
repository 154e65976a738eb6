from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from geo_assignment.errors import MalformedGeometryError
from geo_assignment.models import BoundaryRecord, Ring, Station, StationBoundary
from geo_assignment.polygon import parse_ring_payload, to_multi_ring
from geo_assignment.simplify import simplify_ring

logger = logging.getLogger(__name__)

UNKNOWN_REGION = "Unknown Region"


def build_boundary_records(
    stations: Iterable[Station],
    simplify: bool = False,
    tolerance: float = 0.0,
) -> list[BoundaryRecord]:
    records: list[BoundaryRecord] = []
    for station in stations:
        for boundary in station.boundaries:
            ring = _parse_or_skip(station, boundary)
            if ring is None:
                continue
            if simplify:
                ring = simplify_ring(ring, tolerance)
            records.append(
                BoundaryRecord(
                    boundary_id=boundary.id,
                    station_id=station.id,
                    station_name=station.name,
                    region=station.region,
                    area=station.area,
                    coordinates=to_multi_ring(ring),
                )
            )
    return records


def build_feature_collection(stations: Iterable[Station]) -> dict[str, Any]:
    features: list[dict[str, Any]] = []
    for station in stations:
        for boundary in station.boundaries:
            ring = _parse_or_skip(station, boundary)
            if ring is None:
                continue
            features.append(
                {
                    "type": "Feature",
                    "properties": {
                        "stationName": station.name,
                        "region": station.region or UNKNOWN_REGION,
                        "area": station.area,
                        "stationId": station.id,
                    },
                    "geometry": {
                        "type": "Polygon",
                        "coordinates": [[[lng, lat] for lng, lat in ring]],
                    },
                }
            )
    return {"type": "FeatureCollection", "features": features}


def _parse_or_skip(station: Station, boundary: StationBoundary) -> Ring | None:
    try:
        return parse_ring_payload(boundary.coordinates_json)
    except MalformedGeometryError as exc:
        logger.warning(
            "malformed_boundary_skipped",
            extra={
                "component": "geo_assignment",
                "boundary_id": boundary.id,
                "station_id": station.id,
                "reason": str(exc),
            },
        )
        return None
