from __future__ import annotations

import json
import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import replace
from functools import lru_cache
from pathlib import Path
from typing import Any

from pyproj import Transformer
from pyproj.exceptions import ProjError

from geo_assignment import AgencyType, Station, StationBoundary

logger = logging.getLogger(__name__)

# Greek Grid, the projection the national fire district layer ships in
DEFAULT_DISTRICT_CRS = "EPSG:2100"
WGS84_CRS = "EPSG:4326"
STATION_NAME_PROPERTY = "PYR_YPIRES"
DISTRICT_STATION_ID_BASE = 100_000


class DistrictFileError(ValueError):
    """The district file is not a GeoJSON FeatureCollection."""


@lru_cache(maxsize=8)
def _get_transformer(source_crs: str) -> Transformer:
    return Transformer.from_crs(source_crs, WGS84_CRS, always_xy=True)


def _outer_rings(geometry: Any) -> list[list[Any]]:
    geometry_type = geometry.get("type")
    coordinates = geometry.get("coordinates")
    if not isinstance(coordinates, list) or not coordinates:
        raise ValueError("geometry has no coordinates")
    if geometry_type == "Polygon":
        return [coordinates[0]]
    if geometry_type == "MultiPolygon":
        return [polygon[0] for polygon in coordinates]
    raise ValueError(f"unsupported geometry type: {geometry_type!r}")


def _to_wgs84(ring: Sequence[Any], source_crs: str) -> list[list[float]]:
    xs = [float(vertex[0]) for vertex in ring]
    ys = [float(vertex[1]) for vertex in ring]
    if source_crs.upper() != WGS84_CRS:
        xs, ys = _get_transformer(source_crs).transform(xs, ys)
    projected = [[float(lng), float(lat)] for lng, lat in zip(xs, ys)]
    for lng, lat in projected:
        if not (math.isfinite(lng) and math.isfinite(lat)):
            raise ValueError("vertex could not be projected to WGS84")
    return projected


def parse_district_features(
    features: Iterable[Any],
    source_crs: str = DEFAULT_DISTRICT_CRS,
) -> dict[str, list[list[list[float]]]]:
    """Outer rings in WGS84 ``[lng, lat]`` order, grouped by station name.

    MultiPolygon features contribute one ring per member polygon. Features
    without a station name or with unusable geometry are skipped.
    """
    districts: dict[str, list[list[list[float]]]] = {}
    for position, feature in enumerate(features):
        try:
            name = str((feature.get("properties") or {}).get(STATION_NAME_PROPERTY) or "").strip()
            if not name:
                raise ValueError(f"feature has no {STATION_NAME_PROPERTY} property")
            rings = [_to_wgs84(ring, source_crs) for ring in _outer_rings(feature.get("geometry") or {})]
        except (AttributeError, IndexError, TypeError, ValueError, ProjError) as exc:
            logger.warning(
                "invalid_district_skipped",
                extra={"component": "district_geojson", "position": position, "error": str(exc)},
            )
            continue
        districts.setdefault(name, []).extend(rings)
    return districts


def load_fire_districts(
    path: str | Path,
    source_crs: str = DEFAULT_DISTRICT_CRS,
) -> dict[str, list[list[list[float]]]]:
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    features = raw.get("features") if isinstance(raw, dict) else None
    if not isinstance(features, list):
        raise DistrictFileError(f"no 'features' array in district file: {path}")
    districts = parse_district_features(features, source_crs=source_crs)
    logger.info(
        "fire_districts_file_loaded",
        extra={"component": "district_geojson", "path": str(path), "districts": len(districts)},
    )
    return districts


def attach_fire_districts(
    stations: Sequence[Station],
    districts: dict[str, list[list[list[float]]]],
) -> list[Station]:
    """Replace fire station boundaries with district rings matched by name.

    District names with no matching fire station become boundary-only fire
    stations, so containment still resolves them.
    """
    by_name = {station.name: index for index, station in enumerate(stations) if station.agency is AgencyType.FIRE}
    merged = list(stations)
    boundary_id = DISTRICT_STATION_ID_BASE
    next_station_id = max((station.id for station in stations), default=0) + DISTRICT_STATION_ID_BASE
    for name, rings in districts.items():
        index = by_name.get(name)
        if index is None:
            station_id = next_station_id
            next_station_id += 1
        else:
            station_id = merged[index].id
        boundaries = []
        for ring in rings:
            boundary_id += 1
            boundaries.append(StationBoundary(id=boundary_id, station_id=station_id, coordinates_json=json.dumps(ring)))
        if index is None:
            merged.append(Station(id=station_id, name=name, agency=AgencyType.FIRE, boundaries=tuple(boundaries)))
        else:
            merged[index] = replace(merged[index], boundaries=tuple(boundaries))
    return merged
