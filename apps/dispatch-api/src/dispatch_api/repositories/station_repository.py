from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from geo_assignment import AgencyType, Coordinate, Station, StationBoundary

from dispatch_api.repositories.district_geojson import attach_fire_districts

logger = logging.getLogger(__name__)


class BoundarySnapshot(BaseModel):
    id: int
    coordinates: str | list[Any]

    def to_boundary(self, station_id: int) -> StationBoundary:
        payload = self.coordinates if isinstance(self.coordinates, str) else json.dumps(self.coordinates)
        return StationBoundary(id=self.id, station_id=station_id, coordinates_json=payload)


class StationSnapshot(BaseModel):
    id: int
    name: str = Field(..., min_length=1)
    agency: AgencyType
    region: str = ""
    area: float = 0.0
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    boundaries: list[BoundarySnapshot] = Field(default_factory=list)

    @field_validator("agency", mode="before")
    @classmethod
    def _parse_agency(cls, value: object) -> AgencyType:
        return AgencyType.parse(value if isinstance(value, AgencyType) else str(value))

    def to_station(self) -> Station:
        location = None
        if self.latitude is not None and self.longitude is not None:
            location = Coordinate(lat=self.latitude, lng=self.longitude)
        return Station(
            id=self.id,
            name=self.name,
            agency=self.agency,
            region=self.region,
            area=self.area,
            location=location,
            boundaries=tuple(boundary.to_boundary(self.id) for boundary in self.boundaries),
        )


_DEFAULT_SNAPSHOT: list[dict[str, Any]] = [
    {
        "id": 1,
        "name": "Athens 1st Fire Station",
        "agency": "fire",
        "region": "Attica",
        "area": 18.5,
        "latitude": 37.9890,
        "longitude": 23.7320,
        "boundaries": [
            {"id": 101, "coordinates": [[23.7, 37.9], [23.8, 37.9], [23.8, 38.0], [23.7, 38.0]]},
        ],
    },
    {
        "id": 2,
        "name": "Piraeus Fire Station",
        "agency": "fire",
        "region": "Attica",
        "area": 22.0,
        "latitude": 37.9420,
        "longitude": 23.6465,
        "boundaries": [
            {"id": 201, "coordinates": [[[23.6, 37.9], [23.7, 37.9], [23.7, 37.98], [23.6, 37.98]]]},
        ],
    },
    {
        "id": 3,
        "name": "Piraeus Central Port Authority",
        "agency": "coastguard",
        "region": "Attica",
        "latitude": 37.9375,
        "longitude": 23.6330,
    },
    {
        "id": 4,
        "name": "Athens Police Directorate",
        "agency": "police",
        "region": "Attica",
        "latitude": 37.9890,
        "longitude": 23.7570,
    },
    {
        "id": 5,
        "name": "Evangelismos Hospital",
        "agency": "hospital",
        "region": "Attica",
        "latitude": 37.9770,
        "longitude": 23.7480,
    },
]


def parse_station_snapshot(entries: Iterable[object]) -> list[Station]:
    stations: list[Station] = []
    for position, entry in enumerate(entries):
        try:
            stations.append(StationSnapshot.model_validate(entry).to_station())
        except (ValidationError, ValueError) as exc:
            logger.warning(
                "invalid_station_skipped",
                extra={"component": "station_repository", "position": position, "error": str(exc)},
            )
    return stations


def load_station_snapshot(path: str | Path) -> list[Station]:
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    entries = raw.get("stations", []) if isinstance(raw, dict) else raw
    if not isinstance(entries, list):
        raise ValueError(f"station snapshot must be a list: {path}")
    stations = parse_station_snapshot(entries)
    logger.info(
        "station_snapshot_loaded",
        extra={"component": "station_repository", "path": str(path), "stations": len(stations)},
    )
    return stations


class StationRepository:
    def __init__(self, stations: Sequence[Station] | None = None) -> None:
        self._items = list(stations) if stations is not None else parse_station_snapshot(_DEFAULT_SNAPSHOT)

    @classmethod
    def from_path(cls, path: str | Path | None) -> StationRepository:
        if not path:
            return cls()
        return cls(load_station_snapshot(path))

    def with_fire_districts(self, districts: dict[str, list[list[list[float]]]]) -> StationRepository:
        return StationRepository(attach_fire_districts(self._items, districts))

    def list_stations(self, agency: AgencyType) -> list[Station]:
        return [item for item in self._items if item.agency is agency]
