from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

from geo_assignment.errors import InvalidInputError

# (lng, lat), GeoJSON axis order
Vertex = tuple[float, float]
Ring = tuple[Vertex, ...]


class AgencyType(str, Enum):
    FIRE = "fire"
    COASTGUARD = "coastguard"
    POLICE = "police"
    HOSPITAL = "hospital"

    @classmethod
    def parse(cls, value: AgencyType | str) -> AgencyType:
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        raise InvalidInputError(f"unsupported agency type: {value!r}")


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lng: float

    def __post_init__(self) -> None:
        validate_latitude(self.lat)
        validate_longitude(self.lng)


def validate_latitude(value: float) -> None:
    if not -90.0 <= value <= 90.0:
        raise InvalidInputError("latitude must be between -90 and 90 degrees")


def validate_longitude(value: float) -> None:
    if not -180.0 <= value <= 180.0:
        raise InvalidInputError("longitude must be between -180 and 180 degrees")


@dataclass(frozen=True)
class BoundingBox:
    min_lng: float
    min_lat: float
    max_lng: float
    max_lat: float

    @classmethod
    def from_ring(cls, ring: Ring) -> BoundingBox:
        if not ring:
            return cls(math.inf, math.inf, -math.inf, -math.inf)
        lngs = [vertex[0] for vertex in ring]
        lats = [vertex[1] for vertex in ring]
        return cls(min(lngs), min(lats), max(lngs), max(lats))

    def contains(self, point: Coordinate) -> bool:
        return self.min_lng <= point.lng <= self.max_lng and self.min_lat <= point.lat <= self.max_lat


@dataclass(frozen=True)
class StationBoundary:
    id: int
    station_id: int
    coordinates_json: str


@dataclass(frozen=True)
class Station:
    id: int
    name: str
    agency: AgencyType
    region: str = ""
    area: float = 0.0
    location: Coordinate | None = None
    boundaries: tuple[StationBoundary, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class AssignmentResult:
    found: bool
    message: str
    station_id: int | None = None
    station_name: str | None = None
    region: str | None = None
    method: str | None = None
    distance_meters: float | None = None


@dataclass(frozen=True)
class DistrictResult:
    found: bool
    message: str
    station_id: int | None = None
    station_name: str | None = None
    region: str | None = None
    area: float | None = None


@dataclass(frozen=True)
class IncidentAssignment:
    success: bool
    incident_id: int
    message: str
    assigned_station_id: int | None = None
    assigned_station_name: str | None = None
    region: str | None = None


@dataclass(frozen=True)
class BoundaryRecord:
    boundary_id: int
    station_id: int
    station_name: str
    region: str
    area: float
    # multi-ring shape holding only the outer ring
    coordinates: tuple[Ring, ...]

    def coordinates_as_lists(self) -> list[list[list[float]]]:
        return [[[lng, lat] for lng, lat in ring] for ring in self.coordinates]
