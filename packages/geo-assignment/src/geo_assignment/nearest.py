from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from geo_assignment.distance import haversine_distance_meters
from geo_assignment.errors import InvalidInputError
from geo_assignment.models import Coordinate, Station


@dataclass(frozen=True)
class NearestMatch:
    station: Station
    distance_meters: float


def find_nearest(
    point: Coordinate,
    stations: Iterable[Station],
    max_distance_meters: float | None = None,
) -> NearestMatch | None:
    """Closest station with a known location, first one wins on equal distance.

    Without ``max_distance_meters`` the closest station is returned however
    far away it is.
    """
    if max_distance_meters is not None and max_distance_meters < 0:
        raise InvalidInputError("max_distance_meters must be >= 0")
    best: NearestMatch | None = None
    for station in stations:
        if station.location is None:
            continue
        distance = haversine_distance_meters(point, station.location)
        if best is None or distance < best.distance_meters:
            best = NearestMatch(station=station, distance_meters=distance)
    if best is None:
        return None
    if max_distance_meters is not None and best.distance_meters > max_distance_meters:
        return None
    return best


def find_nearest_station(
    point: Coordinate,
    stations: Iterable[Station],
    max_distance_meters: float | None = None,
) -> int | None:
    match = find_nearest(point, stations, max_distance_meters=max_distance_meters)
    return match.station.id if match else None
