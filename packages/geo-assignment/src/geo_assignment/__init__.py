"""Geographic station assignment engine."""

from geo_assignment.assignment import CacheStatistics, CacheTtlPolicy, StationAssigner, StationSource
from geo_assignment.cache import CachePriority, GeometryCache
from geo_assignment.containment import ContainmentIndex, find_containing_station
from geo_assignment.distance import haversine_distance_meters
from geo_assignment.errors import GeoAssignmentError, InvalidInputError, MalformedGeometryError
from geo_assignment.models import (
    AgencyType,
    AssignmentResult,
    BoundaryRecord,
    Coordinate,
    DistrictResult,
    IncidentAssignment,
    Station,
    StationBoundary,
)
from geo_assignment.nearest import find_nearest, find_nearest_station
from geo_assignment.polygon import parse_ring_payload, point_in_ring
from geo_assignment.simplify import simplify_ring

__all__ = [
    "AgencyType",
    "AssignmentResult",
    "BoundaryRecord",
    "CachePriority",
    "CacheStatistics",
    "CacheTtlPolicy",
    "ContainmentIndex",
    "Coordinate",
    "DistrictResult",
    "GeoAssignmentError",
    "GeometryCache",
    "IncidentAssignment",
    "InvalidInputError",
    "MalformedGeometryError",
    "Station",
    "StationAssigner",
    "StationBoundary",
    "StationSource",
    "find_containing_station",
    "find_nearest",
    "find_nearest_station",
    "haversine_distance_meters",
    "parse_ring_payload",
    "point_in_ring",
    "simplify_ring",
]
