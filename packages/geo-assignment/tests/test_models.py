import math

import pytest

from geo_assignment.errors import InvalidInputError
from geo_assignment.models import AgencyType, BoundaryRecord, BoundingBox, Coordinate


def test_coordinate_accepts_range_limits() -> None:
    assert Coordinate(lat=-90.0, lng=-180.0).lat == -90.0
    assert Coordinate(lat=90.0, lng=180.0).lng == 180.0


@pytest.mark.parametrize(
    ("lat", "lng"),
    [(91.0, 0.0), (-90.5, 0.0), (45.0, 200.0), (45.0, -180.1), (math.nan, 0.0), (0.0, math.nan)],
)
def test_coordinate_rejects_out_of_range(lat: float, lng: float) -> None:
    with pytest.raises(InvalidInputError):
        Coordinate(lat=lat, lng=lng)


def test_invalid_input_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        Coordinate(lat=100.0, lng=0.0)


def test_agency_type_parse_is_case_insensitive() -> None:
    assert AgencyType.parse("Fire") is AgencyType.FIRE
    assert AgencyType.parse(" CoastGuard ") is AgencyType.COASTGUARD
    assert AgencyType.parse(AgencyType.HOSPITAL) is AgencyType.HOSPITAL


def test_agency_type_parse_rejects_unknown() -> None:
    with pytest.raises(InvalidInputError):
        AgencyType.parse("ambulance")


def test_bounding_box_from_ring() -> None:
    bbox = BoundingBox.from_ring(((23.7, 37.9), (23.8, 37.9), (23.8, 38.0), (23.7, 38.0)))
    assert bbox == BoundingBox(min_lng=23.7, min_lat=37.9, max_lng=23.8, max_lat=38.0)
    assert bbox.contains(Coordinate(lat=37.95, lng=23.75))
    assert not bbox.contains(Coordinate(lat=38.5, lng=23.75))


def test_bounding_box_of_empty_ring_contains_nothing() -> None:
    bbox = BoundingBox.from_ring(())
    assert not bbox.contains(Coordinate(lat=0.0, lng=0.0))


def test_boundary_record_coordinates_as_lists() -> None:
    record = BoundaryRecord(
        boundary_id=1,
        station_id=2,
        station_name="Athens 1st",
        region="Attica",
        area=12.5,
        coordinates=(((0.0, 0.0), (0.0, 1.0), (1.0, 1.0)),),
    )
    assert record.coordinates_as_lists() == [[[0.0, 0.0], [0.0, 1.0], [1.0, 1.0]]]
