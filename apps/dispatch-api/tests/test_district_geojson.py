import json
import logging

import pytest
from pyproj import Transformer

from geo_assignment import AgencyType, Coordinate, find_containing_station

from dispatch_api.repositories.district_geojson import (
    DistrictFileError,
    attach_fire_districts,
    load_fire_districts,
    parse_district_features,
)
from dispatch_api.repositories.station_repository import StationRepository

ATHENS_SQUARE_WGS84 = [[23.7, 37.9], [23.8, 37.9], [23.8, 38.0], [23.7, 38.0], [23.7, 37.9]]


def _greek_grid(ring: list[list[float]]) -> list[list[float]]:
    to_greek_grid = Transformer.from_crs("EPSG:4326", "EPSG:2100", always_xy=True)
    return [list(to_greek_grid.transform(lng, lat)) for lng, lat in ring]


def _feature(name: str | None, geometry: dict) -> dict:
    properties = {} if name is None else {"PYR_YPIRES": name}
    return {"type": "Feature", "properties": properties, "geometry": geometry}


def test_greek_grid_polygon_is_projected_to_wgs84(tmp_path) -> None:
    path = tmp_path / "districts.geojson"
    collection = {
        "type": "FeatureCollection",
        "features": [
            _feature("Athens 1st Fire Station", {"type": "Polygon", "coordinates": [_greek_grid(ATHENS_SQUARE_WGS84)]}),
        ],
    }
    path.write_text(json.dumps(collection), encoding="utf-8")

    districts = load_fire_districts(path)

    ring = districts["Athens 1st Fire Station"][0]
    for (lng, lat), (expected_lng, expected_lat) in zip(ring, ATHENS_SQUARE_WGS84):
        assert lng == pytest.approx(expected_lng, abs=1e-6)
        assert lat == pytest.approx(expected_lat, abs=1e-6)


def test_multipolygon_contributes_every_outer_ring() -> None:
    hole = [[23.75, 37.95], [23.76, 37.95], [23.76, 37.96], [23.75, 37.95]]
    island = [[23.4, 37.7], [23.5, 37.7], [23.5, 37.8], [23.4, 37.7]]
    features = [
        _feature(
            "Salamina Fire Station",
            {"type": "MultiPolygon", "coordinates": [[ATHENS_SQUARE_WGS84, hole], [island]]},
        )
    ]

    districts = parse_district_features(features, source_crs="EPSG:4326")

    assert districts["Salamina Fire Station"] == [ATHENS_SQUARE_WGS84, island]


def test_unusable_features_are_skipped(caplog) -> None:
    features = [
        _feature(None, {"type": "Polygon", "coordinates": [ATHENS_SQUARE_WGS84]}),
        _feature("Point Station", {"type": "Point", "coordinates": [23.7, 37.9]}),
        _feature("Broken Station", {"type": "Polygon", "coordinates": [[["x", "y"]]]}),
        "not-a-feature",
        _feature("Valid Station", {"type": "Polygon", "coordinates": [ATHENS_SQUARE_WGS84]}),
    ]
    with caplog.at_level(logging.WARNING, logger="dispatch_api.repositories.district_geojson"):
        districts = parse_district_features(features, source_crs="EPSG:4326")

    assert list(districts) == ["Valid Station"]
    assert sum(record.getMessage() == "invalid_district_skipped" for record in caplog.records) == 4


def test_file_without_features_is_rejected(tmp_path) -> None:
    path = tmp_path / "districts.geojson"
    path.write_text(json.dumps({"type": "Feature"}), encoding="utf-8")

    with pytest.raises(DistrictFileError):
        load_fire_districts(path)


def test_districts_attach_to_stations_by_name() -> None:
    repository = StationRepository()
    districts = {
        "Piraeus Fire Station": [ATHENS_SQUARE_WGS84],
        "Marousi Fire Station": [[[23.78, 38.04], [23.82, 38.04], [23.82, 38.07], [23.78, 38.04]]],
    }

    merged = repository.with_fire_districts(districts)
    fire = merged.list_stations(AgencyType.FIRE)
    piraeus = next(station for station in fire if station.name == "Piraeus Fire Station")
    marousi = next(station for station in fire if station.name == "Marousi Fire Station")

    assert piraeus.id == 2
    assert piraeus.location is not None
    assert len(piraeus.boundaries) == 1
    assert marousi.location is None
    assert marousi.id not in {1, 2}
    boundaries = [boundary for station in fire for boundary in station.boundaries]
    assert len({boundary.id for boundary in boundaries}) == len(boundaries)
    assert merged.list_stations(AgencyType.HOSPITAL) == repository.list_stations(AgencyType.HOSPITAL)


def test_attached_district_resolves_containment() -> None:
    stations = attach_fire_districts([], {"Kifisia Fire Station": [ATHENS_SQUARE_WGS84]})
    boundaries = [boundary for station in stations for boundary in station.boundaries]

    assert find_containing_station(Coordinate(lat=37.9838, lng=23.7275), boundaries) == stations[0].id
