import math

import pytest

from geo_assignment.errors import InvalidInputError
from geo_assignment.simplify import perpendicular_distance, simplify_ring


def _wobbly_ring(count: int = 120) -> tuple[tuple[float, float], ...]:
    vertices = []
    for index in range(count):
        angle = 2 * math.pi * index / count
        radius = 0.05 + 0.004 * math.sin(7 * angle) + 0.002 * math.cos(13 * angle)
        vertices.append((23.72 + radius * math.cos(angle), 37.98 + radius * math.sin(angle)))
    return tuple(vertices)


def _is_ordered_subset(subset, full) -> bool:
    position = 0
    for vertex in subset:
        while position < len(full) and full[position] != vertex:
            position += 1
        if position == len(full):
            return False
        position += 1
    return True


def test_perpendicular_distance_inside_segment() -> None:
    assert perpendicular_distance((5.0, 3.0), (0.0, 0.0), (10.0, 0.0)) == pytest.approx(3.0)


def test_perpendicular_distance_clamps_to_endpoints() -> None:
    assert perpendicular_distance((-3.0, 4.0), (0.0, 0.0), (10.0, 0.0)) == pytest.approx(5.0)
    assert perpendicular_distance((13.0, 4.0), (0.0, 0.0), (10.0, 0.0)) == pytest.approx(5.0)


def test_perpendicular_distance_zero_length_segment() -> None:
    assert perpendicular_distance((3.0, 4.0), (0.0, 0.0), (0.0, 0.0)) == pytest.approx(5.0)


def test_short_rings_are_returned_unchanged() -> None:
    assert simplify_ring([], 0.1) == ()
    assert simplify_ring([(1.0, 2.0)], 0.1) == ((1.0, 2.0),)
    assert simplify_ring([(1.0, 2.0), (3.0, 4.0)], 10.0) == ((1.0, 2.0), (3.0, 4.0))


def test_collinear_points_collapse_to_endpoints() -> None:
    line = [(0.0, 0.0), (1.0, 0.0), (2.0, 0.0), (3.0, 0.0)]
    assert simplify_ring(line, 0.0) == ((0.0, 0.0), (3.0, 0.0))


def test_large_tolerance_keeps_only_endpoints() -> None:
    ring = _wobbly_ring()
    simplified = simplify_ring(ring, 10.0)
    assert simplified == (ring[0], ring[-1])


def test_split_on_farthest_point() -> None:
    line = [(0.0, 0.0), (1.0, 0.1), (2.0, 2.0), (3.0, 0.1), (4.0, 0.0)]
    assert simplify_ring(line, 0.7) == ((0.0, 0.0), (2.0, 2.0), (4.0, 0.0))


def test_equal_distances_split_on_lowest_index() -> None:
    line = [(0.0, 0.0), (1.0, 1.0), (2.0, 0.0), (3.0, 1.0), (4.0, 0.0)]
    # vertices 1 and 3 are equally far from the base line, so 1 is split on
    assert simplify_ring(line, 0.5) == ((0.0, 0.0), (1.0, 1.0), (2.0, 0.0), (3.0, 1.0), (4.0, 0.0))
    assert simplify_ring(line, 0.9) == ((0.0, 0.0), (1.0, 1.0), (4.0, 0.0))


def test_zero_tolerance_returns_ordered_subset_with_endpoints() -> None:
    ring = _wobbly_ring()
    simplified = simplify_ring(ring, 0.0)
    assert simplified[0] == ring[0]
    assert simplified[-1] == ring[-1]
    assert _is_ordered_subset(simplified, ring)


@pytest.mark.parametrize("tolerance", [0.0, 0.0005, 0.001, 0.003, 0.01])
def test_simplification_is_idempotent(tolerance: float) -> None:
    once = simplify_ring(_wobbly_ring(), tolerance)
    assert simplify_ring(once, tolerance) == once


def test_larger_tolerance_never_keeps_more_points() -> None:
    ring = _wobbly_ring(240)
    tolerances = [0.0, 0.0001, 0.0005, 0.001, 0.002, 0.004, 0.008, 0.05, 1.0]
    counts = [len(simplify_ring(ring, tolerance)) for tolerance in tolerances]
    assert counts == sorted(counts, reverse=True)
    assert counts[0] > counts[-1]


def test_explicitly_closed_ring_keeps_closure() -> None:
    ring = _wobbly_ring() + (_wobbly_ring()[0],)
    simplified = simplify_ring(ring, 0.001)
    assert simplified[0] == simplified[-1]
    assert len(simplified) > 3


def test_long_ring_does_not_hit_recursion_limit() -> None:
    # a zig-zag keeps every vertex at tolerance 0, forcing a deep split chain
    zigzag = [(float(index), float(index % 2) * (1 + index * 1e-6)) for index in range(1500)]
    simplified = simplify_ring(zigzag, 0.0)
    assert simplified[0] == zigzag[0]
    assert simplified[-1] == zigzag[-1]


def test_negative_tolerance_is_rejected() -> None:
    with pytest.raises(InvalidInputError):
        simplify_ring([(0.0, 0.0), (1.0, 1.0), (2.0, 0.0)], -0.1)
