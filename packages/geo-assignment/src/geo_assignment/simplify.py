from __future__ import annotations

import math
from collections.abc import Sequence

from geo_assignment.errors import InvalidInputError
from geo_assignment.models import Ring, Vertex


def perpendicular_distance(point: Vertex, segment_start: Vertex, segment_end: Vertex) -> float:
    """Distance from ``point`` to the segment, clamped to its endpoints."""
    x0, y0 = point[0], point[1]
    x1, y1 = segment_start[0], segment_start[1]
    x2, y2 = segment_end[0], segment_end[1]

    dx_point = x0 - x1
    dy_point = y0 - y1
    dx_segment = x2 - x1
    dy_segment = y2 - y1

    length_squared = dx_segment * dx_segment + dy_segment * dy_segment
    if length_squared == 0:
        return math.hypot(dx_point, dy_point)

    param = (dx_point * dx_segment + dy_point * dy_segment) / length_squared
    if param < 0:
        nearest_x, nearest_y = x1, y1
    elif param > 1:
        nearest_x, nearest_y = x2, y2
    else:
        nearest_x = x1 + param * dx_segment
        nearest_y = y1 + param * dy_segment
    return math.hypot(x0 - nearest_x, y0 - nearest_y)


def simplify_ring(ring: Sequence[Vertex], tolerance: float) -> Ring:
    """Douglas-Peucker simplification.

    ``tolerance`` uses the units of the input vertices. The first and last
    vertex are always kept, the relative order of kept vertices never
    changes, and on equal distances the lowest index is split on.
    """
    if tolerance < 0:
        raise InvalidInputError("tolerance must be >= 0")
    points = tuple((vertex[0], vertex[1]) for vertex in ring)
    if len(points) <= 2:
        return points

    keep = [False] * len(points)
    keep[0] = True
    keep[-1] = True
    pending = [(0, len(points) - 1)]
    while pending:
        start, end = pending.pop()
        split_index, max_distance = _farthest_vertex(points, start, end)
        if split_index is None or max_distance <= tolerance:
            continue
        keep[split_index] = True
        pending.append((split_index, end))
        pending.append((start, split_index))

    return tuple(point for point, kept in zip(points, keep) if kept)


def _farthest_vertex(points: Ring, start: int, end: int) -> tuple[int | None, float]:
    split_index: int | None = None
    max_distance = 0.0
    for index in range(start + 1, end):
        distance = perpendicular_distance(points[index], points[start], points[end])
        if split_index is None or distance > max_distance:
            split_index = index
            max_distance = distance
    return split_index, max_distance
