from __future__ import annotations

import json
import math
from collections.abc import Sequence
from typing import Any

from geo_assignment.errors import MalformedGeometryError
from geo_assignment.models import Coordinate, Ring, Vertex


def point_in_ring(point: Coordinate, ring: Sequence[Vertex]) -> bool:
    """Even-odd ray casting with the ray pointing towards +longitude.

    The ring is treated as closed whether or not its last vertex repeats the
    first. Edges that do not straddle the point's latitude never count, which
    also skips horizontal edges, so a point on a boundary always gets the same
    answer.
    """
    count = len(ring)
    if count < 3:
        return False

    inside = False
    j = count - 1
    for i in range(count):
        xi, yi = ring[i][0], ring[i][1]
        xj, yj = ring[j][0], ring[j][1]
        if (yi > point.lat) != (yj > point.lat):
            crossing_lng = (xj - xi) * (point.lat - yi) / (yj - yi) + xi
            if point.lng < crossing_lng:
                inside = not inside
        j = i
    return inside


def parse_ring_payload(payload: str | bytes | Sequence[Any]) -> Ring:
    """Normalise a boundary payload to its outer ring.

    Accepts JSON text or decoded lists in either shape:
    ``[[lng, lat], ...]`` (single ring) or ``[[[lng, lat], ...], ...]``
    (list of rings, outer ring first).
    """
    data: Any = payload
    if isinstance(payload, (str, bytes)):
        try:
            data = json.loads(payload)
        except (ValueError, RecursionError) as exc:
            # JSONDecodeError and UnicodeDecodeError are ValueErrors too
            raise MalformedGeometryError(f"boundary payload is not valid JSON: {exc}") from exc

    ring = _as_ring(data)
    if ring is not None:
        return ring

    if _is_sequence(data) and data:
        rings = [_as_ring(item) for item in data]
        if all(item is not None for item in rings):
            return rings[0]

    raise MalformedGeometryError("boundary payload is neither a ring nor a list of rings")


def to_multi_ring(ring: Ring) -> tuple[Ring, ...]:
    return (ring,)


def _as_ring(data: Any) -> Ring | None:
    if not _is_sequence(data) or not data:
        return None
    vertices: list[Vertex] = []
    for item in data:
        if not _is_sequence(item) or len(item) < 2:
            return None
        lng, lat = item[0], item[1]
        if not _is_number(lng) or not _is_number(lat):
            return None
        try:
            vertex = (float(lng), float(lat))
        except OverflowError:
            return None
        if not (math.isfinite(vertex[0]) and math.isfinite(vertex[1])):
            return None
        vertices.append(vertex)
    return tuple(vertices)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
