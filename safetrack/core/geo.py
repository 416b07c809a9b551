"""Geographic point-in-polygon evaluated on the sphere.

Polygon edges are great-circle arcs between consecutive vertices, matching
PostGIS ``geography`` semantics rather than straight lines in degree space.
Geometries use GeoJSON conventions: coordinates are ``[longitude, latitude]``
and the first ring of a polygon is its shell, any further rings are holes.
"""

import math
from collections.abc import Sequence
from typing import Any

# Roughly 6 mm on the Earth's surface
BOUNDARY_TOLERANCE_RAD = 1e-9

Vector = tuple[float, float, float]
Position = Sequence[float]


def to_unit_vector(latitude: float, longitude: float) -> Vector:
    """Convert WGS84 degrees to a point on the unit sphere."""
    lat = math.radians(latitude)
    lon = math.radians(longitude)
    cos_lat = math.cos(lat)
    return (cos_lat * math.cos(lon), cos_lat * math.sin(lon), math.sin(lat))


def _dot(a: Vector, b: Vector) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def _cross(a: Vector, b: Vector) -> Vector:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def _norm(a: Vector) -> float:
    return math.sqrt(_dot(a, a))


def _ring_vertices(ring: Sequence[Position]) -> list[Vector]:
    positions = list(ring)
    # GeoJSON rings repeat the first position at the end
    if len(positions) > 1 and list(positions[0]) == list(positions[-1]):
        positions.pop()
    return [to_unit_vector(position[1], position[0]) for position in positions]


def _edges(vertices: list[Vector]) -> list[tuple[Vector, Vector]]:
    return [(vertices[i], vertices[(i + 1) % len(vertices)]) for i in range(len(vertices))]


def _on_arc(p: Vector, a: Vector, b: Vector) -> bool:
    """Whether p lies on the minor great-circle arc from a to b."""
    if _norm(_cross(a, p)) <= BOUNDARY_TOLERANCE_RAD and _dot(a, p) > 0:
        return True

    normal = _cross(a, b)
    length = _norm(normal)
    if length == 0.0:
        return False
    normal = (normal[0] / length, normal[1] / length, normal[2] / length)

    if abs(_dot(p, normal)) > BOUNDARY_TOLERANCE_RAD:
        return False

    # Between the endpoints, not on the far side of the great circle
    return (
        _dot(_cross(a, p), normal) >= -BOUNDARY_TOLERANCE_RAD
        and _dot(_cross(p, b), normal) >= -BOUNDARY_TOLERANCE_RAD
    )


def _tangent(p: Vector, a: Vector) -> Vector:
    """Direction from p towards a, projected onto the tangent plane at p."""
    scale = _dot(a, p)
    return (a[0] - scale * p[0], a[1] - scale * p[1], a[2] - scale * p[2])


def _centroid(vertices: list[Vector]) -> Vector | None:
    """Normalized vertex mean, or None when the vertices cancel out."""
    total = (
        sum(v[0] for v in vertices),
        sum(v[1] for v in vertices),
        sum(v[2] for v in vertices),
    )
    length = _norm(total)
    if length <= BOUNDARY_TOLERANCE_RAD:
        return None
    return (total[0] / length, total[1] / length, total[2] / length)


def _winding_angle(p: Vector, vertices: list[Vector]) -> float:
    total = 0.0
    for a, b in _edges(vertices):
        ta = _tangent(p, a)
        tb = _tangent(p, b)
        total += math.atan2(_dot(p, _cross(ta, tb)), _dot(ta, tb))
    return total


def ring_on_boundary(ring: Sequence[Position], latitude: float, longitude: float) -> bool:
    """Whether the point lies on any edge or vertex of the ring."""
    p = to_unit_vector(latitude, longitude)
    return any(_on_arc(p, a, b) for a, b in _edges(_ring_vertices(ring)))


def ring_contains(ring: Sequence[Position], latitude: float, longitude: float) -> bool:
    """Whether the point lies strictly inside the ring.

    A ring splits the sphere in two; its inside is the smaller side, as for
    PostGIS geography. A full winding around p only says that p and its
    antipode lie on different sides, so the side holding the ring centroid
    decides which of the two is inside. Rings must fit in a hemisphere.
    """
    vertices = _ring_vertices(ring)
    if len(vertices) < 3:
        return False
    p = to_unit_vector(latitude, longitude)
    if abs(_winding_angle(p, vertices)) <= math.pi:
        return False

    centroid = _centroid(vertices)
    return centroid is None or _dot(p, centroid) > 0


def polygon_covers(
    rings: Sequence[Sequence[Position]],
    latitude: float,
    longitude: float,
) -> bool:
    """Covers test for one polygon given as GeoJSON rings (shell first, then holes)."""
    if not rings:
        return False

    if any(ring_on_boundary(ring, latitude, longitude) for ring in rings):
        return True

    shell, holes = rings[0], rings[1:]
    if not ring_contains(shell, latitude, longitude):
        return False

    return not any(ring_contains(hole, latitude, longitude) for hole in holes)


def covers(geometry: dict[str, Any], latitude: float, longitude: float) -> bool:
    """
    Check whether a GeoJSON geometry covers a point, boundary included.

    Args:
        geometry: GeoJSON ``Polygon`` or ``MultiPolygon`` geometry
        latitude: Point latitude in degrees
        longitude: Point longitude in degrees

    Returns:
        True if the point is inside or on the boundary of the geometry

    Raises:
        ValueError: If the geometry type is not supported
    """
    geometry_type = geometry.get("type")
    coordinates = geometry.get("coordinates") or []

    if geometry_type == "Polygon":
        return polygon_covers(coordinates, latitude, longitude)
    if geometry_type == "MultiPolygon":
        return any(polygon_covers(polygon, latitude, longitude) for polygon in coordinates)

    raise ValueError(f"Unsupported geofence geometry type: {geometry_type}")
