"""Tests for spherical point-in-polygon checks."""

import pytest

from safetrack.core.geo import covers, polygon_covers, ring_contains, ring_on_boundary

SQUARE = [[77.0, 12.0], [78.0, 12.0], [78.0, 13.0], [77.0, 13.0], [77.0, 12.0]]
HOLE = [[77.4, 12.4], [77.6, 12.4], [77.6, 12.6], [77.4, 12.6], [77.4, 12.4]]


@pytest.mark.parametrize(
    ("latitude", "longitude", "expected"),
    [
        (12.5, 77.5, True),
        (14.0, 77.5, False),
        (12.5, 76.5, False),
        (-12.5, 77.5, False),
        (12.5, -102.5, False),
    ],
)
def test_polygon_interior(latitude: float, longitude: float, expected: bool) -> None:
    """Test points clearly inside or outside a polygon."""
    assert covers({"type": "Polygon", "coordinates": [SQUARE]}, latitude, longitude) is expected


def test_vertex_is_covered() -> None:
    """Test a polygon vertex counts as covered."""
    assert covers({"type": "Polygon", "coordinates": [SQUARE]}, 12.0, 77.0)


def test_meridian_edge_is_covered() -> None:
    """Test a point on an edge along a meridian counts as covered."""
    assert ring_on_boundary(SQUARE, 12.5, 77.0)
    assert covers({"type": "Polygon", "coordinates": [SQUARE]}, 12.5, 78.0)


def test_edges_are_great_circles() -> None:
    """Test edges follow great circles, not parallels of latitude.

    The northern edge from (13, 77) to (13, 78) bulges towards the pole, so
    its midpoint on the parallel lies inside; the southern edge bulges away
    from the square, so its midpoint on the parallel lies outside.
    """
    polygon = {"type": "Polygon", "coordinates": [SQUARE]}

    assert covers(polygon, 13.0, 77.5)
    assert not covers(polygon, 12.0, 77.5)


def test_ring_contains_excludes_boundary() -> None:
    """Test strict containment for a ring."""
    assert ring_contains(SQUARE, 12.5, 77.5)
    assert not ring_contains(SQUARE, 14.0, 77.5)


def test_polygon_hole() -> None:
    """Test points inside a hole are not covered but its boundary is."""
    rings = [SQUARE, HOLE]

    assert not polygon_covers(rings, 12.5, 77.5)
    assert polygon_covers(rings, 12.5, 77.4)
    assert polygon_covers(rings, 12.2, 77.2)


def test_multipolygon() -> None:
    """Test a MultiPolygon covers points in any of its parts."""
    other = [[10.0, 50.0], [11.0, 50.0], [11.0, 51.0], [10.0, 51.0], [10.0, 50.0]]
    geometry = {"type": "MultiPolygon", "coordinates": [[SQUARE], [other]]}

    assert covers(geometry, 12.5, 77.5)
    assert covers(geometry, 50.5, 10.5)
    assert not covers(geometry, 30.0, 40.0)


def test_polygon_across_antimeridian() -> None:
    """Test a polygon spanning the antimeridian."""
    ring = [[179.0, -1.0], [-179.0, -1.0], [-179.0, 1.0], [179.0, 1.0], [179.0, -1.0]]
    geometry = {"type": "Polygon", "coordinates": [ring]}

    assert covers(geometry, 0.0, 180.0)
    assert covers(geometry, 0.5, -179.5)
    assert not covers(geometry, 0.0, 0.0)


def test_unsupported_geometry() -> None:
    """Test non-polygon geometries are rejected."""
    with pytest.raises(ValueError, match="Unsupported geofence geometry type"):
        covers({"type": "Point", "coordinates": [77.5, 12.5]}, 12.5, 77.5)


def test_antipode_of_polygon_is_not_covered() -> None:
    """Test the point opposite a zone on the globe lies outside it."""
    polygon = {"type": "Polygon", "coordinates": [SQUARE]}

    assert not ring_contains(SQUARE, -12.5, -102.5)
    assert not covers(polygon, -12.5, -102.5)
    assert not covers(polygon, -12.2, -102.8)


def test_antipode_of_hole_stays_outside() -> None:
    """Test the point opposite a hole is outside both the hole and the shell."""
    assert not polygon_covers([SQUARE, HOLE], -12.5, -102.5)
