"""Tests for geometry primitives."""

import math

import pytest

from py_mapregions.core.exceptions import GeometryInputError
from py_mapregions.core.geometry import (
    bbox_center, bounding_box, close_ring, convex_hull, distance, ensure_finite,
    is_convex, point_in_polygon, polygon_area, polygon_centroid, polygon_signed_area,
    rings_close, ring_vertex_centroid,
)

SQUARE = [(0.0, 0.0), (100.0, 0.0), (100.0, 100.0), (0.0, 100.0)]


class TestConvexHull:
    """Test the monotone chain hull."""

    def test_interior_points_removed(self):
        points = SQUARE + [(50.0, 50.0), (10.0, 90.0), (25.0, 25.0)]
        hull = convex_hull(points)

        assert set(hull) == set(SQUARE)
        assert len(hull) == 4

    def test_counter_clockwise(self):
        hull = convex_hull([(0, 0), (0, 10), (10, 10), (10, 0), (5, 5)])
        assert polygon_signed_area(hull) > 0

    def test_collinear_points_dropped(self):
        hull = convex_hull([(0, 0), (5, 0), (10, 0), (10, 10), (0, 10)])
        assert (5.0, 0.0) not in hull
        assert len(hull) == 4

    def test_duplicates(self):
        hull = convex_hull([(0, 0), (0, 0), (4, 0), (4, 0), (0, 4)])
        assert len(hull) == 3

    def test_small_inputs_unchanged(self):
        assert convex_hull([]) == []
        assert convex_hull([(1, 2)]) == [(1.0, 2.0)]
        assert convex_hull([(1, 2), (3, 4)]) == [(1.0, 2.0), (3.0, 4.0)]

    def test_hull_is_convex(self):
        points = [(math.cos(a) * 10, math.sin(a) * 10) for a in range(0, 360, 7)]
        assert is_convex(convex_hull(points))


class TestPointInPolygon:
    """Test the ray casting check."""

    def test_inside(self):
        assert point_in_polygon((50.0, 50.0), SQUARE)

    def test_outside(self):
        assert not point_in_polygon((150.0, 50.0), SQUARE)
        assert not point_in_polygon((50.0, -1.0), SQUARE)

    def test_closed_ring(self):
        closed = SQUARE + [SQUARE[0]]
        assert point_in_polygon((50.0, 50.0), closed)
        assert not point_in_polygon((150.0, 50.0), closed)

    def test_concave_polygon(self):
        # U shape opening upwards
        shape = [(0, 0), (30, 0), (30, 30), (20, 30), (20, 10), (10, 10), (10, 30), (0, 30)]
        assert point_in_polygon((5, 20), shape)
        assert not point_in_polygon((15, 20), shape)


class TestAreasAndCentroids:
    """Test shoelace area and centroid helpers."""

    def test_area(self):
        assert polygon_area(SQUARE) == pytest.approx(10000.0)
        assert polygon_area(list(reversed(SQUARE))) == pytest.approx(10000.0)

    def test_signed_area_orientation(self):
        assert polygon_signed_area(SQUARE) > 0
        assert polygon_signed_area(list(reversed(SQUARE))) < 0

    def test_degenerate_area(self):
        assert polygon_area([(0, 0), (1, 1)]) == 0.0

    def test_centroid(self):
        cx, cy = polygon_centroid(SQUARE)
        assert cx == pytest.approx(50.0)
        assert cy == pytest.approx(50.0)

    def test_centroid_of_collinear_points_falls_back(self):
        assert polygon_centroid([(0, 0), (2, 0), (4, 0)]) == pytest.approx((2.0, 0.0))

    def test_vertex_centroid(self):
        assert ring_vertex_centroid([]) == (0.0, 0.0)
        assert ring_vertex_centroid([(0, 0), (4, 0), (4, 2)]) == pytest.approx((8 / 3, 2 / 3))


class TestBoundingBox:
    """Test bounding box helpers."""

    def test_box(self):
        assert bounding_box([(3, 4), (-1, 10), (5, 0)]) == (-1, 0, 5, 10)

    def test_empty(self):
        assert bounding_box([]) is None
        assert bbox_center([]) is None

    def test_center(self):
        assert bbox_center(SQUARE) == (50.0, 50.0)


class TestRings:
    """Test ring closure."""

    def test_rings_close_within_tolerance(self):
        assert rings_close([(0, 0), (1, 0), (0.005, 0.0)])
        assert not rings_close([(0, 0), (1, 0), (0.5, 0.0)])
        assert not rings_close([])

    def test_close_ring_appends_first_point(self):
        closed = close_ring(SQUARE)
        assert closed[-1] == closed[0]
        assert len(closed) == len(SQUARE) + 1

    def test_close_ring_leaves_closed_ring(self):
        ring = SQUARE + [SQUARE[0]]
        assert close_ring(ring) == ring


class TestFiniteChecks:
    """Test coordinate validation."""

    def test_finite_passes(self):
        ensure_finite(1.0, 2.0)

    @pytest.mark.parametrize("x,y", [(float("nan"), 0.0), (0.0, float("inf")), (-float("inf"), 1.0)])
    def test_non_finite_raises(self, x, y):
        with pytest.raises(GeometryInputError):
            ensure_finite(x, y)

    def test_distance(self):
        assert distance((0, 0), (3, 4)) == pytest.approx(5.0)
