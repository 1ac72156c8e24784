"""
Geometry primitives for the partitioning engine.

Points are plain ``(x, y)`` tuples in normalized canvas units (0-100 on each
axis). Every function here is pure.
"""

import math
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .exceptions import GeometryInputError

Point = Tuple[float, float]


def ensure_finite(x: float, y: float, label: str = "point") -> None:
    """Raise GeometryInputError if either coordinate is NaN or infinite."""
    if not (math.isfinite(x) and math.isfinite(y)):
        raise GeometryInputError(f"{label} has non-finite coordinates ({x}, {y})")


def ensure_finite_ring(ring: Iterable[Point], label: str = "ring") -> None:
    """Raise GeometryInputError if any vertex has a NaN or infinite coordinate."""
    for index, point in enumerate(ring):
        ensure_finite(point[0], point[1], label=f"{label} vertex {index}")


def distance(p1: Point, p2: Point) -> float:
    """Euclidean distance between two points."""
    return math.hypot(p1[0] - p2[0], p1[1] - p2[1])


def cross(o: Point, a: Point, b: Point) -> float:
    """Z component of the cross product of vectors OA and OB."""
    return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])


def convex_hull(points: Iterable[Point]) -> List[Point]:
    """
    Compute the convex hull of a point set with a Graham (monotone chain) scan.

    Args:
        points: Input points, any order, duplicates allowed

    Returns:
        Hull vertices in counter-clockwise order without a repeated closing
        point. Inputs with fewer than 3 points are returned unchanged.
    """
    pts = [(float(p[0]), float(p[1])) for p in points]
    if len(pts) < 3:
        return pts

    pts.sort()

    lower: List[Point] = []
    for p in pts:
        while len(lower) >= 2 and cross(lower[-2], lower[-1], p) <= 0:
            lower.pop()
        lower.append(p)

    upper: List[Point] = []
    for p in reversed(pts):
        while len(upper) >= 2 and cross(upper[-2], upper[-1], p) <= 0:
            upper.pop()
        upper.append(p)

    # Last point of each half is the first point of the other
    return lower[:-1] + upper[:-1]


def point_in_polygon(point: Point, polygon: Sequence[Point]) -> bool:
    """
    Ray casting point-in-polygon test.

    A horizontal ray is cast from the point; an odd number of edge crossings
    means inside. The ring may be open or explicitly closed. Points exactly on
    an edge may be reported either way.
    """
    x, y = point[0], point[1]
    inside = False
    n = len(polygon)
    j = n - 1
    for i in range(n):
        xi, yi = polygon[i][0], polygon[i][1]
        xj, yj = polygon[j][0], polygon[j][1]
        if (yi > y) != (yj > y):
            x_cross = (xj - xi) * (y - yi) / (yj - yi) + xi
            if x < x_cross:
                inside = not inside
        j = i
    return inside


def polygon_signed_area(ring: Sequence[Point]) -> float:
    """Signed shoelace area; positive for counter-clockwise rings (y up)."""
    n = len(ring)
    if n < 3:
        return 0.0
    area = 0.0
    for i in range(n):
        x1, y1 = ring[i][0], ring[i][1]
        x2, y2 = ring[(i + 1) % n][0], ring[(i + 1) % n][1]
        area += x1 * y2 - x2 * y1
    return area / 2.0


def polygon_area(ring: Sequence[Point]) -> float:
    """Absolute shoelace area of a ring."""
    return abs(polygon_signed_area(ring))


def ring_vertex_centroid(ring: Sequence[Point]) -> Point:
    """Plain average of ring vertices; (0, 0) for an empty ring."""
    if not ring:
        return (0.0, 0.0)
    xs = sum(p[0] for p in ring)
    ys = sum(p[1] for p in ring)
    return (xs / len(ring), ys / len(ring))


def polygon_centroid(ring: Sequence[Point]) -> Point:
    """Compute the area-weighted centroid of a polygon.

    Falls back to the vertex mean for rings with fewer than 3 points or
    (near) zero area.
    """
    if len(ring) < 3:
        return ring_vertex_centroid(ring)

    vertices = np.asarray(ring, dtype=float)
    x = vertices[:, 0]
    y = vertices[:, 1]
    x_next = np.roll(x, -1)
    y_next = np.roll(y, -1)
    a = x * y_next - x_next * y
    area = a.sum()

    if abs(area) < 1e-10:
        return ring_vertex_centroid(ring)

    area *= 0.5
    cx = ((x + x_next) * a).sum() / (6.0 * area)
    cy = ((y + y_next) * a).sum() / (6.0 * area)
    return (float(cx), float(cy))


def bounding_box(points: Iterable[Point]) -> Optional[Tuple[float, float, float, float]]:
    """Return (min_x, min_y, max_x, max_y), or None for no points."""
    min_x = min_y = math.inf
    max_x = max_y = -math.inf
    seen = False
    for p in points:
        seen = True
        min_x = min(min_x, p[0])
        max_x = max(max_x, p[0])
        min_y = min(min_y, p[1])
        max_y = max(max_y, p[1])
    if not seen:
        return None
    return (min_x, min_y, max_x, max_y)


def bbox_center(points: Iterable[Point]) -> Optional[Point]:
    """Center of the bounding box of the points, or None for no points."""
    box = bounding_box(points)
    if box is None:
        return None
    min_x, min_y, max_x, max_y = box
    return ((min_x + max_x) / 2.0, (min_y + max_y) / 2.0)


def is_convex(ring: Sequence[Point]) -> bool:
    """True if the ring turns consistently in one direction."""
    n = len(ring)
    if n < 3:
        return False
    sign = 0
    for i in range(n):
        c = cross(ring[i], ring[(i + 1) % n], ring[(i + 2) % n])
        if c == 0:
            continue
        current = 1 if c > 0 else -1
        if sign == 0:
            sign = current
        elif current != sign:
            return False
    return sign != 0


def rings_close(ring: Sequence[Point], tolerance: float = 0.01) -> bool:
    """True if first and last points coincide within tolerance on each axis."""
    if not ring:
        return False
    first, last = ring[0], ring[-1]
    return abs(first[0] - last[0]) <= tolerance and abs(first[1] - last[1]) <= tolerance


def close_ring(ring: Sequence[Point], tolerance: float = 0.01) -> List[Point]:
    """Return a copy of the ring with the first point appended if it is open."""
    closed = list(ring)
    if closed and not rings_close(closed, tolerance):
        closed.append(closed[0])
    return closed
