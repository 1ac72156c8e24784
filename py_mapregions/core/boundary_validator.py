"""Seed placement checks against the country outline."""

from typing import Any, Optional, Sequence, Set

import structlog

from .geometry import Point, ensure_finite, ensure_finite_ring, point_in_polygon
from .voronoi_graph import normalize_seeds

logger = structlog.get_logger()


def usable_boundary(boundary: Optional[Sequence[Point]]) -> bool:
    """
    True if the boundary can enclose anything.

    Missing rings and rings with fewer than 3 points are treated as no
    boundary. A ring with a non-finite vertex raises GeometryInputError.
    """
    if not boundary or len(boundary) < 3:
        return False
    ensure_finite_ring(boundary, label="boundary")
    return True


def is_inside(point: Point, boundary: Optional[Sequence[Point]]) -> bool:
    """Ray-casting test; with no usable boundary every point counts as inside."""
    ensure_finite(point[0], point[1])
    if not usable_boundary(boundary):
        return True
    return point_in_polygon(point, boundary)


def find_outside(seeds: Sequence[Any], boundary: Optional[Sequence[Point]]) -> Set[str]:
    """
    Ids of seeds lying outside the boundary polygon.

    Advisory only. A missing, empty or degenerate boundary flags nothing.

    Args:
        seeds: Seed records (see ``normalize_seeds``)
        boundary: Closed outline ring in canvas units, or None

    Returns:
        Set of out-of-bounds seed ids

    Raises:
        GeometryInputError: If a seed or boundary vertex is not finite
    """
    seed_list = normalize_seeds(seeds)
    if not usable_boundary(boundary):
        return set()

    outside = {
        seed_id for seed_id, x, y in seed_list
        if not point_in_polygon((x, y), boundary)
    }
    if outside:
        logger.info("Seeds outside boundary", count=len(outside))
    return outside
