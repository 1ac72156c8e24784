"""
Offline region generation from raw Voronoi cells.

Used when a map has seeds but no human-assigned regions yet: cells are grown
into contiguous groups over the neighbor graph, each group's outline is the
convex hull of its cells, and region adjacency follows from cell adjacency.
The live editor never goes through this path.
"""

from __future__ import annotations

import math
from collections import deque
from typing import Any, Dict, List, Optional, Sequence, Tuple

import structlog
from pydantic import BaseModel, Field

from .exceptions import GeometryInputError
from .geometry import Point, convex_hull, distance
from .region_adjacency import adjacency_from_diagram
from .voronoi_graph import CanvasBounds, VoronoiDiagram, tessellate

logger = structlog.get_logger()


class GeneratedRegion(BaseModel):
    """Region invented by the grouper."""

    id: str = Field(description="Generated region identifier")
    name: str = Field(description="Region name")
    color: str = Field(description="Region color in hex format")
    seed_ids: List[str] = Field(default_factory=list, description="Cells (seeds) in the region")
    polygon: List[Tuple[float, float]] = Field(
        default_factory=list, description="Convex hull of the member cells"
    )
    adjacencies: List[str] = Field(default_factory=list, description="Adjacent generated regions")


def group_cells_into_regions(diagram: VoronoiDiagram, target_count: int) -> Dict[str, List[str]]:
    """
    Cluster cells into roughly ``target_count`` contiguous groups.

    Greedy breadth-first growth: the first unassigned cell (in diagram order)
    starts a group that absorbs unassigned neighbors until it holds
    ``ceil(total / target_count)`` cells or runs out of neighbors. This
    repeats until ``target_count`` groups exist. Cells still unassigned
    afterwards join the group owning the nearest seed. Group sizes may be
    uneven; this is a heuristic, not a balanced partition.

    Args:
        diagram: Tessellation with neighbor lists
        target_count: Desired number of groups (>= 1)

    Returns:
        Mapping ``region_<n>`` -> member cell ids
    """
    if target_count < 1:
        raise GeometryInputError(f"target_count must be at least 1, got {target_count}")

    regions: Dict[str, List[str]] = {}
    if not diagram.cells:
        return regions

    target_size = math.ceil(len(diagram.cells) / target_count)
    assigned = set()

    for cell_id in diagram.cells:
        if cell_id in assigned:
            continue
        if len(regions) >= target_count:
            break

        members = [cell_id]
        assigned.add(cell_id)
        queue = deque([cell_id])

        while queue and len(members) < target_size:
            current = queue.popleft()
            for neighbor in diagram.cells[current].neighbors:
                if len(members) >= target_size:
                    break
                if neighbor in assigned or neighbor not in diagram.cells:
                    continue
                assigned.add(neighbor)
                members.append(neighbor)
                queue.append(neighbor)

        regions[f"region_{len(regions)}"] = members

    # Leftovers: cells in components no group reached
    for cell_id, cell in diagram.cells.items():
        if cell_id in assigned:
            continue
        nearest = _nearest_region(cell.seed, regions, diagram)
        if nearest is not None:
            regions[nearest].append(cell_id)
            assigned.add(cell_id)

    logger.info("Cells grouped", cells=len(diagram.cells), regions=len(regions),
                target=target_count)
    return regions


def _nearest_region(seed: Point, regions: Dict[str, List[str]],
                    diagram: VoronoiDiagram) -> Optional[str]:
    best: Optional[str] = None
    best_dist = math.inf
    for region_id, members in regions.items():
        for member in members:
            d = distance(seed, diagram.cells[member].seed)
            if d < best_dist:
                best_dist = d
                best = region_id
    return best


def merge_cells(cell_ids: Sequence[str], diagram: VoronoiDiagram) -> List[Point]:
    """Convex hull of all vertices of the given cells; unknown ids are skipped."""
    vertices: List[Point] = []
    for cell_id in cell_ids:
        cell = diagram.cells.get(cell_id)
        if cell is not None:
            vertices.extend(cell.vertices)
    return convex_hull(vertices)


def regenerate_regions(seeds: Sequence[Any], names: Sequence[str], colors: Sequence[str],
                       bounds: Optional[CanvasBounds] = None) -> List[GeneratedRegion]:
    """
    Invent regions for a seed set from geometry alone.

    Args:
        seeds: Seed records (see ``normalize_seeds``)
        names: One name per wanted region; its length is the target count
        colors: Colors matched to ``names`` by position (cycled if shorter)
        bounds: Canvas extent

    Returns:
        At most ``len(names)`` generated regions (fewer when there are fewer seeds)
    """
    if not names:
        return []

    diagram = tessellate(seeds, bounds or CanvasBounds())
    groups = group_cells_into_regions(diagram, len(names))
    adjacency = adjacency_from_diagram(diagram, groups)

    regions: List[GeneratedRegion] = []
    for index, (group_id, members) in enumerate(groups.items()):
        regions.append(
            GeneratedRegion(
                id=group_id,
                name=names[index],
                color=colors[index % len(colors)] if colors else "#999999",
                seed_ids=list(members),
                polygon=merge_cells(members, diagram),
                adjacencies=adjacency[group_id],
            )
        )

    return regions
