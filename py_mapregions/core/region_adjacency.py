"""
Region adjacency for network-building rules.

Regions count as adjacent when any of their seeds are close to each other.
The relation is computed per region and is symmetric for the seed-distance
rule; ``symmetrize_adjacency`` and ``validate_topology`` exist for adjacency
maps that come from elsewhere (stored map data, cell-neighbor derivation).
"""

from typing import Dict, List, Mapping, NamedTuple, Optional, Sequence

import structlog

from ..config import settings
from .geometry import distance
from .models import MapDefinition
from .voronoi_graph import VoronoiDiagram

logger = structlog.get_logger()


class TopologyReport(NamedTuple):
    """Outcome of an adjacency consistency check."""
    valid: bool
    warnings: List[str]


def compute_region_adjacencies(map_definition: MapDefinition,
                               threshold: Optional[float] = None) -> Dict[str, List[str]]:
    """
    Adjacent regions by seed distance.

    Args:
        map_definition: Map with seeds and regions
        threshold: Seeds strictly closer than this link their regions,
            defaults to settings.region_adjacency_threshold

    Returns:
        Region id -> adjacent region ids, in map order
    """
    threshold = settings.region_adjacency_threshold if threshold is None else threshold
    members = {r.id: map_definition.seeds_in_region(r.id) for r in map_definition.regions}

    adjacency: Dict[str, List[str]] = {}
    for region in map_definition.regions:
        linked: List[str] = []
        for other in map_definition.regions:
            if other.id == region.id:
                continue
            if any(
                distance(a.position, b.position) < threshold
                for a in members[region.id]
                for b in members[other.id]
            ):
                linked.append(other.id)
        adjacency[region.id] = linked

    return adjacency


def adjacency_from_diagram(diagram: VoronoiDiagram,
                           assignment: Mapping[str, Sequence[str]]) -> Dict[str, List[str]]:
    """
    Adjacent regions by cell neighborhood.

    Args:
        diagram: Tessellation with cell neighbor lists
        assignment: Region id -> member cell (seed) ids

    Returns:
        Region id -> regions owning a neighbor of any member cell
    """
    owner = {cell_id: region_id for region_id, cells in assignment.items() for cell_id in cells}
    adjacency: Dict[str, List[str]] = {}
    for region_id, cells in assignment.items():
        linked: List[str] = []
        for cell_id in cells:
            cell = diagram.cells.get(cell_id)
            if cell is None:
                continue
            for neighbor in cell.neighbors:
                other = owner.get(neighbor)
                if other is not None and other != region_id and other not in linked:
                    linked.append(other)
        adjacency[region_id] = linked
    return adjacency


def symmetrize_adjacency(adjacency: Mapping[str, Sequence[str]]) -> Dict[str, List[str]]:
    """Union of both directions; keys referenced only as targets are added."""
    result: Dict[str, List[str]] = {key: list(dict.fromkeys(values)) for key, values in adjacency.items()}
    for key, values in adjacency.items():
        for other in values:
            targets = result.setdefault(other, [])
            if key not in targets:
                targets.append(key)
    return result


def validate_topology(adjacency: Mapping[str, Sequence[str]]) -> TopologyReport:
    """
    Check that every adjacency points at a known region and is bidirectional.

    Returns:
        TopologyReport with one warning per problem found
    """
    warnings: List[str] = []
    for region_id, linked in adjacency.items():
        for other in linked:
            if other not in adjacency:
                warnings.append(f'Region "{region_id}" references non-existent adjacent region "{other}"')
            elif region_id not in adjacency[other]:
                warnings.append(f'Region "{region_id}" -> "{other}" is not bidirectional')

    if warnings:
        logger.warning("Adjacency topology issues", count=len(warnings))
    return TopologyReport(valid=not warnings, warnings=warnings)
