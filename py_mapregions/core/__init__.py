"""
Core region partitioning functionality.
"""

from .exceptions import GeometryInputError, OutlineFormatError
from .models import Seed, Region, RegionDraft, MapDefinition, Connection, assign_region_ids
from .voronoi_graph import (CanvasBounds, VoronoiCell, VoronoiDiagram, tessellate,
                            symmetrize_neighbors, generate_or_reuse_diagram, find_cell)
from .region_renderer import RenderedCell, RenderedRegion, compute_region_cells, render_regions
from .cell_grouper import GeneratedRegion, group_cells_into_regions, merge_cells, regenerate_regions
from .region_adjacency import (TopologyReport, compute_region_adjacencies, adjacency_from_diagram,
                               symmetrize_adjacency, validate_topology)
from .geo_outline import (OutlineProjection, polygons_from_geojson, load_geojson,
                          select_best_polygon, project, project_point, build_boundary)
from .boundary_validator import find_outside, is_inside
from .partition_cache import PartitionCache
from .recompute import RequestTokens, RecomputeScheduler

__all__ = ['GeometryInputError', 'OutlineFormatError',
           'Seed', 'Region', 'RegionDraft', 'MapDefinition', 'Connection', 'assign_region_ids',
           'CanvasBounds', 'VoronoiCell', 'VoronoiDiagram', 'tessellate', 'symmetrize_neighbors',
           'generate_or_reuse_diagram', 'find_cell',
           'RenderedCell', 'RenderedRegion', 'compute_region_cells', 'render_regions',
           'GeneratedRegion', 'group_cells_into_regions', 'merge_cells', 'regenerate_regions',
           'TopologyReport', 'compute_region_adjacencies', 'adjacency_from_diagram',
           'symmetrize_adjacency', 'validate_topology',
           'OutlineProjection', 'polygons_from_geojson', 'load_geojson', 'select_best_polygon',
           'project', 'project_point', 'build_boundary',
           'find_outside', 'is_inside', 'PartitionCache', 'RequestTokens', 'RecomputeScheduler']
