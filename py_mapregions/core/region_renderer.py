"""
Region rendering from Voronoi cells.

A region is drawn as the collection of its member cells. Cells never overlap,
so the region fill is simply every member polygon. For the outline, each cell
edge that is shared (in reverse orientation) with a sibling cell of the same
region is hidden; the remaining exposed edges are stitched into polylines.
Edges that cannot be stitched are kept as separate sub-paths so nothing of
the outline is lost.

All geometry is in normalized 0-100 canvas units; SVG paths and centroids are
scaled to the map's pixel size.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import structlog
from shapely.geometry import Polygon
from shapely.ops import unary_union

from ..config import CANVAS_SIZE, settings
from .boundary_validator import usable_boundary
from .geometry import Point, bounding_box, point_in_polygon
from .models import MapDefinition, Region
from .voronoi_graph import CanvasBounds, VoronoiCell, VoronoiDiagram, tessellate

logger = structlog.get_logger()

Edge = Tuple[Point, Point]


@dataclass
class RenderedCell:
    """One member cell of a rendered region."""
    cell_id: str
    polygon: List[Point]
    fill_path: str
    boundary_path: Optional[str] = None  # exposed edges only; None when fully interior


@dataclass
class RenderedRegion:
    """Drawable form of a region."""
    region: Region
    cells: List[RenderedCell] = field(default_factory=list)
    centroid: Point = (0.0, 0.0)  # pixel space

    @property
    def area(self) -> float:
        """Area of the union of member cells, in normalized units."""
        polygons = [Polygon(c.polygon) for c in self.cells if len(c.polygon) >= 3]
        if not polygons:
            return 0.0
        return float(unary_union(polygons).area)


def _scale(point: Point, width: float, height: float) -> Point:
    return (point[0] / CANVAS_SIZE * width, point[1] / CANVAS_SIZE * height)


def points_to_svg_path(points: Sequence[Point], width: float, height: float) -> str:
    """Closed SVG path for a polygon, scaled from 0-100 to the map size."""
    if len(points) < 2:
        return ""
    commands = []
    for i, pt in enumerate(points):
        x, y = _scale(pt, width, height)
        commands.append(f"{'M' if i == 0 else 'L'} {x:.4f} {y:.4f}")
    return " ".join(commands) + " Z"


def polylines_to_svg_path(polylines: Sequence[Sequence[Point]], width: float, height: float) -> str:
    """Open SVG path with one ``M`` sub-path per polyline."""
    commands = []
    for line in polylines:
        for i, pt in enumerate(line):
            x, y = _scale(pt, width, height)
            commands.append(f"{'M' if i == 0 else 'L'} {x:.4f} {y:.4f}")
    return " ".join(commands)


def _edge_key(p1: Point, p2: Point, decimals: int) -> str:
    return (f"{p1[0]:.{decimals}f},{p1[1]:.{decimals}f}-"
            f"{p2[0]:.{decimals}f},{p2[1]:.{decimals}f}")


def compute_exposed_edges(polygon: Sequence[Point], sibling_polygons: Sequence[Sequence[Point]],
                          decimals: Optional[int] = None) -> List[Edge]:
    """
    Edges of ``polygon`` not shared with any sibling polygon.

    An edge counts as shared when a sibling contains the same segment in the
    opposite direction, comparing coordinates rounded to ``decimals`` places.

    Args:
        polygon: Ring of the cell being outlined (open, no repeated first point)
        sibling_polygons: Rings of the other cells of the same region
        decimals: Rounding for edge matching, defaults to settings.edge_match_decimals

    Returns:
        Exposed edges in ring order
    """
    decimals = settings.edge_match_decimals if decimals is None else decimals
    n = len(polygon)
    if n < 2:
        return []

    # Sibling edges stored reversed so a direct lookup finds shared segments
    shared = set()
    for other in sibling_polygons:
        m = len(other)
        for j in range(m):
            a, b = other[j], other[(j + 1) % m]
            shared.add(_edge_key(b, a, decimals))

    exposed: List[Edge] = []
    for i in range(n):
        p1, p2 = polygon[i], polygon[(i + 1) % n]
        if _edge_key(p1, p2, decimals) not in shared:
            exposed.append((p1, p2))
    return exposed


def chain_edges(edges: Sequence[Edge], tolerance: Optional[float] = None) -> List[List[Point]]:
    """
    Stitch edges into continuous polylines.

    Starting from the first unused edge, the edge whose start or end lies
    within ``tolerance`` (Manhattan distance) of the current end point is
    appended, repeatedly. When nothing connects, a new polyline is started
    from the next unused edge.

    Returns:
        Polylines in stitching order; every input edge appears in exactly one
    """
    tolerance = settings.chain_tolerance if tolerance is None else tolerance
    used = [False] * len(edges)
    polylines: List[List[Point]] = []

    for start in range(len(edges)):
        if used[start]:
            continue
        used[start] = True
        line = [edges[start][0], edges[start][1]]
        current = edges[start][1]

        extended = True
        while extended:
            extended = False
            for i, (p1, p2) in enumerate(edges):
                if used[i]:
                    continue
                d1 = abs(current[0] - p1[0]) + abs(current[1] - p1[1])
                d2 = abs(current[0] - p2[0]) + abs(current[1] - p2[1])
                if d1 < tolerance:
                    line.append(p2)
                    current = p2
                elif d2 < tolerance:
                    line.append(p1)
                    current = p1
                else:
                    continue
                used[i] = True
                extended = True
                break

        polylines.append(line)

    return polylines


def compute_cell_boundary_path(polygon: Sequence[Point], sibling_polygons: Sequence[Sequence[Point]],
                               width: float, height: float) -> Optional[str]:
    """SVG path of a cell's exposed edges, or None when every edge is interior."""
    if len(polygon) < 2:
        return None
    edges = compute_exposed_edges(polygon, sibling_polygons)
    if not edges:
        return None
    return polylines_to_svg_path(chain_edges(edges), width, height)


def calculate_centroid(polygons: Sequence[Sequence[Point]], width: float, height: float,
                       boundary: Optional[Sequence[Point]] = None) -> Point:
    """
    Label position for a region, in pixel space.

    Uses the bounding-box center of all cell vertices. If a boundary polygon
    is given and that center falls outside it, the average of the cell
    vertices that lie inside the boundary is used instead (when there are
    any). A region without vertices is placed at the canvas center. Boundaries
    with fewer than 3 points are ignored; a non-finite boundary vertex raises
    GeometryInputError.
    """
    vertices = [pt for poly in polygons for pt in poly]
    box = bounding_box(vertices)
    if box is None:
        return (width / 2.0, height / 2.0)

    min_x, min_y, max_x, max_y = box
    center = ((min_x + max_x) / 2.0, (min_y + max_y) / 2.0)

    if usable_boundary(boundary) and not point_in_polygon(center, boundary):
        inside = [pt for pt in vertices if point_in_polygon(pt, boundary)]
        if inside:
            center = (
                sum(p[0] for p in inside) / len(inside),
                sum(p[1] for p in inside) / len(inside),
            )
        else:
            logger.debug("Region centroid outside boundary with no interior vertices")

    return _scale(center, width, height)


def compute_region_cells(region: Region, cells: Sequence[VoronoiCell], width: float,
                         height: float, boundary: Optional[Sequence[Point]] = None) -> RenderedRegion:
    """
    Render one region from its member cells.

    Args:
        region: The region being drawn
        cells: Voronoi cells of the region's seeds (only these are compared
            for shared edges; cells of other regions are ignored)
        width: Map width in pixels
        height: Map height in pixels
        boundary: Optional country outline in normalized units for centroid
            correction

    Returns:
        RenderedRegion with fill and exposed-boundary paths per cell
    """
    polygons = [list(cell.vertices) for cell in cells]
    rendered_cells: List[RenderedCell] = []

    for index, cell in enumerate(cells):
        polygon = polygons[index]
        siblings = [p for j, p in enumerate(polygons) if j != index]
        rendered_cells.append(
            RenderedCell(
                cell_id=cell.id,
                polygon=polygon,
                fill_path=points_to_svg_path(polygon, width, height),
                boundary_path=compute_cell_boundary_path(polygon, siblings, width, height),
            )
        )

    centroid = calculate_centroid(polygons, width, height, boundary)
    return RenderedRegion(region=region, cells=rendered_cells, centroid=centroid)


def render_regions(map_definition: MapDefinition, boundary: Optional[Sequence[Point]] = None,
                   diagram: Optional[VoronoiDiagram] = None) -> List[RenderedRegion]:
    """
    Render every region of a map.

    All seeds of the map are tessellated together (unless a diagram for them
    is supplied), then each region collects the cells of its own seeds.
    Regions that own no cells are left out.

    Args:
        map_definition: Seeds, regions and pixel size of the map
        boundary: Optional country outline in normalized units
        diagram: Precomputed tessellation of the map's seeds

    Returns:
        Rendered regions in map order
    """
    if not map_definition.seeds or not map_definition.regions:
        return []

    if diagram is None:
        diagram = tessellate(map_definition.seeds, CanvasBounds())

    rendered: List[RenderedRegion] = []
    for region in map_definition.regions:
        cells = [diagram.cells[sid] for sid in region.seed_ids if sid in diagram.cells]
        if not cells:
            continue
        rendered.append(
            compute_region_cells(region, cells, map_definition.width, map_definition.height, boundary)
        )

    logger.info("Regions rendered", map_id=map_definition.id, regions=len(rendered))
    return rendered


def region_polygons(rendered: Sequence[RenderedRegion]) -> Dict[str, List[List[Point]]]:
    """Member cell polygons per region id, for geometric checks."""
    return {r.region.id: [list(c.polygon) for c in r.cells] for r in rendered}
