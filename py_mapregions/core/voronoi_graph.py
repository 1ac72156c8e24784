"""Grid-sampled Voronoi tessellation of the map canvas."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Tuple

import numpy as np
import structlog
from scipy.spatial import cKDTree

from ..config import CANVAS_SIZE, settings
from .exceptions import GeometryInputError
from .geometry import Point, convex_hull, ensure_finite

logger = structlog.get_logger()


class CanvasBounds(NamedTuple):
    """Extent of the sampled canvas in normalized units."""
    width: float = CANVAS_SIZE
    height: float = CANVAS_SIZE


@dataclass
class VoronoiCell:
    """One seed's share of the canvas."""
    id: str
    seed: Point
    vertices: List[Point] = field(default_factory=list)  # convex hull, CCW; empty if degenerate
    neighbors: List[str] = field(default_factory=list)
    sample_count: int = 0

    @property
    def is_empty(self) -> bool:
        return len(self.vertices) < 3


@dataclass
class VoronoiDiagram:
    """Tessellation result: one cell per seed, in seed order.

    The diagram is derived data. It is never edited in place; a changed seed
    set produces a new diagram.
    """
    cells: Dict[str, VoronoiCell]
    bounds: CanvasBounds
    resolution: float
    adjacency_threshold: float

    @property
    def seed_positions(self) -> Dict[str, Point]:
        return {cell_id: cell.seed for cell_id, cell in self.cells.items()}

    def neighbor_map(self) -> Dict[str, List[str]]:
        return {cell_id: list(cell.neighbors) for cell_id, cell in self.cells.items()}

    def should_regenerate(self, seeds: Sequence[Any], bounds: CanvasBounds,
                          resolution: Optional[float] = None) -> bool:
        """Check whether a diagram for these inputs would differ from this one."""
        resolution = resolution if resolution is not None else settings.sample_resolution
        same_bounds = tuple(self.bounds) == tuple(bounds)
        same_resolution = self.resolution == resolution
        same_seeds = [(sid, (x, y)) for sid, x, y in normalize_seeds(seeds)] == [
            (cell_id, cell.seed) for cell_id, cell in self.cells.items()
        ]
        return not (same_bounds and same_resolution and same_seeds)


def normalize_seeds(seeds: Iterable[Any]) -> List[Tuple[str, float, float]]:
    """
    Convert seed records into ``(id, x, y)`` triples.

    Accepts ``Seed`` models (or anything with ``id``/``x``/``y`` attributes),
    mappings with ``x``/``y`` and an optional ``id``, and bare ``(x, y)``
    pairs. Seeds without an id are named ``cell_<index>``. When an id repeats,
    the first occurrence is kept.
    """
    result: List[Tuple[str, float, float]] = []
    seen = set()
    for index, seed in enumerate(seeds):
        if isinstance(seed, Mapping):
            seed_id, x, y = seed.get("id"), seed["x"], seed["y"]
        elif hasattr(seed, "x") and hasattr(seed, "y"):
            seed_id, x, y = getattr(seed, "id", None), seed.x, seed.y
        else:
            seed_id = None
            x, y = seed[0], seed[1]

        try:
            x, y = float(x), float(y)
        except (TypeError, ValueError) as e:
            raise GeometryInputError(f"seed {index} has non-numeric coordinates") from e
        seed_id = f"cell_{index}" if seed_id is None or seed_id == "" else str(seed_id)
        ensure_finite(x, y, label=f"seed {seed_id}")

        if seed_id in seen:
            logger.warning("Duplicate seed id ignored", seed_id=seed_id)
            continue
        seen.add(seed_id)
        result.append((seed_id, x, y))
    return result


def sample_canvas(bounds: CanvasBounds, resolution: float) -> np.ndarray:
    """
    Regular sample grid covering ``[0, width] x [0, height]`` inclusive.

    Args:
        bounds: Canvas extent
        resolution: Distance between neighbouring samples

    Returns:
        Array of [x, y] sample coordinates
    """
    if not (resolution > 0 and np.isfinite(resolution)):
        raise GeometryInputError(f"resolution must be a positive number, got {resolution}")
    if not (bounds.width > 0 and bounds.height > 0
            and np.isfinite(bounds.width) and np.isfinite(bounds.height)):
        raise GeometryInputError(f"canvas bounds must be positive and finite, got {tuple(bounds)}")

    nx = int(np.floor(bounds.width / resolution + 1e-9))
    ny = int(np.floor(bounds.height / resolution + 1e-9))
    xs = np.arange(nx + 1) * resolution
    ys = np.arange(ny + 1) * resolution
    gx, gy = np.meshgrid(xs, ys, indexing="ij")
    return np.column_stack([gx.ravel(), gy.ravel()])


def assign_samples(samples: np.ndarray, seed_xy: np.ndarray, chunk_size: int = 16384) -> np.ndarray:
    """
    Index of the nearest seed for every sample.

    Ties go to the lowest seed index (first seen wins), which is what
    ``np.argmin`` returns.
    """
    labels = np.empty(len(samples), dtype=np.int64)
    for start in range(0, len(samples), chunk_size):
        block = samples[start:start + chunk_size]
        diff = block[:, None, :] - seed_xy[None, :, :]
        dist2 = np.einsum("ijk,ijk->ij", diff, diff)
        labels[start:start + chunk_size] = np.argmin(dist2, axis=1)
    return labels


def _row_extremes(points: np.ndarray) -> np.ndarray:
    """Leftmost and rightmost point of every sample row.

    Every other sample of a row lies between these two, so the convex hull of
    the extremes equals the hull of the full bucket.
    """
    order = np.lexsort((points[:, 0], points[:, 1]))
    ordered = points[order]
    ys = ordered[:, 1]
    starts = np.flatnonzero(np.r_[True, ys[1:] != ys[:-1]])
    ends = np.r_[starts[1:], len(ordered)] - 1
    return np.vstack([ordered[starts], ordered[ends]])


def build_cell_polygon(points: np.ndarray) -> List[Point]:
    """Convex hull of a bucket of samples; empty for fewer than 3 distinct hull points."""
    if len(points) == 0:
        return []
    hull = convex_hull(map(tuple, _row_extremes(points)))
    return hull if len(hull) >= 3 else []


def build_cell_neighbors(buckets: List[np.ndarray], threshold: float) -> List[List[int]]:
    """
    Neighbor lists from sample proximity.

    Two buckets are neighbors when any sample of one lies strictly closer
    than ``threshold`` to any sample of the other. Each unordered pair is
    tested once, so the result is symmetric.

    Args:
        buckets: Sample arrays per seed (may be empty)
        threshold: Adjacency distance

    Returns:
        Sorted neighbor index lists per seed
    """
    n = len(buckets)
    neighbors: List[List[int]] = [[] for _ in range(n)]
    trees = [cKDTree(b) if len(b) else None for b in buckets]
    boxes = [
        (b[:, 0].min(), b[:, 1].min(), b[:, 0].max(), b[:, 1].max()) if len(b) else None
        for b in buckets
    ]

    for i in range(n):
        if trees[i] is None:
            continue
        for j in range(i + 1, n):
            if trees[j] is None:
                continue
            # Bounding boxes further apart than the threshold cannot be neighbors
            bi, bj = boxes[i], boxes[j]
            gap_x = max(bj[0] - bi[2], bi[0] - bj[2], 0.0)
            gap_y = max(bj[1] - bi[3], bi[1] - bj[3], 0.0)
            if gap_x * gap_x + gap_y * gap_y >= threshold * threshold:
                continue

            small, large = (i, j) if len(buckets[i]) <= len(buckets[j]) else (j, i)
            dists, _ = trees[large].query(buckets[small], k=1, distance_upper_bound=threshold)
            if np.any(dists < threshold):
                neighbors[i].append(j)
                neighbors[j].append(i)

    return [sorted(nbrs) for nbrs in neighbors]


def tessellate(seeds: Sequence[Any], bounds: Optional[CanvasBounds] = None,
               resolution: Optional[float] = None,
               adjacency_threshold: Optional[float] = None) -> VoronoiDiagram:
    """
    Tessellate the canvas into one cell per seed.

    The canvas is sampled on a regular grid; each sample joins the bucket of
    its nearest seed and each bucket's convex hull becomes the cell polygon.
    This approximates the exact Voronoi diagram to within the sampling
    resolution. Cells are disjoint because each hull lies inside its seed's
    true (convex) Voronoi region.

    Args:
        seeds: Seed records, see ``normalize_seeds``
        bounds: Canvas extent, defaults to the normalized 100 x 100 canvas
        resolution: Sampling step, defaults to settings.sample_resolution
        adjacency_threshold: Neighbor distance, defaults to settings.adjacency_threshold

    Returns:
        VoronoiDiagram with a (possibly empty) cell for every seed
    """
    if bounds is None:
        bounds = CanvasBounds()
    else:
        bounds = CanvasBounds(*bounds)
    resolution = resolution if resolution is not None else settings.sample_resolution
    threshold = adjacency_threshold if adjacency_threshold is not None else settings.adjacency_threshold

    seed_list = normalize_seeds(seeds)
    if not seed_list:
        return VoronoiDiagram(cells={}, bounds=bounds, resolution=resolution,
                              adjacency_threshold=threshold)

    samples = sample_canvas(bounds, resolution)
    seed_xy = np.array([[x, y] for _, x, y in seed_list], dtype=float)

    logger.info("Tessellating canvas", seeds=len(seed_list), samples=len(samples),
                resolution=resolution)

    labels = assign_samples(samples, seed_xy)
    buckets = [samples[labels == i] for i in range(len(seed_list))]

    neighbor_indices = build_cell_neighbors(buckets, threshold)

    cells: Dict[str, VoronoiCell] = {}
    empty = 0
    for i, (seed_id, x, y) in enumerate(seed_list):
        polygon = build_cell_polygon(buckets[i])
        if not polygon:
            empty += 1
        cells[seed_id] = VoronoiCell(
            id=seed_id,
            seed=(x, y),
            vertices=polygon,
            neighbors=[seed_list[j][0] for j in neighbor_indices[i]],
            sample_count=len(buckets[i]),
        )

    logger.info("Tessellation complete", cells=len(cells), empty_cells=empty)

    return VoronoiDiagram(cells=cells, bounds=bounds, resolution=resolution,
                          adjacency_threshold=threshold)


def symmetrize_neighbors(diagram: VoronoiDiagram) -> VoronoiDiagram:
    """New diagram whose neighbor relation is the union of both directions."""
    linked: Dict[str, set] = {cell_id: set(cell.neighbors) for cell_id, cell in diagram.cells.items()}
    for cell_id, cell in diagram.cells.items():
        for other in cell.neighbors:
            if other in linked:
                linked[other].add(cell_id)

    order = {cell_id: i for i, cell_id in enumerate(diagram.cells)}
    cells = {
        cell_id: VoronoiCell(
            id=cell.id,
            seed=cell.seed,
            vertices=list(cell.vertices),
            neighbors=sorted(linked[cell_id], key=lambda c: order.get(c, len(order))),
            sample_count=cell.sample_count,
        )
        for cell_id, cell in diagram.cells.items()
    }
    return VoronoiDiagram(cells=cells, bounds=diagram.bounds, resolution=diagram.resolution,
                          adjacency_threshold=diagram.adjacency_threshold)


def generate_or_reuse_diagram(existing: Optional[VoronoiDiagram], seeds: Sequence[Any],
                              bounds: Optional[CanvasBounds] = None,
                              resolution: Optional[float] = None) -> VoronoiDiagram:
    """
    Tessellate, or hand back ``existing`` if its inputs are unchanged.

    Args:
        existing: Previously computed diagram (can be None)
        seeds: Current seed records
        bounds: Canvas extent
        resolution: Sampling step

    Returns:
        VoronoiDiagram - either new or reused
    """
    if bounds is None:
        bounds = CanvasBounds()
    if existing is None or existing.should_regenerate(seeds, bounds, resolution):
        logger.info("Generating new diagram")
        return tessellate(seeds, bounds, resolution)

    logger.info("Reusing existing diagram", cells=len(existing.cells))
    return existing


def find_cell(diagram: VoronoiDiagram, x: float, y: float) -> Optional[str]:
    """
    Id of the cell owning a canvas point (nearest seed, first seen on ties).

    Returns:
        Cell id, or None for an empty diagram
    """
    ensure_finite(x, y)
    if not diagram.cells:
        return None
    ids = list(diagram.cells)
    seed_xy = np.array([diagram.cells[c].seed for c in ids], dtype=float)
    index = assign_samples(np.array([[x, y]], dtype=float), seed_xy)[0]
    return ids[int(index)]
