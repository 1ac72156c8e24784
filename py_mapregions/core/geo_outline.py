"""
Country outlines from GeoJSON.

Boundary data arrives as longitude/latitude polygons, often several per map
(mainland plus islands). One polygon is chosen as the authoritative outline
and projected into the 0-100 canvas through the map's geographic box. The
projected point list feeds point-in-polygon checks; the path string is for
drawing.
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, List, Mapping, NamedTuple, Optional, Sequence, Tuple, Union

import structlog
from shapely.errors import ShapelyError
from shapely.geometry import shape

from ..config import settings
from ..config.map_bounds import MapBounds, get_map_bounds, has_map_bounds
from .exceptions import OutlineFormatError
from .geometry import Point, close_ring, ensure_finite, polygon_area, ring_vertex_centroid

logger = structlog.get_logger()

LonLat = Tuple[float, float]
PolygonRings = List[List[LonLat]]  # outer ring first, then holes

_POLYGON_TYPES = ("Polygon", "MultiPolygon")


class OutlineProjection(NamedTuple):
    """Projected outline in canvas units."""
    path: str
    points: List[Point]


def _parse_ring(raw: Any, where: str) -> List[LonLat]:
    if not isinstance(raw, (list, tuple)):
        raise OutlineFormatError(f"{where}: ring must be a list of positions")
    ring: List[LonLat] = []
    for position in raw:
        if not isinstance(position, (list, tuple)) or len(position) < 2:
            raise OutlineFormatError(f"{where}: invalid position {position!r}")
        try:
            lon, lat = float(position[0]), float(position[1])
        except (TypeError, ValueError) as e:
            raise OutlineFormatError(f"{where}: non-numeric position {position!r}") from e
        if not (math.isfinite(lon) and math.isfinite(lat)):
            raise OutlineFormatError(f"{where}: non-finite position {position!r}")
        ring.append((lon, lat))
    return ring


def _parse_polygon(raw: Any, where: str) -> PolygonRings:
    if not isinstance(raw, (list, tuple)):
        raise OutlineFormatError(f"{where}: polygon must be a list of rings")
    return [_parse_ring(ring, f"{where} ring {i}") for i, ring in enumerate(raw)]


def _polygons_from_geometry(geometry: Mapping[str, Any], where: str) -> List[PolygonRings]:
    geom_type = geometry.get("type")
    if geom_type not in _POLYGON_TYPES:
        logger.debug("Skipping non-polygon geometry", type=geom_type, where=where)
        return []

    coordinates = geometry.get("coordinates")
    if coordinates is None:
        raise OutlineFormatError(f"{where}: {geom_type} without coordinates")

    if geom_type == "Polygon":
        polygons = [_parse_polygon(coordinates, where)]
    else:
        if not isinstance(coordinates, (list, tuple)):
            raise OutlineFormatError(f"{where}: MultiPolygon coordinates must be a list")
        polygons = [_parse_polygon(p, f"{where} polygon {i}") for i, p in enumerate(coordinates)]

    # Ring structure check (closure, minimum size) through shapely
    try:
        shape({"type": geom_type, "coordinates": coordinates})
    except (ShapelyError, ValueError, TypeError, IndexError) as e:
        raise OutlineFormatError(f"{where}: invalid {geom_type}: {e}") from e

    return polygons


def polygons_from_geojson(data: Mapping[str, Any]) -> List[PolygonRings]:
    """
    Extract every polygon from GeoJSON data.

    Accepts a FeatureCollection, a single Feature or a bare Polygon /
    MultiPolygon geometry. MultiPolygons contribute one entry per member
    polygon. Features without geometry and non-polygon geometries are
    skipped.

    Args:
        data: Parsed GeoJSON object

    Returns:
        List of polygons as lon/lat rings

    Raises:
        OutlineFormatError: If the structure cannot be read as polygons
    """
    if not isinstance(data, Mapping):
        raise OutlineFormatError("GeoJSON root must be an object")

    kind = data.get("type")
    if kind == "FeatureCollection":
        features = data.get("features")
        if features is None:
            features = []
        if not isinstance(features, (list, tuple)):
            raise OutlineFormatError("FeatureCollection.features must be a list")
    elif kind == "Feature":
        features = [data]
    elif kind in _POLYGON_TYPES:
        return _polygons_from_geometry(data, "geometry")
    else:
        raise OutlineFormatError(f"Unsupported GeoJSON type: {kind!r}")

    polygons: List[PolygonRings] = []
    for index, feature in enumerate(features):
        if not isinstance(feature, Mapping):
            raise OutlineFormatError(f"feature {index}: must be an object")
        geometry = feature.get("geometry")
        if geometry is None:
            continue
        if not isinstance(geometry, Mapping):
            raise OutlineFormatError(f"feature {index}: geometry must be an object")
        polygons.extend(_polygons_from_geometry(geometry, f"feature {index}"))

    logger.debug("Polygons extracted", count=len(polygons))
    return polygons


def load_geojson(path: Union[str, Path]) -> List[PolygonRings]:
    """Read a GeoJSON file and extract its polygons."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        logger.error("Failed to parse outline file", path=str(path), error=str(e))
        raise OutlineFormatError(f"{path}: not valid JSON: {e}") from e
    return polygons_from_geojson(data)


def select_best_polygon(polygons: Sequence[PolygonRings], map_id: str) -> Optional[PolygonRings]:
    """
    Pick the mainland polygon for a map.

    For maps with a known geographic box, candidates whose outer-ring vertex
    centroid lies outside the box are dropped (unless that drops all of
    them). Among the remaining candidates the one with the largest outer-ring
    area wins; ties keep the earlier polygon.

    Returns:
        The chosen polygon, or None if there are none
    """
    if not polygons:
        return None

    candidates = list(polygons)
    if has_map_bounds(map_id):
        box = get_map_bounds(map_id)
        filtered = [
            poly for poly in candidates
            if box.contains(*ring_vertex_centroid(poly[0] if poly else []))
        ]
        if filtered:
            candidates = filtered
        else:
            logger.warning("No outline candidate inside map bounds", map_id=map_id,
                           candidates=len(candidates))

    best = candidates[0]
    best_area = polygon_area(best[0] if best else [])
    for poly in candidates[1:]:
        area = polygon_area(poly[0] if poly else [])
        if area > best_area:
            best, best_area = poly, area
    return best


def _to_canvas(box: MapBounds, lon: float, lat: float) -> Point:
    ensure_finite(lon, lat, label="outline position")
    return box.to_canvas(lon, lat)


def project_point(lon: float, lat: float, map_id: str) -> Point:
    """Project one lon/lat position into canvas units (not clamped).

    Raises:
        GeometryInputError: If the position is not finite
    """
    return _to_canvas(get_map_bounds(map_id), lon, lat)


def build_outline_path(polygon: PolygonRings, map_id: str) -> str:
    """SVG path covering every ring of the polygon, two decimals."""
    box = get_map_bounds(map_id)
    paths: List[str] = []
    for ring in polygon:
        if not ring:
            continue
        parts = []
        for i, (lon, lat) in enumerate(ring):
            x, y = _to_canvas(box, lon, lat)
            parts.append(f"{'M' if i == 0 else 'L'} {x:.2f},{y:.2f}")
        parts.append("Z")
        paths.append(" ".join(parts))
    return " ".join(paths)


def build_outline_points(polygon: PolygonRings, map_id: str) -> List[Point]:
    """Outer ring in canvas units, explicitly closed."""
    outer = polygon[0] if polygon else []
    if not outer:
        return []
    box = get_map_bounds(map_id)
    points = [_to_canvas(box, lon, lat) for lon, lat in outer]
    return close_ring(points, settings.closure_tolerance)


def project(polygon: PolygonRings, map_id: str) -> OutlineProjection:
    """
    Project a lon/lat polygon into the map's canvas space.

    The map's geographic box spans 0-100 on both axes with north at the top.
    Positions outside the box land outside 0-100; clipping is left to the
    drawing layer. Any non-finite position raises GeometryInputError.
    """
    return OutlineProjection(
        path=build_outline_path(polygon, map_id),
        points=build_outline_points(polygon, map_id),
    )


def build_boundary(data: Mapping[str, Any], map_id: str) -> Optional[OutlineProjection]:
    """Extract, select and project a map's outline in one step."""
    selected = select_best_polygon(polygons_from_geojson(data), map_id)
    if selected is None:
        logger.info("No outline polygon found", map_id=map_id)
        return None
    projection = project(selected, map_id)
    logger.info("Outline projected", map_id=map_id, points=len(projection.points))
    return projection
