"""
Geographic bounding boxes for the built-in maps.

Each map declares the longitude/latitude window that is stretched over the
0-100 canvas. Outlines are projected through these boxes, and the same boxes
filter candidate polygons when picking the mainland body of a country.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

# Extent of the normalized canvas on each axis
CANVAS_SIZE = 100.0


@dataclass(frozen=True)
class MapBounds:
    """Longitude/latitude window of a map."""

    lon_min: float
    lon_max: float
    lat_min: float
    lat_max: float

    @property
    def lon_span(self) -> float:
        return (self.lon_max - self.lon_min) or 1.0

    @property
    def lat_span(self) -> float:
        return (self.lat_max - self.lat_min) or 1.0

    @property
    def center(self) -> Tuple[float, float]:
        return ((self.lon_min + self.lon_max) / 2.0, (self.lat_min + self.lat_max) / 2.0)

    def contains(self, lon: float, lat: float) -> bool:
        return self.lon_min <= lon <= self.lon_max and self.lat_min <= lat <= self.lat_max

    def to_canvas(self, lon: float, lat: float) -> Tuple[float, float]:
        """Map lon/lat linearly onto normalized canvas units, north up, no clamping."""
        x = (lon - self.lon_min) / self.lon_span * CANVAS_SIZE
        y = (self.lat_max - lat) / self.lat_span * CANVAS_SIZE
        return (x, y)


WORLD_BOUNDS = MapBounds(lon_min=-180.0, lon_max=180.0, lat_min=-90.0, lat_max=90.0)

MAP_BOUNDS: Dict[str, MapBounds] = {
    # Continental United States
    "usa": MapBounds(lon_min=-125.0, lon_max=-66.0, lat_min=24.0, lat_max=50.0),
    "germany": MapBounds(lon_min=6.0, lon_max=16.0, lat_min=47.0, lat_max=56.0),
    "france": MapBounds(lon_min=-8.0, lon_max=9.0, lat_min=42.0, lat_max=52.0),
}


def has_map_bounds(map_id: str) -> bool:
    return map_id in MAP_BOUNDS


def get_map_bounds(map_id: str) -> MapBounds:
    """Bounds for a map id, the whole world for unknown ids."""
    return MAP_BOUNDS.get(map_id, WORLD_BOUNDS)


def list_map_bounds() -> List[str]:
    return sorted(MAP_BOUNDS)
