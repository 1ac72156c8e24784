"""
Configuration modules for region partitioning.
"""

from .config import Settings, settings
from .map_bounds import CANVAS_SIZE, MAP_BOUNDS, WORLD_BOUNDS, MapBounds, get_map_bounds, has_map_bounds, list_map_bounds

__all__ = ['Settings', 'settings', 'CANVAS_SIZE', 'MAP_BOUNDS', 'WORLD_BOUNDS', 'MapBounds',
           'get_map_bounds', 'has_map_bounds', 'list_map_bounds']
