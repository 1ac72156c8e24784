"""
py-mapregions: region partitioning for board-game maps.

Cities (seeds) on a normalized 0-100 canvas are tessellated into grid-sampled
Voronoi cells, grouped into regions, outlined, checked against a country
boundary imported from GeoJSON, and cached per map.
"""

__version__ = "0.1.0"
