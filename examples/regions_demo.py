#!/usr/bin/env python3
"""
Demonstration of the region partitioning pipeline.

This script walks through the main steps for a built-in map:
1. Tessellation and diagram reuse
2. Region rendering and adjacency
3. Outline import and seed placement checks
4. Cached rendering and debounced recomputation
"""

from py_mapregions.core import (
    PartitionCache, RecomputeScheduler, Seed, build_boundary, compute_region_adjacencies,
    find_outside, generate_or_reuse_diagram, regenerate_regions, render_regions, tessellate,
    validate_topology,
)
from py_mapregions.maps import get_map, make_region_loader
from py_mapregions.utils import configure_logging

# Rough outline of mainland France as lon/lat
FRANCE_OUTLINE = {
    "type": "Feature",
    "properties": {"name": "France"},
    "geometry": {
        "type": "MultiPolygon",
        "coordinates": [
            [[[-4.7, 48.5], [-1.4, 46.2], [-1.8, 43.4], [3.1, 42.4], [7.5, 43.8],
              [6.8, 46.4], [8.2, 48.9], [4.2, 50.0], [2.5, 51.1], [-1.6, 49.6], [-4.7, 48.5]]],
            # Corsica
            [[[8.6, 41.4], [9.5, 42.0], [9.4, 43.0], [8.6, 42.4], [8.6, 41.4]]],
        ],
    },
}


def main():
    configure_logging(level="WARNING")
    france = get_map("france")

    print("=== Region Partitioning Demo ===\n")

    # 1. Tessellate the map's cities
    print("1. Tessellating seeds...")
    diagram = tessellate(france.seeds)
    for cell_id, cell in diagram.cells.items():
        print(f"   - {cell_id:<11} vertices={len(cell.vertices):<3} neighbors={', '.join(cell.neighbors)}")

    print("   a) Same seeds - should reuse:")
    print(f"      Diagram reused: {generate_or_reuse_diagram(diagram, france.seeds) is diagram}")

    # 2. Render regions
    print("\n2. Rendering regions...")
    rendered = render_regions(france, diagram=diagram)
    for region in rendered:
        x, y = region.centroid
        print(f"   - {region.region.name:<6} cells={len(region.cells)} "
              f"area={region.area:7.1f} label=({x:.0f}, {y:.0f})")

    adjacency = compute_region_adjacencies(france)
    report = validate_topology(adjacency)
    print(f"   Adjacency valid: {report.valid}")
    for region_id, linked in adjacency.items():
        print(f"   - {region_id} -> {', '.join(linked) or '(none)'}")

    # 3. Outline and placement checks
    print("\n3. Importing outline...")
    outline = build_boundary(FRANCE_OUTLINE, "france")
    print(f"   - Outline points: {len(outline.points)}")
    print(f"   - Path: {outline.path[:60]}...")

    moved = france.seeds + [Seed(id="london", name="London", x=30, y=10)]
    print(f"   - Seeds outside outline: {sorted(find_outside(moved, outline.points))}")

    # 4. Cache and recompute scheduling
    print("\n4. Editing session...")
    cache = PartitionCache(make_region_loader(boundaries={"france": outline.points}))
    cache.warm(["france", "germany"])
    print(f"   - Cache: {cache.stats()}")

    state = {"map": france}

    def recompute():
        regions = render_regions(state["map"], outline.points)
        cache.put("france", regions)
        return regions

    scheduler = RecomputeScheduler(recompute)
    scheduler.begin_drag()
    state["map"] = france.with_seeds(
        [Seed(id=s.id, name=s.name, x=s.x + 2, y=s.y) if s.id == "paris" else s for s in france.seeds]
    )
    scheduler.mark_dirty()
    print(f"   - Recomputed while dragging: {scheduler.flush() is not None}")
    scheduler.end_drag()
    print(f"   - Recomputed after drop: {scheduler.flush() is not None}")

    # 5. Regions from geometry alone
    print("\n5. Generating regions without assignments...")
    generated = regenerate_regions(france.seeds, ["North", "Centre", "South"],
                                   ["#60a5fa", "#34d399", "#f87171"])
    for region in generated:
        print(f"   - {region.name:<6} seeds={', '.join(region.seed_ids)} "
              f"adjacent={', '.join(region.adjacencies)}")

    print("\n=== Demo Complete ===")


if __name__ == "__main__":
    main()
