#!/usr/bin/env python3
"""Plot the rendered regions of a built-in map with matplotlib."""

import sys

import matplotlib.pyplot as plt
from matplotlib.patches import Polygon as PolygonPatch

from py_mapregions.config import CANVAS_SIZE
from py_mapregions.core import render_regions
from py_mapregions.maps import get_map, list_maps


def plot_map(map_id="usa", output=None):
    """Draw every region cell, its exposed outline and the label position."""
    definition = get_map(map_id)
    if definition is None:
        print(f"Unknown map '{map_id}', choose one of: {', '.join(list_maps())}")
        return

    rendered = render_regions(definition)
    sx = definition.width / CANVAS_SIZE
    sy = definition.height / CANVAS_SIZE

    fig, ax = plt.subplots(figsize=(definition.width / 100, definition.height / 100))

    for region in rendered:
        for cell in region.cells:
            if len(cell.polygon) < 3:
                continue
            scaled = [(x * sx, y * sy) for x, y in cell.polygon]
            ax.add_patch(PolygonPatch(scaled, closed=True, facecolor=region.region.color,
                                      edgecolor="white", linewidth=0.5, alpha=0.8))
        cx, cy = region.centroid
        ax.text(cx, cy, region.region.name, ha="center", va="center", fontsize=9, weight="bold")

    for seed in definition.seeds:
        ax.plot(seed.x * sx, seed.y * sy, "k.", markersize=4)

    ax.set_xlim(0, definition.width)
    ax.set_ylim(definition.height, 0)
    ax.set_aspect("equal")
    ax.set_title(definition.name)
    ax.axis("off")

    if output:
        plt.savefig(output, dpi=150, bbox_inches="tight")
        print(f"Saved plot to {output}")
    else:
        plt.show()
    plt.close(fig)


if __name__ == "__main__":
    map_id = sys.argv[1] if len(sys.argv) > 1 else "usa"
    output = sys.argv[2] if len(sys.argv) > 2 else None
    plot_map(map_id, output)
