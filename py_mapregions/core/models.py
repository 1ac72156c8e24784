"""
Input records for the partitioning engine.

Regions arrive from the editor or from stored map data in a loose shape where
``id`` or ``name`` may be missing. Those are held as ``RegionDraft`` and pass
through ``assign_region_ids`` exactly once; only finalized ``Region`` records
enter the geometry code.
"""

from __future__ import annotations

import math
import re
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Seed(BaseModel):
    """A named point on the canvas that anchors one Voronoi cell."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique seed (city) identifier")
    name: str = Field(default="", description="Display name")
    x: float = Field(description="Canvas x in normalized units (0-100)")
    y: float = Field(description="Canvas y in normalized units (0-100)")

    @field_validator("x", "y")
    @classmethod
    def _finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("seed coordinates must be finite")
        return value

    @model_validator(mode="before")
    @classmethod
    def _default_name(cls, data):
        if isinstance(data, dict) and not data.get("name") and data.get("id"):
            data = {**data, "name": data["id"]}
        return data

    @property
    def position(self):
        return (self.x, self.y)


class Connection(BaseModel):
    """Link between two seeds, carried through for game logic."""

    model_config = ConfigDict(frozen=True)

    seed_a: str
    seed_b: str
    cost: Optional[float] = None


class RegionDraft(BaseModel):
    """Region as authored or loaded, before ids are settled."""

    id: Optional[str] = Field(default=None, description="Region identifier, if known")
    name: Optional[str] = Field(default=None, description="Display name, if known")
    color: str = Field(default="#999999", description="Fill color in hex format")
    seed_ids: List[str] = Field(default_factory=list, description="Seeds owned by the region")


class Region(BaseModel):
    """Finalized region with a guaranteed id and name."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique region identifier")
    name: str = Field(description="Display name")
    color: str = Field(default="#999999", description="Fill color in hex format")
    seed_ids: List[str] = Field(default_factory=list, description="Seeds owned by the region")


def _slugify(text: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "_", text.strip().lower())
    return slug.strip("_")


def assign_region_ids(drafts: Sequence[RegionDraft]) -> List[Region]:
    """
    Resolve region drafts into finalized regions.

    Missing ids are derived from the name (slugified) or fall back to
    ``region_<index>``. Colliding ids get a numeric suffix. Missing names are
    derived from the id.
    """
    regions: List[Region] = []
    used: Dict[str, int] = {}

    for index, draft in enumerate(drafts):
        base = draft.id or (_slugify(draft.name) if draft.name else "") or f"region_{index}"
        region_id = base
        if region_id in used:
            used[base] += 1
            region_id = f"{base}_{used[base]}"
            while region_id in used:
                used[base] += 1
                region_id = f"{base}_{used[base]}"
        used.setdefault(region_id, 0)

        name = draft.name or region_id.replace("_", " ").title()
        regions.append(
            Region(id=region_id, name=name, color=draft.color, seed_ids=list(draft.seed_ids))
        )

    return regions


class MapDefinition(BaseModel):
    """Seeds and regions of one map plus its render dimensions."""

    id: str = Field(description="Map identifier, also selects geographic bounds")
    name: str = Field(default="", description="Display name")
    width: float = Field(default=1000.0, gt=0, description="Render width in pixels")
    height: float = Field(default=600.0, gt=0, description="Render height in pixels")
    seeds: List[Seed] = Field(default_factory=list)
    regions: List[Region] = Field(default_factory=list)
    connections: List[Connection] = Field(default_factory=list)

    @classmethod
    def from_drafts(
        cls,
        map_id: str,
        seeds: Sequence[Seed],
        drafts: Sequence[RegionDraft],
        **kwargs,
    ) -> "MapDefinition":
        """Build a map from region drafts, resolving their ids first."""
        return cls(id=map_id, seeds=list(seeds), regions=assign_region_ids(drafts), **kwargs)

    def seed_by_id(self, seed_id: str) -> Optional[Seed]:
        for seed in self.seeds:
            if seed.id == seed_id:
                return seed
        return None

    def seeds_in_region(self, region_id: str) -> List[Seed]:
        for region in self.regions:
            if region.id == region_id:
                lookup = {seed.id: seed for seed in self.seeds}
                return [lookup[sid] for sid in region.seed_ids if sid in lookup]
        return []

    def region_for_seed(self, seed_id: str) -> Optional[Region]:
        for region in self.regions:
            if seed_id in region.seed_ids:
                return region
        return None

    def with_seeds(self, seeds: Sequence[Seed]) -> "MapDefinition":
        """Copy of the map with a replaced seed list (e.g. after a drag)."""
        return self.model_copy(update={"seeds": list(seeds)})

    def with_regions(self, regions: Sequence[Region]) -> "MapDefinition":
        return self.model_copy(update={"regions": list(regions)})
