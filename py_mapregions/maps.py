"""
Built-in map definitions.

City coordinates are in normalized canvas units. Regions are stored as drafts
the way the map files author them (some without an id or a name) and are
finalized through ``assign_region_ids`` when the map is built.
"""

from typing import Callable, Dict, List, Optional, Sequence

import structlog

from .core.models import Connection, MapDefinition, RegionDraft, Seed
from .core.geometry import Point
from .core.region_renderer import RenderedRegion, render_regions

logger = structlog.get_logger()


def _seeds(rows: Sequence[tuple]) -> List[Seed]:
    return [Seed(id=sid, name=name, x=x, y=y) for sid, name, x, y in rows]


def _connections(pairs: Sequence[tuple]) -> List[Connection]:
    return [Connection(seed_a=a, seed_b=b) for a, b in pairs]


def _usa() -> MapDefinition:
    seeds = _seeds([
        # Northeast
        ("boston", "Boston", 85, 32),
        ("newyork", "New York", 83, 35),
        ("buffalo", "Buffalo", 77, 31),
        ("philadelphia", "Philadelphia", 82, 38),
        ("pittsburgh", "Pittsburgh", 74, 38),
        ("washington", "Washington", 78, 42),
        ("norfolk", "Norfolk", 81, 45),
        # Midwest
        ("minneapolis", "Minneapolis", 52, 25),
        ("chicago", "Chicago", 62, 33),
        ("detroit", "Detroit", 68, 31),
        ("stlouis", "St. Louis", 56, 42),
        # South
        ("atlanta", "Atlanta", 68, 52),
        ("houston", "Houston", 48, 62),
        ("dallas", "Dallas", 47, 54),
        ("neworleans", "New Orleans", 56, 63),
        # West
        ("seattle", "Seattle", 18, 24),
        ("portland", "Portland", 17, 28),
        ("sanfrancisco", "San Francisco", 16, 44),
        ("losangeles", "Los Angeles", 20, 52),
        ("lasvegas", "Las Vegas", 25, 46),
        ("denver", "Denver", 35, 38),
    ])
    drafts = [
        RegionDraft(name="Northeast", color="#60a5fa",
                    seed_ids=["boston", "newyork", "buffalo", "philadelphia",
                              "pittsburgh", "washington", "norfolk"]),
        RegionDraft(id="midwest", color="#f59e0b",
                    seed_ids=["minneapolis", "chicago", "detroit", "stlouis"]),
        RegionDraft(id="south", name="South", color="#10b981",
                    seed_ids=["atlanta", "houston", "dallas", "neworleans"]),
        RegionDraft(id="west", color="#ef4444",
                    seed_ids=["seattle", "portland", "sanfrancisco", "losangeles",
                              "lasvegas", "denver"]),
    ]
    connections = _connections([
        ("newyork", "philadelphia"), ("philadelphia", "washington"),
        ("pittsburgh", "philadelphia"), ("buffalo", "newyork"), ("norfolk", "washington"),
        ("minneapolis", "chicago"), ("chicago", "detroit"), ("chicago", "stlouis"),
        ("detroit", "newyork"), ("stlouis", "dallas"), ("chicago", "washington"),
        ("pittsburgh", "chicago"), ("stlouis", "atlanta"), ("atlanta", "neworleans"),
        ("dallas", "houston"), ("houston", "neworleans"), ("seattle", "portland"),
        ("portland", "sanfrancisco"), ("sanfrancisco", "losangeles"),
        ("losangeles", "lasvegas"), ("denver", "lasvegas"), ("denver", "dallas"),
        ("denver", "sanfrancisco"),
    ])
    return MapDefinition.from_drafts("usa", seeds, drafts, name="United States",
                                     width=1000, height=600, connections=connections)


def _germany() -> MapDefinition:
    seeds = _seeds([
        ("hamburg", "Hamburg", 48, 22),
        ("kiel", "Kiel", 48, 15),
        ("lueneburg", "Lüneburg", 52, 24),
        ("cologne", "Cologne", 32, 45),
        ("aachen", "Aachen", 28, 45),
        ("koblenz", "Koblenz", 35, 48),
        ("frankfurt", "Frankfurt", 42, 48),
        ("berlin", "Berlin", 62, 30),
        ("leipzig", "Leipzig", 58, 44),
        ("dresden", "Dresden", 64, 45),
        ("nuremberg", "Nuremberg", 52, 60),
        ("munich", "Munich", 52, 72),
    ])
    drafts = [
        RegionDraft(name="North", color="#60a5fa", seed_ids=["hamburg", "kiel", "lueneburg"]),
        RegionDraft(id="west", color="#ef4444", seed_ids=["cologne", "aachen", "koblenz"]),
        RegionDraft(id="central", color="#10b981", seed_ids=["frankfurt"]),
        RegionDraft(id="east", name="East", color="#f59e0b",
                    seed_ids=["berlin", "leipzig", "dresden"]),
        RegionDraft(id="south", name="South", color="#8b5cf6", seed_ids=["nuremberg", "munich"]),
    ]
    connections = _connections([
        ("hamburg", "kiel"), ("hamburg", "berlin"), ("berlin", "leipzig"),
        ("leipzig", "dresden"), ("cologne", "aachen"), ("cologne", "frankfurt"),
        ("frankfurt", "nuremberg"), ("nuremberg", "munich"), ("leipzig", "nuremberg"),
    ])
    return MapDefinition.from_drafts("germany", seeds, drafts, name="Germany",
                                     width=800, height=600, connections=connections)


def _france() -> MapDefinition:
    seeds = _seeds([
        ("amiens", "Amiens", 48, 26),
        ("paris", "Paris", 46, 32),
        ("orleans", "Orléans", 44, 40),
        ("strasbourg", "Strasbourg", 68, 35),
        ("bordeaux", "Bordeaux", 32, 58),
        ("lyon", "Lyon", 56, 52),
        ("marseille", "Marseille", 58, 68),
    ])
    drafts = [
        RegionDraft(id="nord", name="Nord", color="#60a5fa", seed_ids=["amiens"]),
        RegionDraft(id="paris", name="Paris", color="#34d399", seed_ids=["paris", "orleans"]),
        RegionDraft(id="east", name="Est", color="#fbbf24", seed_ids=["strasbourg"]),
        RegionDraft(id="west", name="Ouest", color="#f87171", seed_ids=["bordeaux"]),
        RegionDraft(id="south", name="Midi", color="#a78bfa", seed_ids=["lyon", "marseille"]),
    ]
    connections = _connections([
        ("amiens", "paris"), ("paris", "orleans"), ("paris", "strasbourg"),
        ("paris", "bordeaux"), ("orleans", "lyon"), ("bordeaux", "lyon"),
        ("lyon", "marseille"), ("lyon", "strasbourg"),
    ])
    return MapDefinition.from_drafts("france", seeds, drafts, name="France",
                                     width=800, height=700, connections=connections)


_BUILDERS: Dict[str, Callable[[], MapDefinition]] = {
    "usa": _usa,
    "germany": _germany,
    "france": _france,
}


def list_maps() -> List[str]:
    return list(_BUILDERS)


def get_map(map_id: str) -> Optional[MapDefinition]:
    """Fresh copy of a built-in map, or None for unknown ids."""
    builder = _BUILDERS.get(map_id)
    return builder() if builder else None


def make_region_loader(
    boundaries: Optional[Dict[str, Sequence[Point]]] = None,
    maps: Optional[Dict[str, MapDefinition]] = None,
) -> Callable[[str], Optional[List[RenderedRegion]]]:
    """
    Loader for ``PartitionCache`` that renders maps by id.

    Args:
        boundaries: Projected outlines per map id, used for label placement
        maps: Map definitions to serve; defaults to the built-in maps
    """
    boundaries = boundaries or {}

    def load(map_id: str) -> Optional[List[RenderedRegion]]:
        definition = maps.get(map_id) if maps is not None else get_map(map_id)
        if definition is None:
            logger.warning("Unknown map", map_id=map_id)
            return None
        return render_regions(definition, boundaries.get(map_id))

    return load
