"""
In-memory store of rendered regions per map.

One instance lives for an application session and is handed to whoever
needs rendered regions. Entries are computed lazily through the loader (if
one is configured), replaced wholesale with ``put`` after edits and dropped
with ``invalidate``. There is no expiry.
"""

from typing import Callable, Dict, Iterable, List, Optional

import structlog

from .region_renderer import RenderedRegion

logger = structlog.get_logger()

Loader = Callable[[str], Optional[List[RenderedRegion]]]


class PartitionCache:
    """Memoized rendered regions keyed by map id."""

    def __init__(self, loader: Optional[Loader] = None):
        """
        Args:
            loader: Computes the rendered regions of a map id, returning None
                for unknown maps. Without a loader the cache only serves what
                was ``put``.
        """
        self._loader = loader
        self._entries: Dict[str, List[RenderedRegion]] = {}

    def __contains__(self, map_id: str) -> bool:
        return map_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, map_id: str) -> Optional[List[RenderedRegion]]:
        """Cached regions for a map, computing them on first request."""
        if map_id in self._entries:
            return self._entries[map_id]
        if self._loader is None:
            return None

        try:
            regions = self._loader(map_id)
        except Exception as e:
            logger.error("Failed to compute regions", map_id=map_id, error=str(e))
            raise

        if regions is None:
            return None
        self._entries[map_id] = regions
        logger.info("Regions cached", map_id=map_id, regions=len(regions))
        return regions

    def put(self, map_id: str, regions: List[RenderedRegion]) -> None:
        """Store freshly computed regions, replacing any previous entry."""
        self._entries[map_id] = regions

    def invalidate(self, map_id: str) -> None:
        self._entries.pop(map_id, None)

    def clear(self) -> None:
        self._entries.clear()

    def warm(self, map_ids: Iterable[str]) -> None:
        """
        Precompute several maps, e.g. at startup.

        A map whose loader fails is logged and skipped so the remaining maps
        still get cached. Use ``get`` directly to have the error raised.
        """
        for map_id in map_ids:
            try:
                self.get(map_id)
            except Exception as e:
                logger.warning("Skipping map during warm-up", map_id=map_id, error=str(e))

    def stats(self) -> dict:
        return {
            "initialized": bool(self._entries),
            "maps": list(self._entries),
            "count": len(self._entries),
        }
