"""Tests for region adjacency and topology checks."""

from py_mapregions.core.models import MapDefinition, Region, Seed
from py_mapregions.core.region_adjacency import (
    adjacency_from_diagram, compute_region_adjacencies, symmetrize_adjacency, validate_topology,
)
from py_mapregions.core.voronoi_graph import tessellate


def _map(seeds, regions):
    return MapDefinition(id="test", seeds=seeds, regions=regions)


class TestSeedDistanceAdjacency:
    """Test adjacency from seed proximity."""

    def test_close_regions_are_adjacent(self):
        definition = _map(
            [Seed(id="a", x=10, y=10), Seed(id="b", x=30, y=10), Seed(id="c", x=90, y=90)],
            [
                Region(id="r1", name="R1", seed_ids=["a"]),
                Region(id="r2", name="R2", seed_ids=["b"]),
                Region(id="r3", name="R3", seed_ids=["c"]),
            ],
        )
        adjacency = compute_region_adjacencies(definition)

        assert adjacency == {"r1": ["r2"], "r2": ["r1"], "r3": []}

    def test_threshold_is_strict(self):
        definition = _map(
            [Seed(id="a", x=0, y=0), Seed(id="b", x=25, y=0)],
            [Region(id="r1", name="R1", seed_ids=["a"]), Region(id="r2", name="R2", seed_ids=["b"])],
        )
        assert compute_region_adjacencies(definition)["r1"] == []
        assert compute_region_adjacencies(definition, threshold=25.5)["r1"] == ["r2"]

    def test_any_seed_pair_links(self):
        definition = _map(
            [Seed(id="a", x=0, y=0), Seed(id="b", x=60, y=0), Seed(id="c", x=70, y=0)],
            [
                Region(id="r1", name="R1", seed_ids=["a", "b"]),
                Region(id="r2", name="R2", seed_ids=["c"]),
            ],
        )
        assert compute_region_adjacencies(definition) == {"r1": ["r2"], "r2": ["r1"]}

    def test_unknown_seed_ids_ignored(self):
        definition = _map(
            [Seed(id="a", x=0, y=0)],
            [
                Region(id="r1", name="R1", seed_ids=["a"]),
                Region(id="r2", name="R2", seed_ids=["missing"]),
            ],
        )
        assert compute_region_adjacencies(definition) == {"r1": [], "r2": []}


class TestDiagramAdjacency:
    """Test adjacency derived from cell neighbors."""

    def test_neighbor_cells_link_regions(self):
        diagram = tessellate([(10, 50), (50, 50), (90, 50)], resolution=2.0, adjacency_threshold=5.0)
        assignment = {"west": ["cell_0"], "middle": ["cell_1"], "east": ["cell_2"]}

        adjacency = adjacency_from_diagram(diagram, assignment)
        assert adjacency == {"west": ["middle"], "middle": ["west", "east"], "east": ["middle"]}

    def test_unknown_cells_skipped(self):
        diagram = tessellate([(10, 50), (90, 50)], resolution=2.0)
        adjacency = adjacency_from_diagram(diagram, {"a": ["cell_0", "ghost"], "b": ["cell_1"]})
        assert adjacency == {"a": ["b"], "b": ["a"]}


class TestTopology:
    """Test symmetrization and validation."""

    def test_valid_topology(self):
        report = validate_topology({"a": ["b"], "b": ["a", "c"], "c": ["b"]})
        assert report.valid
        assert report.warnings == []

    def test_one_way_link(self):
        report = validate_topology({"a": ["b"], "b": []})

        assert not report.valid
        assert report.warnings == ['Region "a" -> "b" is not bidirectional']

    def test_unknown_region(self):
        report = validate_topology({"a": ["zzz"]})
        assert report.warnings == ['Region "a" references non-existent adjacent region "zzz"']

    def test_symmetrize(self):
        fixed = symmetrize_adjacency({"a": ["b", "b"], "b": [], "c": ["d"]})

        assert fixed == {"a": ["b"], "b": ["a"], "c": ["d"], "d": ["c"]}
        assert validate_topology(fixed).valid
