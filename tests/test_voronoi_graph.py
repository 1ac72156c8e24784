"""Tests for grid-sampled Voronoi tessellation."""

import itertools

import numpy as np
import pytest
from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import Polygon

from py_mapregions.core.exceptions import GeometryInputError
from py_mapregions.core.geometry import is_convex
from py_mapregions.core.models import Seed
from py_mapregions.core.voronoi_graph import (
    CanvasBounds, VoronoiCell, VoronoiDiagram, assign_samples, find_cell,
    generate_or_reuse_diagram, normalize_seeds, sample_canvas, symmetrize_neighbors,
    tessellate,
)


TRIANGLE_SEEDS = [
    Seed(id="a", x=10, y=10),
    Seed(id="b", x=90, y=10),
    Seed(id="c", x=50, y=90),
]


class TestSampling:
    """Test canvas sampling and nearest-seed assignment."""

    def test_sample_grid_is_inclusive(self):
        samples = sample_canvas(CanvasBounds(10, 10), 0.5)

        assert samples.shape == (21 * 21, 2)
        assert samples[:, 0].min() == 0.0
        assert samples[:, 0].max() == 10.0
        assert samples[:, 1].max() == 10.0

    @pytest.mark.parametrize("resolution", [0, -1.0, float("nan")])
    def test_invalid_resolution(self, resolution):
        with pytest.raises(GeometryInputError):
            sample_canvas(CanvasBounds(), resolution)

    @pytest.mark.parametrize("bounds", [
        CanvasBounds(0, 100),
        CanvasBounds(100, -5),
        CanvasBounds(float("inf"), 100),
        CanvasBounds(100, float("nan")),
    ])
    def test_invalid_bounds(self, bounds):
        with pytest.raises(GeometryInputError):
            sample_canvas(bounds, 1.0)

    def test_tessellate_rejects_infinite_bounds(self):
        with pytest.raises(GeometryInputError):
            tessellate([(10, 10)], bounds=(float("inf"), 100))

    def test_ties_go_to_first_seed(self):
        samples = np.array([[50.0, 10.0]])
        seeds = np.array([[10.0, 10.0], [90.0, 10.0]])
        assert assign_samples(samples, seeds)[0] == 0

    def test_assignment_in_chunks(self):
        samples = sample_canvas(CanvasBounds(20, 20), 1.0)
        seeds = np.array([[0.0, 0.0], [20.0, 20.0]])
        chunked = assign_samples(samples, seeds, chunk_size=7)
        whole = assign_samples(samples, seeds)
        np.testing.assert_array_equal(chunked, whole)


class TestNormalizeSeeds:
    """Test seed record normalization."""

    def test_accepts_models_mappings_and_pairs(self):
        seeds = [Seed(id="a", x=1, y=2), {"id": "b", "x": 3, "y": 4}, (5, 6)]
        assert normalize_seeds(seeds) == [("a", 1.0, 2.0), ("b", 3.0, 4.0), ("cell_2", 5.0, 6.0)]

    def test_duplicate_ids_keep_first(self):
        seeds = [{"id": "a", "x": 1, "y": 1}, {"id": "a", "x": 9, "y": 9}]
        assert normalize_seeds(seeds) == [("a", 1.0, 1.0)]

    @pytest.mark.parametrize("seed_id,expected", [(0, "0"), (7, "7"), ("", "cell_0"), (None, "cell_0")])
    def test_falsy_ids(self, seed_id, expected):
        """Only missing or empty ids are generated; zero is a real id."""
        assert normalize_seeds([{"id": seed_id, "x": 1, "y": 2}]) == [(expected, 1.0, 2.0)]

    def test_non_numeric_raises(self):
        with pytest.raises(GeometryInputError):
            normalize_seeds([{"id": "a", "x": "left", "y": 1}])

    def test_non_finite_raises(self):
        with pytest.raises(GeometryInputError):
            normalize_seeds([{"id": "a", "x": float("nan"), "y": 1}])


class TestTessellate:
    """Test full tessellation."""

    @pytest.fixture
    def diagram(self):
        return tessellate(TRIANGLE_SEEDS)

    def test_one_cell_per_seed(self, diagram):
        assert list(diagram.cells) == ["a", "b", "c"]
        for cell in diagram.cells.values():
            assert not cell.is_empty
            assert cell.sample_count > 0

    def test_cells_are_convex(self, diagram):
        for cell in diagram.cells.values():
            assert is_convex(cell.vertices)

    def test_cells_contain_their_seed(self, diagram):
        for cell in diagram.cells.values():
            assert Polygon(cell.vertices).buffer(1e-9).covers(ShapelyPoint(cell.seed))

    def test_cells_do_not_overlap(self, diagram):
        polygons = {cid: Polygon(cell.vertices) for cid, cell in diagram.cells.items()}
        for (id1, p1), (id2, p2) in itertools.combinations(polygons.items(), 2):
            assert p1.intersection(p2).area == pytest.approx(0.0, abs=1e-9), (id1, id2)

    def test_every_sample_is_covered(self):
        diagram = tessellate(TRIANGLE_SEEDS, resolution=2.0)
        polygons = [Polygon(cell.vertices).buffer(1e-9) for cell in diagram.cells.values()]

        for x, y in sample_canvas(diagram.bounds, 2.0):
            point = ShapelyPoint(x, y)
            assert any(poly.covers(point) for poly in polygons), (x, y)

    def test_sample_counts_cover_canvas(self, diagram):
        total = sum(cell.sample_count for cell in diagram.cells.values())
        assert total == 201 * 201

    def test_neighbors_symmetric(self, diagram):
        for cell_id, cell in diagram.cells.items():
            assert cell_id not in cell.neighbors
            for other in cell.neighbors:
                assert cell_id in diagram.cells[other].neighbors

    def test_touching_cells_are_neighbors(self, diagram):
        assert diagram.cells["a"].neighbors == ["b", "c"]
        assert diagram.cells["c"].neighbors == ["a", "b"]

    def test_far_cells_are_not_neighbors(self):
        # Buckets are at least one sample step apart
        diagram = tessellate(TRIANGLE_SEEDS, resolution=2.0, adjacency_threshold=1.0)
        for cell in diagram.cells.values():
            assert cell.neighbors == []

    def test_deterministic(self, diagram):
        again = tessellate(TRIANGLE_SEEDS)
        for cell_id, cell in diagram.cells.items():
            assert again.cells[cell_id].vertices == cell.vertices
            assert again.cells[cell_id].neighbors == cell.neighbors

    def test_empty_seed_list(self):
        diagram = tessellate([])
        assert diagram.cells == {}

    def test_non_finite_seed_raises(self):
        with pytest.raises(GeometryInputError):
            tessellate([{"id": "a", "x": float("inf"), "y": 1}])

    def test_single_seed_covers_canvas(self):
        diagram = tessellate([(30, 40)], resolution=1.0)
        cell = diagram.cells["cell_0"]
        assert set(cell.vertices) == {(0.0, 0.0), (100.0, 0.0), (100.0, 100.0), (0.0, 100.0)}

    def test_coincident_seeds_leave_empty_cell(self):
        diagram = tessellate([(50, 50), (50, 50)], resolution=1.0)

        assert not diagram.cells["cell_0"].is_empty
        assert diagram.cells["cell_1"].is_empty
        assert diagram.cells["cell_1"].sample_count == 0
        assert diagram.cells["cell_1"].neighbors == []

    def test_custom_bounds(self):
        diagram = tessellate([(5, 5), (15, 5)], bounds=(20, 10), resolution=1.0)
        xs = [x for cell in diagram.cells.values() for x, _ in cell.vertices]
        assert max(xs) == 20.0
        assert diagram.bounds == CanvasBounds(20, 10)


class TestDiagramHelpers:
    """Test reuse, lookup and neighbor symmetrization."""

    def test_reuse_unchanged_diagram(self):
        first = tessellate(TRIANGLE_SEEDS, resolution=2.0)
        reused = generate_or_reuse_diagram(first, TRIANGLE_SEEDS, resolution=2.0)
        assert reused is first

    def test_regenerate_when_seed_moves(self):
        first = tessellate(TRIANGLE_SEEDS, resolution=2.0)
        moved = TRIANGLE_SEEDS[:2] + [Seed(id="c", x=50, y=70)]

        assert first.should_regenerate(moved, CanvasBounds(), 2.0)
        second = generate_or_reuse_diagram(first, moved, resolution=2.0)
        assert second is not first
        assert second.cells["c"].seed == (50.0, 70.0)

    def test_generate_without_existing(self):
        diagram = generate_or_reuse_diagram(None, TRIANGLE_SEEDS, resolution=2.0)
        assert len(diagram.cells) == 3

    def test_find_cell(self):
        diagram = tessellate(TRIANGLE_SEEDS, resolution=2.0)
        assert find_cell(diagram, 12, 12) == "a"
        assert find_cell(diagram, 88, 5) == "b"
        assert find_cell(diagram, 50, 99) == "c"
        # Equidistant from a and b
        assert find_cell(diagram, 50, 10) == "a"

    def test_find_cell_empty_diagram(self):
        assert find_cell(tessellate([]), 10, 10) is None

    def test_symmetrize_neighbors(self):
        diagram = VoronoiDiagram(
            cells={
                "a": VoronoiCell(id="a", seed=(0, 0), neighbors=["b"]),
                "b": VoronoiCell(id="b", seed=(1, 0)),
                "c": VoronoiCell(id="c", seed=(2, 0), neighbors=["a", "ghost"]),
            },
            bounds=CanvasBounds(),
            resolution=0.5,
            adjacency_threshold=15.0,
        )
        fixed = symmetrize_neighbors(diagram)

        assert fixed.cells["a"].neighbors == ["b", "c"]
        assert fixed.cells["b"].neighbors == ["a"]
        assert fixed.cells["c"].neighbors == ["a", "ghost"]
        # Input untouched
        assert diagram.cells["b"].neighbors == []

    def test_neighbor_map(self):
        diagram = tessellate(TRIANGLE_SEEDS, resolution=2.0)
        assert diagram.neighbor_map()["b"] == ["a", "c"]
        assert diagram.seed_positions["b"] == (90.0, 10.0)
