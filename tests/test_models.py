"""Tests for input records and region id resolution."""

import pytest
from pydantic import ValidationError

from py_mapregions.core.models import MapDefinition, Region, RegionDraft, Seed, assign_region_ids


class TestSeed:
    """Test seed validation."""

    def test_name_defaults_to_id(self):
        assert Seed(id="boston", x=85, y=32).name == "boston"
        assert Seed(id="boston", name="Boston", x=85, y=32).name == "Boston"

    def test_non_finite_rejected(self):
        with pytest.raises(ValidationError):
            Seed(id="bad", x=float("nan"), y=1)

    def test_frozen(self):
        seed = Seed(id="a", x=1, y=2)
        with pytest.raises(ValidationError):
            seed.x = 5
        assert seed.position == (1.0, 2.0)


class TestAssignRegionIds:
    """Test resolution of incomplete region drafts."""

    def test_ids_and_names_filled(self):
        regions = assign_region_ids([
            RegionDraft(name="Northeast", seed_ids=["boston"]),
            RegionDraft(id="midwest"),
            RegionDraft(),
            RegionDraft(id="south", name="The South"),
        ])

        assert [r.id for r in regions] == ["northeast", "midwest", "region_2", "south"]
        assert [r.name for r in regions] == ["Northeast", "Midwest", "Region 2", "The South"]
        assert regions[0].seed_ids == ["boston"]

    def test_slugified_names(self):
        regions = assign_region_ids([RegionDraft(name="Île-de-France Nord")])
        assert regions[0].id == "le_de_france_nord"

    def test_collisions_get_suffix(self):
        regions = assign_region_ids([
            RegionDraft(name="North"),
            RegionDraft(id="north"),
            RegionDraft(name="North"),
            RegionDraft(id="north_1"),
        ])
        ids = [r.id for r in regions]

        assert ids == ["north", "north_1", "north_2", "north_1_1"]
        assert len(set(ids)) == len(ids)

    def test_color_default(self):
        assert assign_region_ids([RegionDraft(id="x")])[0].color == "#999999"


class TestMapDefinition:
    """Test map lookups and copies."""

    @pytest.fixture
    def definition(self):
        return MapDefinition.from_drafts(
            "test",
            [Seed(id="a", x=1, y=1), Seed(id="b", x=2, y=2), Seed(id="c", x=3, y=3)],
            [RegionDraft(name="One", seed_ids=["a", "b", "ghost"]), RegionDraft(seed_ids=["c"])],
            width=800,
            height=600,
        )

    def test_from_drafts(self, definition):
        assert [r.id for r in definition.regions] == ["one", "region_1"]
        assert definition.width == 800

    def test_lookups(self, definition):
        assert definition.seed_by_id("b").x == 2
        assert definition.seed_by_id("zzz") is None
        assert [s.id for s in definition.seeds_in_region("one")] == ["a", "b"]
        assert definition.seeds_in_region("zzz") == []
        assert definition.region_for_seed("c").id == "region_1"
        assert definition.region_for_seed("zzz") is None

    def test_with_seeds_leaves_original(self, definition):
        moved = definition.with_seeds([Seed(id="a", x=50, y=50)])

        assert len(moved.seeds) == 1
        assert len(definition.seeds) == 3
        assert moved.regions == definition.regions

    def test_invalid_dimensions(self):
        with pytest.raises(ValidationError):
            MapDefinition(id="x", width=0)

    def test_region_requires_id(self):
        with pytest.raises(ValidationError):
            Region(name="No id")
