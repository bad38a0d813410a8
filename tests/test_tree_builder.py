"""
Unit tests for the direct parent candidates and the static forest.
"""

import pytest

from engine.cube_build_plan import CuboidEnumerator
from engine.entity import IndexEntity, fully_derive, group_layouts
from engine.tree_builder import TreeBuilder
from utils.error import ContractViolationError

ABCD, ABC, ABD, AB, A_ONLY = 1, 2, 3, 4, 5


def candidates_of(builder, index_id):
    return list(builder.nodes[index_id].parent_candidates)


class TestFindDirectParentCandidates:
    """Test suite for the candidate scan."""

    def test_abcd_example(self, abcd_cuboids) -> None:
        builder = TreeBuilder(abcd_cuboids).build()

        assert candidates_of(builder, ABC) == [ABCD]
        assert candidates_of(builder, ABD) == [ABCD]
        assert candidates_of(builder, AB) == [ABC, ABD]
        assert candidates_of(builder, A_ONLY) == [AB]
        assert candidates_of(builder, ABCD) == []
        assert [root.id for root in builder.roots] == [ABCD]

    def test_measures_take_part_in_derivation(self) -> None:
        entities = [IndexEntity(1, [1, 2, 3], [100]), IndexEntity(2, [1, 2], [100, 101]),
                    IndexEntity(3, [1], [101])]
        for entity in entities:
            entity.add_layout(entity.id * 10 + 1)
        builder = TreeBuilder(group_layouts(entities)).build()

        # 1 lacks measure 101, so only 2 can serve 3
        assert candidates_of(builder, 3) == [2]
        assert candidates_of(builder, 2) == []
        assert sorted(root.id for root in builder.roots) == [1, 2]

    @pytest.mark.parametrize("wide_id, narrow_id", [(1, 2), (2, 1)])
    def test_same_dimensions_never_derive(self, wide_id, narrow_id) -> None:
        wide = IndexEntity(wide_id, [1, 2], [100, 101])
        narrow = IndexEntity(narrow_id, [1, 2], [100])
        child = IndexEntity(3, [1], [100])
        for entity in (wide, narrow, child):
            entity.add_layout(entity.id * 10 + 1)
        builder = TreeBuilder(group_layouts([wide, narrow, child])).build()

        assert not fully_derive(wide, narrow)
        assert candidates_of(builder, 3) == [1, 2]
        for first in candidates_of(builder, 3):
            for second in candidates_of(builder, 3):
                assert not fully_derive(builder.nodes[first].index_entity, builder.nodes[second].index_entity)
        assert sorted(root.id for root in builder.roots) == [1, 2]

    def test_self_is_never_a_candidate(self, abcd_cuboids) -> None:
        builder = TreeBuilder(abcd_cuboids, derive=lambda candidate, target: True)

        for entity in abcd_cuboids:
            assert entity not in builder.find_direct_parent_candidates(entity)

    def test_injected_oracle(self, abcd_cuboids) -> None:
        # nothing derives anything, every cuboid is a root
        builder = TreeBuilder(abcd_cuboids, derive=lambda candidate, target: False).build()

        assert sorted(root.id for root in builder.roots) == [ABCD, ABC, ABD, AB, A_ONLY]

    def test_candidates_follow_scan_order(self, cuboid_factory) -> None:
        cuboids = cuboid_factory([(9, [1, 2, 3]), (7, [1, 2, 4]), (8, [1, 2])])
        builder = TreeBuilder(cuboids).build()

        # same dimension count, lower id first
        assert candidates_of(builder, 8) == [7, 9]


class TestTreeBuilder:
    """Test suite for the forest construction."""

    def test_nodes_are_indexed_by_id(self, abcd_cuboids) -> None:
        builder = TreeBuilder(abcd_cuboids).build()

        assert list(builder.nodes) == [ABCD, ABC, ABD, AB, A_ONLY]
        assert sorted(builder.layouts) == [11, 21, 31, 41, 51]

    def test_nothing_is_decided_after_build(self, abcd_cuboids) -> None:
        builder = TreeBuilder(abcd_cuboids).build()

        for node in builder.nodes.values():
            assert node.parent is None
            assert node.children == []
            assert node.has_been_decided is False
        assert builder.nodes[ABCD].level == 0
        assert builder.nodes[ABC].level is None

    def test_duplicate_cuboid_id_fails(self) -> None:
        first = IndexEntity(1, [1, 2])
        second = IndexEntity(1, [1])
        # equal ids hash equal, so build the mapping from a list of pairs
        cuboids = _PairMapping([(first, []), (second, [])])

        with pytest.raises(ContractViolationError):
            TreeBuilder(cuboids)

    def test_duplicate_layout_id_fails(self) -> None:
        first = IndexEntity(1, [1, 2])
        second = IndexEntity(2, [1])
        first.add_layout(11)
        second.add_layout(11)

        with pytest.raises(ContractViolationError):
            TreeBuilder(group_layouts([first, second])).build()

    def test_disjoint_catalog_is_a_forest(self, cuboid_factory) -> None:
        cuboids = cuboid_factory([(1, [1, 2]), (2, [3, 4]), (3, [1]), (4, [3])])
        builder = TreeBuilder(cuboids).build()

        assert [root.id for root in builder.roots] == [1, 2]
        assert candidates_of(builder, 3) == [1]
        assert candidates_of(builder, 4) == [2]


class TestLatticeProperties:
    """Properties over the full lattice of four dimensions."""

    @pytest.fixture
    def lattice(self, cuboid_factory):
        combinations = CuboidEnumerator("cube-1", [1, 2, 3, 4]).enumerate()
        return cuboid_factory(list(enumerate(combinations, start=1)))

    def test_candidates_are_minimal(self, lattice) -> None:
        builder = TreeBuilder(lattice).build()
        entities = {entity.id: entity for entity in lattice}

        for node in builder.nodes.values():
            for first in node.parent_candidates:
                for second in node.parent_candidates:
                    assert not fully_derive(entities[first], entities[second])

    def test_root_iff_nothing_derives_it(self, lattice) -> None:
        builder = TreeBuilder(lattice).build()
        root_ids = {root.id for root in builder.roots}

        for entity in lattice:
            derived = any(fully_derive(other, entity) for other in lattice)
            assert (entity.id in root_ids) is (not derived)

    def test_direct_parent_has_one_more_dimension(self, lattice) -> None:
        builder = TreeBuilder(lattice).build()
        entities = {entity.id: entity for entity in lattice}

        for node in builder.nodes.values():
            for candidate_id in node.parent_candidates:
                assert len(entities[candidate_id].dimensions) == len(node.index_entity.dimensions) + 1
            if not node.is_root():
                assert len(node.parent_candidates) == 4 - len(node.index_entity.dimensions)


class _PairMapping:
    """Mapping keyed by entity that keeps duplicates, like a catalog read from a broken source."""

    def __init__(self, pairs):
        self._pairs = pairs

    def __iter__(self):
        return iter(entity for entity, _ in self._pairs)

    def __getitem__(self, key):
        for entity, layouts in self._pairs:
            if entity is key:
                return layouts
        raise KeyError(key)
