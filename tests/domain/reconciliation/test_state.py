from __future__ import annotations

from crittersync.domain.model import CritterCategory
from crittersync.domain.reconciliation import (
    CategoryTable,
    ExtraneousCategoryPool,
    ReconciliationState,
)


def test_rename_moves_the_index_entry() -> None:
    table = CategoryTable.from_categories([CritterCategory(id=2, name="Coral")])

    renamed = table.rename(2, "Mollusk")

    assert renamed == CritterCategory(id=2, name="Mollusk")
    assert table.find("coral") is None
    assert table.find("MOLLUSK") == renamed
    assert table.get(2) == renamed
    assert table.current() == [renamed]


def test_shadowed_category_stays_in_the_arena() -> None:
    first = CritterCategory(id=1, name="Fish")
    second = CritterCategory(id=5, name="FISH")

    table = CategoryTable.from_categories([first, second])

    assert table.find("fish") == second
    assert table.get(1) == first
    assert table.current() == [second]


def test_pool_take_drains_in_ascending_id_order() -> None:
    pool = ExtraneousCategoryPool.from_categories(
        [CritterCategory(id=8, name="B"), CritterCategory(id=3, name="A")]
    )

    assert pool.take() == CritterCategory(id=3, name="A")
    assert pool.take() == CritterCategory(id=8, name="B")
    assert pool.take() is None
    assert len(pool) == 0


def test_pool_take_prefers_the_requested_member() -> None:
    pool = ExtraneousCategoryPool.from_categories(
        [CritterCategory(id=8, name="B"), CritterCategory(id=3, name="A")]
    )

    assert pool.take(prefer=8) == CritterCategory(id=8, name="B")
    assert pool.take(prefer=8) == CritterCategory(id=3, name="A")
    assert pool.take(prefer=3) is None


def test_partition_puts_unwanted_categories_in_the_pool() -> None:
    state = ReconciliationState.partition(
        [
            CritterCategory(id=1, name="Fish"),
            CritterCategory(id=2, name="Coral"),
            CritterCategory(id=3, name="Sponges"),
        ],
        ["fish", "Crabs"],
    )

    assert [category.id for category in state.pool.remaining()] == [2, 3]
    assert state.desired_keys == frozenset({"fish", "crabs"})
    assert state.pending_new == set()
