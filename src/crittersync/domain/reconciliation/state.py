"""Mutable state of a single reconciliation pass.

Categories live in an arena keyed by their stable id; a separate index maps
normalised names to ids. Renames replace the arena entry and move the index
entry, so the old and new names never alias the same object.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from logging import getLogger
from typing import TYPE_CHECKING

from crittersync.common.text import normalize_name_key

if TYPE_CHECKING:
    from collections.abc import Iterable

    from crittersync.domain.model import CategoryId, CritterCategory

log = getLogger(__name__)


@dataclass(slots=True)
class CategoryTable:
    """Categories by id plus a last-write-wins index from name key to id."""

    _by_id: dict[CategoryId, CritterCategory] = field(
        default_factory=dict["CategoryId", "CritterCategory"]
    )
    _id_by_key: dict[str, CategoryId] = field(default_factory=dict[str, "CategoryId"])

    @classmethod
    def from_categories(cls, categories: Iterable[CritterCategory]) -> CategoryTable:
        table = cls()
        for category in categories:
            table.add(category)
        return table

    def add(self, category: CritterCategory) -> None:
        key = normalize_name_key(category.name)
        shadowed = self._id_by_key.get(key)
        if shadowed is not None and shadowed != category.id:
            log.debug(
                "Category %s shadows category %s with the same name %r",
                category.id,
                shadowed,
                category.name,
            )
        self._by_id[category.id] = category
        self._id_by_key[key] = category.id

    def get(self, category_id: CategoryId) -> CritterCategory | None:
        return self._by_id.get(category_id)

    def find(self, name: str) -> CritterCategory | None:
        """Return the current category for ``name`` under name normalisation."""

        category_id = self._id_by_key.get(normalize_name_key(name))
        if category_id is None:
            return None
        return self._by_id[category_id]

    def current(self) -> list[CritterCategory]:
        """Categories reachable through the name index, by ascending id."""

        return sorted((self._by_id[i] for i in set(self._id_by_key.values())), key=_by_id)

    def rename(self, category_id: CategoryId, new_name: str) -> CritterCategory:
        old = self._by_id[category_id]
        old_key = normalize_name_key(old.name)
        if self._id_by_key.get(old_key) == category_id:
            del self._id_by_key[old_key]
        renamed = replace(old, name=new_name)
        self._by_id[category_id] = renamed
        self._id_by_key[normalize_name_key(new_name)] = category_id
        return renamed


@dataclass(slots=True)
class ExtraneousCategoryPool:
    """Worklist of categories no critter wants, consumed lowest id first.

    A critter already filed under a member recycles that member instead.
    """

    _members: list[CritterCategory] = field(default_factory=list["CritterCategory"])

    @classmethod
    def from_categories(cls, categories: Iterable[CritterCategory]) -> ExtraneousCategoryPool:
        return cls(sorted(categories, key=_by_id))

    def take(self, prefer: CategoryId | None = None) -> CritterCategory | None:
        """Remove and return ``prefer`` if it is a member, else the lowest id.

        Returns ``None`` when the pool is exhausted.
        """

        if not self._members:
            return None
        for index, member in enumerate(self._members):
            if member.id == prefer:
                return self._members.pop(index)
        return self._members.pop(0)

    def remaining(self) -> list[CritterCategory]:
        return list(self._members)

    def __len__(self) -> int:
        return len(self._members)


@dataclass(slots=True)
class ReconciliationState:
    """Everything the per-critter fold reads and mutates."""

    categories: CategoryTable
    pool: ExtraneousCategoryPool
    desired_keys: frozenset[str]
    pending_new: set[str] = field(default_factory=set[str])

    @classmethod
    def partition(
        cls,
        categories: Iterable[CritterCategory],
        desired_names: Iterable[str],
    ) -> ReconciliationState:
        """Split current categories into desired ones and the extraneous pool."""

        table = CategoryTable.from_categories(categories)
        desired_keys = frozenset(normalize_name_key(name) for name in desired_names)
        extraneous = [
            category
            for category in table.current()
            if normalize_name_key(category.name) not in desired_keys
        ]
        return cls(
            categories=table,
            pool=ExtraneousCategoryPool.from_categories(extraneous),
            desired_keys=desired_keys,
        )


def _by_id(category: CritterCategory) -> CategoryId:
    return category.id
