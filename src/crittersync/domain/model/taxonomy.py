"""Taxonomy records, derived group names and user overrides."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from crittersync.common.text import normalize_name_key

if TYPE_CHECKING:
    from collections.abc import Iterator

DEFAULT_GROUP_RANK = "family"
UNCLASSIFIED_GROUP = "Unclassified"


@dataclass(frozen=True, slots=True, kw_only=True)
class TaxonAncestor:
    name: str
    rank: str | None = None
    preferred_common_name: str | None = None

    @property
    def display_name(self) -> str:
        return self.preferred_common_name or self.name


@dataclass(frozen=True, slots=True, kw_only=True)
class TaxonRecord:
    """External classification of one species.

    ``ancestors`` are ordered from the most general taxon (e.g. *Animalia*) to the
    direct parent.
    """

    scientific_name: str
    taxon_id: int | None = None
    rank: str | None = None
    preferred_common_name: str | None = None
    iconic_taxon_name: str | None = None
    ancestors: tuple[TaxonAncestor, ...] = ()

    def lineage(self) -> tuple[TaxonAncestor, ...]:
        """Ancestors plus the taxon itself, most general first."""

        own = TaxonAncestor(
            name=self.scientific_name,
            rank=self.rank,
            preferred_common_name=self.preferred_common_name,
        )
        return (*self.ancestors, own)

    def group_candidate(self, rank: str = DEFAULT_GROUP_RANK) -> str | None:
        """Display name of the lineage member at ``rank``, if the lineage has one."""

        wanted = rank.lower()
        for member in reversed(self.lineage()):
            if member.rank is not None and member.rank.lower() == wanted:
                return member.display_name
        return None


class GroupSource(StrEnum):
    """Where a desired group name came from."""

    OVERRIDE = "override"
    RANK = "rank"
    ICONIC = "iconic"
    FALLBACK = "fallback"


@dataclass(frozen=True, slots=True)
class GroupName:
    name: str
    source: GroupSource = GroupSource.RANK

    @property
    def key(self) -> str:
        return normalize_name_key(self.name)

    @property
    def is_fallback(self) -> bool:
        return self.source is GroupSource.FALLBACK

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class CategoryOverrides(Mapping[str, str]):
    """Forced group names keyed by normalised taxon identifiers."""

    groups: Mapping[str, str] = field(default_factory=dict[str, str])
    group_rank: str = DEFAULT_GROUP_RANK

    @classmethod
    def from_mapping(
        cls,
        groups: Mapping[str, str],
        *,
        group_rank: str = DEFAULT_GROUP_RANK,
    ) -> CategoryOverrides:
        normalized = {normalize_name_key(taxon): group for taxon, group in groups.items()}
        return cls(groups=normalized, group_rank=group_rank)

    def __getitem__(self, key: str) -> str:
        return self.groups[normalize_name_key(key)]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and normalize_name_key(key) in self.groups

    def __iter__(self) -> Iterator[str]:
        return iter(self.groups)

    def __len__(self) -> int:
        return len(self.groups)
