"""Derive the desired critter category for a taxon."""

from __future__ import annotations

from typing import TYPE_CHECKING

from crittersync.domain.model import UNCLASSIFIED_GROUP, GroupName, GroupSource

if TYPE_CHECKING:
    from collections.abc import Iterator

    from crittersync.domain.model import CategoryOverrides, TaxonRecord


def classify_taxon(taxon: TaxonRecord, overrides: CategoryOverrides) -> GroupName:
    """Return the group name a critter of ``taxon`` should be filed under.

    Resolution order:

    1. an override matching the scientific name, an ancestor (most specific
       first), the iconic taxon, or the derived group candidate
    2. the lineage member at ``overrides.group_rank`` (common name preferred)
    3. the iconic taxon name
    4. ``UNCLASSIFIED_GROUP``, flagged as a fallback so callers can report the gap

    Never raises; a taxon is never dropped for lack of a group.
    """

    candidate = taxon.group_candidate(overrides.group_rank)
    for identifier in _override_keys(taxon, candidate):
        forced = overrides.get(identifier)
        if forced is not None:
            return GroupName(forced, GroupSource.OVERRIDE)

    if candidate:
        return GroupName(candidate, GroupSource.RANK)
    if taxon.iconic_taxon_name:
        return GroupName(taxon.iconic_taxon_name, GroupSource.ICONIC)
    return GroupName(UNCLASSIFIED_GROUP, GroupSource.FALLBACK)


def _override_keys(taxon: TaxonRecord, candidate: str | None) -> Iterator[str]:
    yield taxon.scientific_name
    for ancestor in reversed(taxon.ancestors):
        yield ancestor.name
        if ancestor.preferred_common_name:
            yield ancestor.preferred_common_name
    if taxon.iconic_taxon_name:
        yield taxon.iconic_taxon_name
    if candidate:
        yield candidate
