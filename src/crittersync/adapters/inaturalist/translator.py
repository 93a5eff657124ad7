"""Translate iNaturalist taxon payloads into domain taxon records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from crittersync.domain.model import TaxonAncestor, TaxonRecord

if TYPE_CHECKING:
    from .schema import INaturalistAncestor, INaturalistTaxon


def translate_taxon(payload: INaturalistTaxon) -> TaxonRecord:
    """Build a ``TaxonRecord``; ancestors keep iNaturalist's root-first order.

    Ancestor ids that are not present in ``payload.ancestors`` are ignored; the
    search endpoint only returns ids, the detail endpoint returns the full chain.
    """

    ancestors = tuple(_translate_ancestor(item) for item in payload.ancestors or ())
    return TaxonRecord(
        scientific_name=payload.name,
        taxon_id=payload.id,
        rank=payload.rank,
        preferred_common_name=_clean(payload.preferred_common_name),
        iconic_taxon_name=_clean(payload.iconic_taxon_name),
        ancestors=ancestors,
    )


def _translate_ancestor(payload: INaturalistAncestor) -> TaxonAncestor:
    return TaxonAncestor(
        name=payload.name,
        rank=payload.rank,
        preferred_common_name=_clean(payload.preferred_common_name),
    )


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    text = value.strip()
    return text or None
