"""Domain model for critter catalog reconciliation."""

from __future__ import annotations

from .critters import CategoryId, Critter, CritterCategory, CritterId
from .taxonomy import (
    DEFAULT_GROUP_RANK,
    UNCLASSIFIED_GROUP,
    CategoryOverrides,
    GroupName,
    GroupSource,
    TaxonAncestor,
    TaxonRecord,
)

__all__ = [
    "DEFAULT_GROUP_RANK",
    "UNCLASSIFIED_GROUP",
    "CategoryId",
    "CategoryOverrides",
    "Critter",
    "CritterCategory",
    "CritterId",
    "GroupName",
    "GroupSource",
    "TaxonAncestor",
    "TaxonRecord",
]
