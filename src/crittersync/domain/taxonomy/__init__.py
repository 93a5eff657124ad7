"""Taxonomy resolution and classification."""

from __future__ import annotations

from .classify import classify_taxon
from .resolver import TaxonOutcome, TaxonResolver

__all__ = ["TaxonOutcome", "TaxonResolver", "classify_taxon"]
