"""Errors raised by the reconciliation domain."""

from __future__ import annotations


class CritterSyncError(RuntimeError):
    """Base class for failures that abort a whole run."""


class CatalogLoadError(CritterSyncError):
    """Raised when the critter or category list cannot be read at all."""


class TaxonLookupError(LookupError):
    """Raised when a species cannot be resolved to a taxon record.

    Covers transport failures, timeouts, invalid payloads and names the service
    does not know. Failures are cached per species for the rest of a run.
    """

    def __init__(self, scientific_name: str, reason: str) -> None:
        super().__init__(f"{scientific_name}: {reason}")
        self.scientific_name = scientific_name
        self.reason = reason
