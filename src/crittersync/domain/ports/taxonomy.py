"""Ports for resolving species names against an external taxonomy."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from crittersync.domain.model import TaxonRecord


@runtime_checkable
class TaxonLookup(Protocol):
    """Awaitable lookup of a single scientific name.

    Raises ``TaxonLookupError`` when the service fails or knows no such name.
    """

    async def __call__(self, scientific_name: str) -> TaxonRecord: ...
