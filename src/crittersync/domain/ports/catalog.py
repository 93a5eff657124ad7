"""Ports for reading the local critter catalog."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from crittersync.domain.model import Critter, CritterCategory


@runtime_checkable
class CritterCatalog(Protocol):
    """Read-only access to critters and categories of the local catalog.

    Implementations raise ``CatalogLoadError`` when either list cannot be read.
    """

    def critters(self) -> list[Critter]:
        """Return all critters in stable catalog order."""
        ...

    def categories(self) -> list[CritterCategory]: ...
