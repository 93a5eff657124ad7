"""iNaturalist taxonomy adapter."""

from __future__ import annotations

from .client import INaturalistAPIError, INaturalistClient
from .translator import translate_taxon

__all__ = ["INaturalistAPIError", "INaturalistClient", "translate_taxon"]
