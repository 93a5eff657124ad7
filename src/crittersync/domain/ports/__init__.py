"""Domain port definitions for adapters."""

from __future__ import annotations

from .catalog import CritterCatalog
from .execution import ActionExecutor, ExecutionResult, NameUpdateExecutor
from .taxonomy import TaxonLookup

__all__ = [
    "ActionExecutor",
    "CritterCatalog",
    "ExecutionResult",
    "NameUpdateExecutor",
    "TaxonLookup",
]
