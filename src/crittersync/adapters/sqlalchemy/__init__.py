"""SQLAlchemy adapters for the MacDive database."""

from __future__ import annotations

from .catalog import SqlAlchemyCritterCatalog
from .executor import REVIEW_PREFIX, SqlAlchemyActionExecutor
from .tables import create_macdive_engine, critter_category_table, critter_table, metadata

__all__ = [
    "REVIEW_PREFIX",
    "SqlAlchemyActionExecutor",
    "SqlAlchemyCritterCatalog",
    "create_macdive_engine",
    "critter_category_table",
    "critter_table",
    "metadata",
]
