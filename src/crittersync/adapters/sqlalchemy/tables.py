"""SQLAlchemy Core tables for the parts of the MacDive database we touch.

MacDive stores its data through Core Data, hence the ``Z``-prefixed names. Only
the columns read or written here are declared.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import Column, Integer, MetaData, String, Table, create_engine

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

metadata = MetaData()

critter_category_table = Table(
    "ZCRITTERCATEGORY",
    metadata,
    Column("Z_PK", Integer, primary_key=True),
    Column("Z_ENT", Integer),
    Column("Z_OPT", Integer),
    Column("ZNAME", String),
)

critter_table = Table(
    "ZCRITTER",
    metadata,
    Column("Z_PK", Integer, primary_key=True),
    Column("Z_ENT", Integer),
    Column("Z_OPT", Integer),
    Column("ZRELATIONSHIPCRITTERTOCRITTERCATEGORY", Integer),
    Column("ZNAME", String),
    Column("ZSPECIES", String),
)


def create_macdive_engine(database: Path | str) -> Engine:
    """Create an engine for the MacDive SQLite file at ``database``."""

    return create_engine(f"sqlite+pysqlite:///{Path(database)}", future=True)
