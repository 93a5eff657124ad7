"""Read critters and categories from the MacDive database."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from crittersync.domain.errors import CatalogLoadError
from crittersync.domain.model import Critter, CritterCategory

from .tables import critter_category_table, critter_table

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class SqlAlchemyCritterCatalog:
    """``CritterCatalog`` backed by a MacDive SQLite database."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def critters(self) -> list[Critter]:
        statement = select(
            critter_table.c.Z_PK,
            critter_table.c.ZNAME,
            critter_table.c.ZSPECIES,
            critter_table.c.ZRELATIONSHIPCRITTERTOCRITTERCATEGORY,
        ).order_by(critter_table.c.Z_PK)
        try:
            with self._engine.connect() as connection:
                rows = connection.execute(statement).all()
        except SQLAlchemyError as exc:
            raise CatalogLoadError(f"Could not read critters: {exc}") from exc

        critters = [
            Critter(
                id=row.Z_PK,
                name=row.ZNAME,
                species=_blank_to_none(row.ZSPECIES),
                category_id=row.ZRELATIONSHIPCRITTERTOCRITTERCATEGORY,
            )
            for row in rows
        ]
        log.debug("Loaded %d critters", len(critters))
        return critters

    def categories(self) -> list[CritterCategory]:
        """Named categories by ascending id; unnamed rows are skipped."""

        statement = select(
            critter_category_table.c.Z_PK,
            critter_category_table.c.ZNAME,
        ).order_by(critter_category_table.c.Z_PK)
        try:
            with self._engine.connect() as connection:
                rows = connection.execute(statement).all()
        except SQLAlchemyError as exc:
            raise CatalogLoadError(f"Could not read critter categories: {exc}") from exc

        categories = [
            CritterCategory(id=row.Z_PK, name=row.ZNAME)
            for row in rows
            if _blank_to_none(row.ZNAME) is not None
        ]
        log.debug("Loaded %d critter categories", len(categories))
        return categories


def _blank_to_none(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value
