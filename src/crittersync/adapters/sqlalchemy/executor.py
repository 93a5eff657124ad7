"""Apply reconciliation results to the MacDive database."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from crittersync.common.text import normalize_name_key, title_case
from crittersync.domain.ports.execution import ExecutionResult
from crittersync.domain.reconciliation.plan import (
    CreateNewCategory,
    NoOp,
    Reassign,
    RenameAndReuse,
)

from .tables import critter_category_table, critter_table

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.engine import Connection, Engine

    from crittersync.domain.model import CategoryId, CritterId
    from crittersync.domain.reconciliation.naming import CritterNameUpdate
    from crittersync.domain.reconciliation.plan import PlanEntry

log = getLogger(__name__)

REVIEW_PREFIX = "Review: "


class SqlAlchemyActionExecutor:
    """Executes plan entries one transaction at a time.

    Categories created for ``CreateNewCategory`` entries are remembered by
    normalised name, so later entries with the same name reuse them.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._created: dict[str, CategoryId] = {}

    def execute_all(self, entries: Iterable[PlanEntry]) -> list[ExecutionResult[PlanEntry]]:
        results = [self.execute(entry) for entry in entries]
        failed = sum(not result.succeeded for result in results)
        log.info("Executed %d plan entries, %d failed", len(results), failed)
        return results

    def execute(self, entry: PlanEntry) -> ExecutionResult[PlanEntry]:
        if isinstance(entry, NoOp):
            return ExecutionResult(item=entry, succeeded=True)
        try:
            with self._engine.begin() as connection:
                created = self._apply(connection, entry)
        except SQLAlchemyError as exc:
            log.warning(
                "Failed to apply %s for critter %s: %s", entry.action, entry.critter.id, exc
            )
            return ExecutionResult(item=entry, succeeded=False, error=str(exc))
        if created is not None:
            # only committed categories may be reused by later entries
            key, category_id = created
            self._created[key] = category_id
        return ExecutionResult(item=entry, succeeded=True)

    def apply_name_update(
        self,
        name_update: CritterNameUpdate,
    ) -> ExecutionResult[CritterNameUpdate]:
        """Write corrected names, prefixed for manual review inside MacDive."""

        values: dict[str, Any] = {}
        if name_update.common_name is not None:
            values["ZNAME"] = f"{REVIEW_PREFIX}{name_update.common_name}"
        if name_update.scientific_name is not None:
            values["ZSPECIES"] = f"{REVIEW_PREFIX}{name_update.scientific_name}"
        if not values:
            return ExecutionResult(item=name_update, succeeded=True)

        statement = (
            update(critter_table)
            .where(critter_table.c.Z_PK == name_update.critter_id)
            .values(**values)
        )
        try:
            with self._engine.begin() as connection:
                connection.execute(statement)
        except SQLAlchemyError as exc:
            log.warning("Failed to update names of critter %s: %s", name_update.critter_id, exc)
            return ExecutionResult(item=name_update, succeeded=False, error=str(exc))
        return ExecutionResult(item=name_update, succeeded=True)

    def _apply(self, connection: Connection, entry: PlanEntry) -> tuple[str, CategoryId] | None:
        """Run the statements for ``entry``; return the category it created, if any."""

        if isinstance(entry, Reassign):
            _assign(connection, entry.critter.id, entry.to_category.id)
        elif isinstance(entry, RenameAndReuse):
            _rename(connection, entry.reused_category_id, entry.new_name)
            _assign(connection, entry.critter.id, entry.reused_category_id)
        elif isinstance(entry, CreateNewCategory):
            key = normalize_name_key(entry.desired_name)
            category_id = self._created.get(key)
            if category_id is not None:
                _assign(connection, entry.critter.id, category_id)
                return None
            category_id = _create(connection, entry.desired_name)
            _assign(connection, entry.critter.id, category_id)
            return key, category_id
        else:
            raise TypeError(f"Unsupported plan entry: {entry!r}")
        return None


def _assign(connection: Connection, critter_id: CritterId, category_id: CategoryId) -> None:
    connection.execute(
        update(critter_table)
        .where(critter_table.c.Z_PK == critter_id)
        .values(ZRELATIONSHIPCRITTERTOCRITTERCATEGORY=category_id)
    )


def _rename(connection: Connection, category_id: CategoryId, name: str) -> None:
    log.info("Renaming category %s to %s", category_id, title_case(name))
    connection.execute(
        update(critter_category_table)
        .where(critter_category_table.c.Z_PK == category_id)
        .values(ZNAME=title_case(name), Z_OPT=critter_category_table.c.Z_OPT + 1)
    )


def _create(connection: Connection, name: str) -> CategoryId:
    next_id = connection.execute(
        select(func.coalesce(func.max(critter_category_table.c.Z_PK), 0) + 1)
    ).scalar_one()
    entity = connection.execute(select(critter_category_table.c.Z_ENT).limit(1)).scalar()
    connection.execute(
        insert(critter_category_table).values(
            Z_PK=next_id,
            Z_ENT=entity if entity is not None else 0,
            Z_OPT=1,
            ZNAME=title_case(name),
        )
    )
    log.info("Created category %s (%s)", title_case(name), next_id)
    return next_id
