"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from crittersync.adapters.inaturalist import INaturalistClient
from crittersync.adapters.sqlalchemy import (
    SqlAlchemyActionExecutor,
    SqlAlchemyCritterCatalog,
    create_macdive_engine,
)
from crittersync.config import (
    ReconcileOptions,
    get_inaturalist_config,
    resolve_macdive_database,
)
from crittersync.domain.model import CategoryOverrides
from crittersync.domain.reconciliation import (
    desired_groups,
    diff_critter_names,
    reconcile_categories,
)
from crittersync.domain.taxonomy import TaxonResolver

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from contextlib import AbstractAsyncContextManager
    from pathlib import Path

    from sqlalchemy.engine import Engine

    from crittersync.domain.model import Critter
    from crittersync.domain.ports import (
        ActionExecutor,
        CritterCatalog,
        ExecutionResult,
        NameUpdateExecutor,
        TaxonLookup,
    )
    from crittersync.domain.reconciliation import (
        CritterNameUpdate,
        NameDiffReport,
        PlanEntry,
        ReconciliationReport,
    )

type LookupFactory = Callable[[], AbstractAsyncContextManager[TaxonLookup]]

log = getLogger(__name__)


@dataclass(slots=True)
class CategoryRunResult:
    report: ReconciliationReport
    executed: list[ExecutionResult[PlanEntry]] = field(
        default_factory=list["ExecutionResult[PlanEntry]"]
    )


@dataclass(slots=True)
class NameRunResult:
    report: NameDiffReport
    executed: list[ExecutionResult[CritterNameUpdate]] = field(
        default_factory=list["ExecutionResult[CritterNameUpdate]"]
    )


def _default_lookup_factory() -> INaturalistClient:
    return INaturalistClient(config=get_inaturalist_config())


async def prime_taxa(
    critters: Iterable[Critter],
    *,
    lookup_factory: LookupFactory,
    max_concurrency: int,
) -> TaxonResolver:
    """Resolve every distinct species of ``critters`` and return the filled resolver."""

    species = [critter.species for critter in critters if critter.species]
    async with lookup_factory() as lookup:
        resolver = TaxonResolver(lookup, max_concurrency=max_concurrency)
        await resolver.prime(species)
    return resolver


def diff_critter_categories(
    *,
    database: Path | None = None,
    overrides: CategoryOverrides | None = None,
    apply: bool = False,
    options: ReconcileOptions | None = None,
    catalog: CritterCatalog | None = None,
    lookup_factory: LookupFactory | None = None,
    executor: ActionExecutor | None = None,
    should_stop: Callable[[], bool] | None = None,
) -> CategoryRunResult:
    """Compute (and with ``apply`` execute) the critter category reconciliation plan."""

    effective_options = options or ReconcileOptions()
    engine = _engine_for(database) if catalog is None or (apply and executor is None) else None
    effective_catalog = catalog or SqlAlchemyCritterCatalog(_require(engine))

    critters = effective_catalog.critters()
    categories = effective_catalog.categories()
    log.info(
        "Reconciling %d critters against %d categories (apply=%s)",
        len(critters),
        len(categories),
        apply,
    )

    resolver = asyncio.run(
        prime_taxa(
            critters,
            lookup_factory=lookup_factory or _default_lookup_factory,
            max_concurrency=effective_options.max_concurrency,
        )
    )
    desired, diagnostics = desired_groups(
        critters, resolver.cached, overrides or CategoryOverrides()
    )
    report = reconcile_categories(
        critters,
        categories,
        desired,
        diagnostics=diagnostics,
        reuse_for_unassigned=effective_options.reuse_for_unassigned,
        should_stop=should_stop,
    )
    counts = report.counts()
    log.info(
        "Plan: %s; diagnostics=%d, extraneous=%d",
        ", ".join(f"{action}={count}" for action, count in sorted(counts.items())) or "empty",
        len(report.diagnostics),
        len(report.extraneous),
    )

    result = CategoryRunResult(report=report)
    if apply and not report.cancelled:
        effective_executor = executor or SqlAlchemyActionExecutor(_require(engine))
        result.executed = effective_executor.execute_all(report.changes())
    return result


def diff_critters(
    *,
    database: Path | None = None,
    apply: bool = False,
    options: ReconcileOptions | None = None,
    catalog: CritterCatalog | None = None,
    lookup_factory: LookupFactory | None = None,
    executor: NameUpdateExecutor | None = None,
    should_stop: Callable[[], bool] | None = None,
) -> NameRunResult:
    """Compare critter names with the taxonomy (and with ``apply`` write corrections)."""

    effective_options = options or ReconcileOptions()
    engine = _engine_for(database) if catalog is None or (apply and executor is None) else None
    effective_catalog = catalog or SqlAlchemyCritterCatalog(_require(engine))

    critters = effective_catalog.critters()
    resolver = asyncio.run(
        prime_taxa(
            critters,
            lookup_factory=lookup_factory or _default_lookup_factory,
            max_concurrency=effective_options.max_concurrency,
        )
    )
    report = diff_critter_names(critters, resolver.cached, should_stop=should_stop)
    log.info(
        "Name diff: updates=%d, diagnostics=%d", len(report.updates), len(report.diagnostics)
    )

    result = NameRunResult(report=report)
    if apply and not report.cancelled:
        effective_executor = executor or SqlAlchemyActionExecutor(_require(engine))
        result.executed = [effective_executor.apply_name_update(item) for item in report.updates]
    return result


def _engine_for(database: Path | None) -> Engine:
    path = resolve_macdive_database(database)
    log.debug("Using MacDive database %s", path)
    return create_macdive_engine(path)


def _require(engine: Engine | None) -> Engine:
    if engine is None:
        raise RuntimeError("No database engine configured")
    return engine
