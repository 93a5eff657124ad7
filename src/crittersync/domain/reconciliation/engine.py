"""Category reconciliation: diff current critter categories against desired groups.

The pass is a single-threaded fold over critters in catalog order. Order matters:
the first critter needing a missing group consumes a pool member, and every later
critter with the same group sees the renamed category as already existing.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from crittersync.domain.errors import TaxonLookupError
from crittersync.domain.taxonomy.classify import classify_taxon

from .plan import (
    CreateNewCategory,
    Diagnostic,
    DiagnosticKind,
    NoOp,
    PlanEntry,
    Reassign,
    ReconciliationReport,
    RenameAndReuse,
)
from .state import ReconciliationState

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping, Sequence

    from crittersync.domain.model import (
        CategoryId,
        CategoryOverrides,
        Critter,
        CritterCategory,
        CritterId,
        GroupName,
        TaxonRecord,
    )

log = getLogger(__name__)


def desired_groups(
    critters: Iterable[Critter],
    taxon_for: Callable[[str], TaxonRecord],
    overrides: CategoryOverrides,
) -> tuple[dict[CritterId, GroupName], list[Diagnostic]]:
    """Classify every critter whose species resolves; report the ones that do not."""

    groups: dict[CritterId, GroupName] = {}
    diagnostics: list[Diagnostic] = []
    for critter in critters:
        if not critter.species:
            diagnostics.append(
                Diagnostic(
                    kind=DiagnosticKind.MISSING_SPECIES,
                    critter_id=critter.id,
                    message=f"Critter {critter.name!r} has no species name",
                )
            )
            continue
        try:
            taxon = taxon_for(critter.species)
        except TaxonLookupError as exc:
            diagnostics.append(
                Diagnostic(
                    kind=DiagnosticKind.LOOKUP_ERROR,
                    critter_id=critter.id,
                    species=critter.species,
                    message=f"Taxon lookup failed: {exc.reason}",
                )
            )
            continue

        group = classify_taxon(taxon, overrides)
        if group.is_fallback:
            diagnostics.append(
                Diagnostic(
                    kind=DiagnosticKind.CLASSIFICATION_GAP,
                    critter_id=critter.id,
                    species=critter.species,
                    message=f"No group derivable, filing under {group.name!r}",
                )
            )
        groups[critter.id] = group
    return groups, diagnostics


def reconcile_categories(
    critters: Sequence[Critter],
    categories: Iterable[CritterCategory],
    desired: Mapping[CritterId, GroupName],
    *,
    diagnostics: Iterable[Diagnostic] = (),
    reuse_for_unassigned: bool = True,
    should_stop: Callable[[], bool] | None = None,
) -> ReconciliationReport:
    """Compute the reconciliation plan for ``critters``.

    ``desired`` maps critter ids to their desired group; critters missing from it
    get no plan entry but always a diagnostic. ``should_stop`` is polled before
    each critter; once it returns true the partial plan is returned with
    ``cancelled`` set.
    """

    state = ReconciliationState.partition(categories, (group.name for group in desired.values()))
    report = ReconciliationReport(diagnostics=list(diagnostics), pool_size_before=len(state.pool))
    reported = {item.critter_id for item in report.diagnostics}
    stranded = _stranded_by_category(critters, desired)

    for critter in critters:
        if should_stop is not None and should_stop():
            log.warning("Reconciliation cancelled before critter %s", critter.id)
            report.cancelled = True
            break

        group = desired.get(critter.id)
        if group is None:
            if critter.id not in reported:
                report.diagnostics.append(
                    Diagnostic(
                        kind=DiagnosticKind.UNRESOLVED,
                        critter_id=critter.id,
                        species=critter.species,
                        message="No desired group available",
                    )
                )
            continue

        entry = decide(critter, group, state, reuse_for_unassigned=reuse_for_unassigned)
        report.entries.append(entry)
        if isinstance(entry, RenameAndReuse):
            report.diagnostics.extend(
                Diagnostic(
                    kind=DiagnosticKind.RECYCLED_CATEGORY,
                    critter_id=left_behind.id,
                    species=left_behind.species,
                    message=(
                        f"Still filed under {entry.old_name!r}, "
                        f"which is renamed to {entry.new_name!r}"
                    ),
                )
                for left_behind in stranded.get(entry.reused_category_id, ())
            )

    report.extraneous = state.pool.remaining()
    if report.extraneous:
        log.info(
            "Extraneous categories: %s",
            ", ".join(category.name for category in report.extraneous),
        )
    return report


def decide(
    critter: Critter,
    group: GroupName,
    state: ReconciliationState,
    *,
    reuse_for_unassigned: bool = True,
) -> PlanEntry:
    """Pick the plan entry for one critter, updating ``state`` on reuse or creation."""

    current = (
        state.categories.get(critter.category_id) if critter.category_id is not None else None
    )
    target = state.categories.find(group.name)

    if target is not None:
        if current is not None and current.id == target.id:
            return NoOp(critter=critter, category=target)
        log.debug("Re-assigning critter %s: %s => %s", critter.id, _name(current), target.name)
        return Reassign(critter=critter, from_category=current, to_category=target)

    if group.key in state.pending_new or (current is None and not reuse_for_unassigned):
        return _create(critter, group, state)

    reused = state.pool.take(prefer=current.id if current is not None else None)
    if reused is None:
        log.debug("No extraneous category left to reuse for %r", group.name)
        return _create(critter, group, state)

    state.categories.rename(reused.id, group.name)
    log.debug("Renaming category %s: %r => %r", reused.id, reused.name, group.name)
    return RenameAndReuse(
        critter=critter,
        reused_category_id=reused.id,
        old_name=reused.name,
        new_name=group.name,
    )


def _stranded_by_category(
    critters: Iterable[Critter],
    desired: Mapping[CritterId, GroupName],
) -> dict[CategoryId, list[Critter]]:
    """Critters without a desired group, by the category they stay in."""

    stranded: dict[CategoryId, list[Critter]] = {}
    for critter in critters:
        if critter.category_id is not None and critter.id not in desired:
            stranded.setdefault(critter.category_id, []).append(critter)
    return stranded


def _create(critter: Critter, group: GroupName, state: ReconciliationState) -> CreateNewCategory:
    if group.key not in state.pending_new:
        log.debug("New category required: %s", group.name)
        state.pending_new.add(group.key)
    return CreateNewCategory(critter=critter, desired_name=group.name)


def _name(category: CritterCategory | None) -> str:
    return category.name if category is not None else "---"
