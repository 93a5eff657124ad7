"""Diff critter display and scientific names against the taxonomy."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from crittersync.common.text import sentence_case, title_case
from crittersync.domain.errors import TaxonLookupError

from .plan import Diagnostic, DiagnosticKind

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from crittersync.domain.model import Critter, CritterId, TaxonRecord

log = getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class CritterNameUpdate:
    """Corrected names for one critter; ``None`` means leave the field alone."""

    critter_id: CritterId
    common_name: str | None = None
    scientific_name: str | None = None

    @property
    def has_changes(self) -> bool:
        return self.common_name is not None or self.scientific_name is not None


@dataclass(slots=True)
class NameDiffReport:
    updates: list[CritterNameUpdate] = field(default_factory=list["CritterNameUpdate"])
    diagnostics: list[Diagnostic] = field(default_factory=list["Diagnostic"])
    cancelled: bool = False


def diff_critter_names(
    critters: Iterable[Critter],
    taxon_for: Callable[[str], TaxonRecord],
    *,
    should_stop: Callable[[], bool] | None = None,
) -> NameDiffReport:
    report = NameDiffReport()
    for critter in critters:
        if should_stop is not None and should_stop():
            report.cancelled = True
            break
        if not critter.species:
            report.diagnostics.append(
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
            report.diagnostics.append(
                Diagnostic(
                    kind=DiagnosticKind.LOOKUP_ERROR,
                    critter_id=critter.id,
                    species=critter.species,
                    message=f"Taxon lookup failed: {exc.reason}",
                )
            )
            continue

        update, diagnostic = compare_names(critter, taxon)
        if diagnostic is not None:
            report.diagnostics.append(diagnostic)
        if update.has_changes:
            report.updates.append(update)
    return report


def compare_names(
    critter: Critter,
    taxon: TaxonRecord,
) -> tuple[CritterNameUpdate, Diagnostic | None]:
    """Compare one critter with its taxon record.

    Scientific names are compared in sentence case and common names in title
    case. A critter with neither a display name nor a preferred common name
    yields a ``MISSING_COMMON_NAME`` diagnostic.
    """

    species = critter.species or taxon.scientific_name
    current_scientific = sentence_case(species)
    preferred_scientific = sentence_case(taxon.scientific_name)
    scientific_name = None
    if current_scientific != preferred_scientific:
        log.info("Mismatched scientific name: %s => %s", current_scientific, preferred_scientific)
        scientific_name = preferred_scientific

    current_name = title_case(critter.name) if critter.name and critter.name.strip() else None
    preferred_name = (
        title_case(taxon.preferred_common_name)
        if taxon.preferred_common_name and taxon.preferred_common_name.strip()
        else None
    )

    common_name = None
    diagnostic = None
    if preferred_name is not None and preferred_name != current_name:
        if current_name is None:
            log.info("Found new common name for %s: %s", current_scientific, preferred_name)
        else:
            log.info("Mismatched common name: %s => %s", current_name, preferred_name)
        common_name = preferred_name
    elif preferred_name is None and current_name is None:
        diagnostic = Diagnostic(
            kind=DiagnosticKind.MISSING_COMMON_NAME,
            critter_id=critter.id,
            species=species,
            message=f"No common name for species {current_scientific}",
        )

    update = CritterNameUpdate(
        critter_id=critter.id,
        common_name=common_name,
        scientific_name=scientific_name,
    )
    return update, diagnostic
