"""Reconciliation plan types shared by the engine, the report and the executors.

A plan is an ordered list of entries, one per reconciled critter, in catalog
order. Entries describe mutations; they never perform them.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from crittersync.domain.model import Critter, CritterCategory, CritterId


class PlanAction(StrEnum):
    NOOP = "noop"
    REASSIGN = "reassign"
    RENAME_AND_REUSE = "rename_and_reuse"
    CREATE_CATEGORY = "create_category"


@dataclass(frozen=True, slots=True, kw_only=True)
class NoOp:
    """Critter already sits in its desired category."""

    critter: Critter
    category: CritterCategory
    action: Literal[PlanAction.NOOP] = PlanAction.NOOP


@dataclass(frozen=True, slots=True, kw_only=True)
class Reassign:
    """Move a critter into an existing category."""

    critter: Critter
    from_category: CritterCategory | None
    to_category: CritterCategory
    action: Literal[PlanAction.REASSIGN] = PlanAction.REASSIGN


@dataclass(frozen=True, slots=True, kw_only=True)
class RenameAndReuse:
    """Rename an extraneous category to the desired name and file the critter there."""

    critter: Critter
    reused_category_id: int
    old_name: str
    new_name: str
    action: Literal[PlanAction.RENAME_AND_REUSE] = PlanAction.RENAME_AND_REUSE


@dataclass(frozen=True, slots=True, kw_only=True)
class CreateNewCategory:
    """No category can be matched or recycled; a new one named ``desired_name`` is needed."""

    critter: Critter
    desired_name: str
    action: Literal[PlanAction.CREATE_CATEGORY] = PlanAction.CREATE_CATEGORY


type PlanEntry = NoOp | Reassign | RenameAndReuse | CreateNewCategory


class DiagnosticKind(StrEnum):
    LOOKUP_ERROR = "lookup_error"
    CLASSIFICATION_GAP = "classification_gap"
    MISSING_SPECIES = "missing_species"
    MISSING_COMMON_NAME = "missing_common_name"
    UNRESOLVED = "unresolved"
    RECYCLED_CATEGORY = "recycled_category"


@dataclass(frozen=True, slots=True, kw_only=True)
class Diagnostic:
    """Why a critter was skipped or needs attention."""

    kind: DiagnosticKind
    critter_id: CritterId
    message: str
    species: str | None = None


@dataclass(slots=True)
class ReconciliationReport:
    """Aggregate result of one category reconciliation run."""

    entries: list[PlanEntry] = field(default_factory=list["PlanEntry"])
    diagnostics: list[Diagnostic] = field(default_factory=list["Diagnostic"])
    extraneous: list[CritterCategory] = field(default_factory=list["CritterCategory"])
    pool_size_before: int = 0
    cancelled: bool = False

    def counts(self) -> Counter[PlanAction]:
        return Counter(entry.action for entry in self.entries)

    def changes(self) -> list[PlanEntry]:
        """Entries that require a mutation."""

        return [entry for entry in self.entries if entry.action is not PlanAction.NOOP]

    def entry_for(self, critter_id: CritterId) -> PlanEntry | None:
        for entry in self.entries:
            if entry.critter.id == critter_id:
                return entry
        return None

    def diagnostics_for(self, critter_id: CritterId) -> list[Diagnostic]:
        return [item for item in self.diagnostics if item.critter_id == critter_id]
