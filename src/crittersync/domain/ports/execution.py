"""Ports for applying reconciliation results to persistent storage."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable

    from crittersync.domain.reconciliation.naming import CritterNameUpdate
    from crittersync.domain.reconciliation.plan import PlanEntry


@dataclass(frozen=True, slots=True, kw_only=True)
class ExecutionResult[TItem]:
    """Outcome of applying one plan entry or name update."""

    item: TItem
    succeeded: bool
    error: str | None = None


@runtime_checkable
class ActionExecutor(Protocol):
    """Apply plan entries one by one; no retries and no atomicity across entries."""

    def execute(self, entry: PlanEntry) -> ExecutionResult[PlanEntry]: ...

    def execute_all(self, entries: Iterable[PlanEntry]) -> list[ExecutionResult[PlanEntry]]: ...


@runtime_checkable
class NameUpdateExecutor(Protocol):
    def apply_name_update(
        self,
        name_update: CritterNameUpdate,
    ) -> ExecutionResult[CritterNameUpdate]: ...
