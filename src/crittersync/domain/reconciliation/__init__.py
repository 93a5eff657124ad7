"""Reconciliation of critter categories (and names) against the taxonomy.

Flow for one run:
1) prime the taxon cache with every distinct species
2) classify each critter into a desired group
3) partition current categories into desired ones and an extraneous pool
4) fold over critters in catalog order, emitting one plan entry each
5) hand the plan to an executor (or just print it)
"""

from __future__ import annotations

from .engine import decide, desired_groups, reconcile_categories
from .naming import CritterNameUpdate, NameDiffReport, compare_names, diff_critter_names
from .plan import (
    CreateNewCategory,
    Diagnostic,
    DiagnosticKind,
    NoOp,
    PlanAction,
    PlanEntry,
    Reassign,
    ReconciliationReport,
    RenameAndReuse,
)
from .state import CategoryTable, ExtraneousCategoryPool, ReconciliationState

__all__ = [
    "CategoryTable",
    "CreateNewCategory",
    "CritterNameUpdate",
    "Diagnostic",
    "DiagnosticKind",
    "ExtraneousCategoryPool",
    "NameDiffReport",
    "NoOp",
    "PlanAction",
    "PlanEntry",
    "Reassign",
    "ReconciliationReport",
    "ReconciliationState",
    "RenameAndReuse",
    "compare_names",
    "decide",
    "desired_groups",
    "diff_critter_names",
    "reconcile_categories",
]
