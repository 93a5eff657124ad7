"""Tuning knobs for reconciliation runs."""

from __future__ import annotations

from dataclasses import dataclass

from crittersync.domain.taxonomy.resolver import DEFAULT_MAX_CONCURRENCY

from .env import env_bool, env_int
from .errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class ReconcileOptions:
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    reuse_for_unassigned: bool = True


def get_reconcile_options(
    *,
    max_concurrency: int | None = None,
    reuse_for_unassigned: bool | None = None,
) -> ReconcileOptions:
    """Build options from explicit (CLI) values, falling back to the environment."""

    value = (
        max_concurrency
        if max_concurrency is not None
        else env_int("CRITTERSYNC_MAX_CONCURRENCY", DEFAULT_MAX_CONCURRENCY)
    )
    if value < 1:
        raise ConfigurationError("Lookup concurrency must be at least 1")
    reuse = (
        reuse_for_unassigned
        if reuse_for_unassigned is not None
        else env_bool("CRITTERSYNC_REUSE_FOR_UNASSIGNED", default=True)
    )
    return ReconcileOptions(max_concurrency=value, reuse_for_unassigned=reuse)
