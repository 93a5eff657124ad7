"""Memoising, single-flight resolver in front of a rate-sensitive taxonomy lookup.

Every species key is looked up at most once per resolver: concurrent callers for
the same key join the in-flight lookup, and later callers read the settled
outcome (record or failure) without another call. Failures are cached too and
never retried within a run.
"""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from crittersync.common.text import normalize_name_key
from crittersync.domain.errors import TaxonLookupError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from crittersync.domain.model import TaxonRecord
    from crittersync.domain.ports.taxonomy import TaxonLookup

log = getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 4

type TaxonOutcome = TaxonRecord | TaxonLookupError


class TaxonResolver:
    """Resolve scientific names to taxon records through a shared cache.

    Lookups run with at most ``max_concurrency`` calls in flight. The cache lives
    as long as the resolver, which is one reconciliation run.
    """

    def __init__(
        self,
        lookup: TaxonLookup,
        *,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._lookup = lookup
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._in_flight: dict[str, asyncio.Task[TaxonOutcome]] = {}
        self._settled: dict[str, TaxonOutcome] = {}

    async def resolve(self, scientific_name: str) -> TaxonRecord:
        """Return the taxon record for ``scientific_name`` or raise ``TaxonLookupError``."""

        outcome = await self.outcome(scientific_name)
        if isinstance(outcome, TaxonLookupError):
            raise outcome
        return outcome

    async def outcome(self, scientific_name: str) -> TaxonOutcome:
        """Like :meth:`resolve`, but hand back a failure instead of raising it."""

        key = normalize_name_key(scientific_name)
        settled = self._settled.get(key)
        if settled is not None:
            return settled

        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._fetch(key, scientific_name))
            self._in_flight[key] = task
        # a cancelled waiter must not cancel the lookup other waiters share
        return await asyncio.shield(task)

    async def prime(self, species_names: Iterable[str]) -> int:
        """Resolve every distinct species name up front and return the failure count."""

        distinct: dict[str, str] = {}
        for name in species_names:
            if name.strip():
                distinct.setdefault(normalize_name_key(name), name)

        log.info("Priming taxon cache with %d distinct species", len(distinct))
        outcomes = await asyncio.gather(*(self.outcome(name) for name in distinct.values()))
        failures = sum(isinstance(outcome, TaxonLookupError) for outcome in outcomes)
        log.info(
            "Taxon cache primed: resolved=%d, failed=%d",
            len(outcomes) - failures,
            failures,
        )
        return failures

    def cached(self, scientific_name: str) -> TaxonRecord:
        """Read a settled record without suspending.

        Raises ``TaxonLookupError`` for cached failures and for names that were
        never primed.
        """

        outcome = self._settled.get(normalize_name_key(scientific_name))
        if outcome is None:
            raise TaxonLookupError(scientific_name, "species was not resolved before use")
        if isinstance(outcome, TaxonLookupError):
            raise outcome
        return outcome

    def is_settled(self, scientific_name: str) -> bool:
        return normalize_name_key(scientific_name) in self._settled

    def __len__(self) -> int:
        return len(self._settled)

    async def _fetch(self, key: str, scientific_name: str) -> TaxonOutcome:
        outcome: TaxonOutcome
        async with self._semaphore:
            log.debug("Looking up %s", scientific_name)
            try:
                outcome = await self._lookup(scientific_name)
            except TaxonLookupError as exc:
                log.warning("Failed to retrieve taxon for %s: %s", scientific_name, exc.reason)
                outcome = exc
            except TimeoutError:
                log.warning("Taxon lookup for %s timed out", scientific_name)
                outcome = TaxonLookupError(scientific_name, "lookup timed out")
            except Exception as exc:
                log.exception("Unexpected error while looking up %s", scientific_name)
                outcome = TaxonLookupError(scientific_name, f"unexpected error: {exc}")

        self._settled[key] = outcome
        self._in_flight.pop(key, None)
        return outcome
