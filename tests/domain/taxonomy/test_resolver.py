from __future__ import annotations

import asyncio

import pytest

from crittersync.domain.errors import TaxonLookupError
from crittersync.domain.model import TaxonRecord
from crittersync.domain.taxonomy import TaxonResolver
from tests.support.taxa import FakeTaxonLookup, make_taxon

CLOWNFISH = make_taxon("Amphiprion ocellaris", family="Pomacentridae")
NUDIBRANCH = make_taxon("Chromodoris annae", family="Chromodorididae")


def test_prime_looks_up_each_distinct_species_once() -> None:
    lookup = FakeTaxonLookup(
        {CLOWNFISH.scientific_name: CLOWNFISH, NUDIBRANCH.scientific_name: NUDIBRANCH},
        delay=0.01,
    )
    resolver = TaxonResolver(lookup, max_concurrency=2)
    names = ["Amphiprion ocellaris"] * 10 + ["amphiprion  OCELLARIS", "Chromodoris annae", "  "]

    failures = asyncio.run(resolver.prime(names))

    assert failures == 0
    assert sorted(lookup.calls) == ["Amphiprion ocellaris", "Chromodoris annae"]
    assert len(resolver) == 2
    assert resolver.cached("AMPHIPRION ocellaris") == CLOWNFISH


def test_concurrent_resolves_share_one_lookup() -> None:
    lookup = FakeTaxonLookup({CLOWNFISH.scientific_name: CLOWNFISH}, delay=0.01)
    resolver = TaxonResolver(lookup)

    async def scenario() -> list[TaxonRecord]:
        return await asyncio.gather(
            *(resolver.resolve("Amphiprion ocellaris") for _ in range(8))
        )

    records = asyncio.run(scenario())

    assert lookup.calls == ["Amphiprion ocellaris"]
    assert all(record is CLOWNFISH for record in records)


def test_lookups_never_exceed_the_concurrency_bound() -> None:
    taxa = {f"Species {i}": make_taxon(f"Species {i}") for i in range(12)}
    lookup = FakeTaxonLookup(taxa, delay=0.01)
    resolver = TaxonResolver(lookup, max_concurrency=3)

    asyncio.run(resolver.prime(taxa))

    assert len(lookup.calls) == 12
    assert 1 < lookup.max_active <= 3


def test_failures_are_cached_and_not_retried() -> None:
    lookup = FakeTaxonLookup({}, failures=["Unknownus maximus"])
    resolver = TaxonResolver(lookup)

    async def scenario() -> int:
        failures = await resolver.prime(["Unknownus maximus"])
        with pytest.raises(TaxonLookupError, match="service unavailable"):
            await resolver.resolve("unknownus maximus")
        return failures

    assert asyncio.run(scenario()) == 1
    assert lookup.calls == ["Unknownus maximus"]
    assert resolver.is_settled("Unknownus maximus")
    with pytest.raises(TaxonLookupError):
        resolver.cached("Unknownus maximus")


def test_timeouts_become_lookup_errors() -> None:
    async def slow_lookup(scientific_name: str) -> TaxonRecord:
        raise TimeoutError

    resolver = TaxonResolver(slow_lookup)

    outcome = asyncio.run(resolver.outcome("Amphiprion ocellaris"))

    assert isinstance(outcome, TaxonLookupError)
    assert outcome.reason == "lookup timed out"


def test_unexpected_lookup_errors_settle_as_failures() -> None:
    clownfish = make_taxon("Amphiprion ocellaris")

    async def flaky_lookup(scientific_name: str) -> TaxonRecord:
        if scientific_name == "Chromodoris annae":
            raise RuntimeError("cache database is locked")
        return clownfish

    resolver = TaxonResolver(flaky_lookup)

    failures = asyncio.run(resolver.prime(["Amphiprion ocellaris", "Chromodoris annae"]))

    assert failures == 1
    assert resolver.cached("Amphiprion ocellaris") == clownfish
    with pytest.raises(TaxonLookupError, match="unexpected error: cache database is locked"):
        resolver.cached("Chromodoris annae")


def test_cached_rejects_names_that_were_never_primed() -> None:
    resolver = TaxonResolver(FakeTaxonLookup({}))

    with pytest.raises(TaxonLookupError, match="not resolved"):
        resolver.cached("Amphiprion ocellaris")


def test_concurrency_must_be_positive() -> None:
    with pytest.raises(ValueError, match="at least 1"):
        TaxonResolver(FakeTaxonLookup({}), max_concurrency=0)
