from __future__ import annotations

import asyncio
from collections.abc import Callable  # noqa: TC003

import httpx
import pytest

from crittersync.adapters.http_resilience import ResilienceConfig, ResilientClient
from crittersync.adapters.inaturalist import INaturalistClient
from crittersync.config import INaturalistConfig
from crittersync.domain.errors import TaxonLookupError
from crittersync.domain.model import TaxonRecord  # noqa: TC001

BASE_URL = "https://api.example.test/v1/"

SEARCH_PAYLOAD: dict[str, object] = {
    "total_results": 2,
    "page": 1,
    "per_page": 30,
    "results": [
        {
            "id": 51264,
            "name": "Chromodoris",
            "rank": "genus",
            "matched_term": "Chromodoris",
            "ancestor_ids": [1, 47115],
        },
        {
            "id": 51265,
            "name": "Chromodoris annae",
            "rank": "species",
            "preferred_common_name": "Anna's Chromodoris",
            "iconic_taxon_name": "Mollusca",
            "is_active": True,
            "matched_term": "Chromodoris annae",
            "ancestor_ids": [1, 47115, 47113, 51265],
            "default_photo": {"url": "https://example.test/photo.jpg"},
        },
    ],
}

DETAIL_PAYLOAD: dict[str, object] = {
    "total_results": 1,
    "results": [
        {
            "id": 51265,
            "name": "Chromodoris annae",
            "rank": "species",
            "preferred_common_name": "Anna's Chromodoris",
            "iconic_taxon_name": "Mollusca",
            "ancestors": [
                {"id": 1, "name": "Animalia", "rank": "kingdom"},
                {"id": 47115, "name": "Mollusca", "rank": "phylum"},
                {
                    "id": 47113,
                    "name": "Chromodorididae",
                    "rank": "family",
                    "preferred_common_name": " Chromodorid Nudibranchs ",
                },
            ],
        }
    ],
}


def _make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
            base_url=BASE_URL, transport=httpx.MockTransport(async_handler)
        )
        return client

    return factory


def _config() -> INaturalistConfig:
    return INaturalistConfig(
        resilience=ResilienceConfig(name="inaturalist", base_url=BASE_URL, cache=None)
    )


def _lookup(
    handler: Callable[[httpx.Request], httpx.Response],
    scientific_name: str,
) -> TaxonRecord:
    async def scenario() -> TaxonRecord:
        client = INaturalistClient(config=_config(), client_factory=_make_client_factory(handler))
        async with client:
            return await client(scientific_name)

    return asyncio.run(scenario())


def test_lookup_picks_exact_match_and_fetches_ancestors() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path == "/v1/taxa":
            return httpx.Response(200, json=SEARCH_PAYLOAD)
        if request.url.path == "/v1/taxa/51265":
            return httpx.Response(200, json=DETAIL_PAYLOAD)
        return httpx.Response(404, json={"error": "not found"})

    record = _lookup(handler, "chromodoris  ANNAE")

    assert [request.url.path for request in requests] == ["/v1/taxa", "/v1/taxa/51265"]
    search = requests[0].url.params
    assert search["q"] == "chromodoris  ANNAE"
    assert search["is_active"] == "true"
    assert search["per_page"] == "30"

    assert record.scientific_name == "Chromodoris annae"
    assert record.taxon_id == 51265
    assert record.iconic_taxon_name == "Mollusca"
    assert [ancestor.name for ancestor in record.ancestors] == [
        "Animalia",
        "Mollusca",
        "Chromodorididae",
    ]
    assert record.group_candidate("family") == "Chromodorid Nudibranchs"


def test_lookup_uses_search_ancestors_when_present() -> None:
    payload = {"results": DETAIL_PAYLOAD["results"]}
    paths: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        return httpx.Response(200, json=payload)

    record = _lookup(handler, "Chromodoris annae")

    assert paths == ["/v1/taxa"]
    assert len(record.ancestors) == 3


def test_lookup_without_exact_match_fails() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=SEARCH_PAYLOAD)

    with pytest.raises(TaxonLookupError) as excinfo:
        _lookup(handler, "Chromodoris willani")

    assert excinfo.value.reason == "no matching taxon"
    assert excinfo.value.scientific_name == "Chromodoris willani"


def test_http_errors_become_lookup_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"error": "unavailable"})

    with pytest.raises(TaxonLookupError, match="HTTP 503 from iNaturalist"):
        _lookup(handler, "Chromodoris annae")


def test_transport_errors_become_lookup_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TaxonLookupError, match="request failed"):
        _lookup(handler, "Chromodoris annae")


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json=["not", "an", "object"]),
        httpx.Response(200, text="<html>maintenance</html>"),
        httpx.Response(200, json={"results": [{"name": "Chromodoris annae"}]}),
    ],
)
def test_malformed_payloads_become_lookup_errors(response: httpx.Response) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return response

    with pytest.raises(TaxonLookupError, match="unexpected payload"):
        _lookup(handler, "Chromodoris annae")


def test_lookup_outside_context_manager_fails() -> None:
    client = INaturalistClient(config=_config())

    with pytest.raises(TaxonLookupError, match="outside of 'async with'"):
        asyncio.run(client("Chromodoris annae"))
