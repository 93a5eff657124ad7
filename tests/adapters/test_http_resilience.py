from __future__ import annotations

import asyncio

import httpx
import pytest

from crittersync.adapters.http_resilience import (
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    ResilientClient,
    RetryPolicy,
    build_retry,
)
from crittersync.adapters.http_resilience import (
    _build_cache_components,  # noqa: PLC2701  # type: ignore[reportPrivateUsage]
    _ShouldCacheResponseFilter,  # noqa: PLC2701  # type: ignore[reportPrivateUsage]
)


def _client(handler: httpx.MockTransport, config: ResilienceConfig) -> ResilientClient:
    client = ResilientClient(config)
    client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
        base_url=config.base_url or "", transport=handler
    )
    return client


def test_get_json_decodes_payload_through_rate_limiter() -> None:
    seen: list[str] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json={"results": []})

    config = ResilienceConfig(
        name="test",
        base_url="https://api.example.test/v1/",
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        cache=None,
    )

    async def scenario() -> list[object]:
        async with _client(httpx.MockTransport(handler), config) as client:
            return [await client.get_json("taxa", params={"q": str(i)}) for i in range(3)]

    payloads = asyncio.run(scenario())

    assert payloads == [{"results": []}] * 3
    assert seen[0] == "https://api.example.test/v1/taxa?q=0"


def test_get_json_raises_for_error_status() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"error": "Not found"})

    config = ResilienceConfig(name="test", base_url="https://api.example.test/", cache=None)

    async def scenario() -> object:
        async with _client(httpx.MockTransport(handler), config) as client:
            return await client.get_json("taxa/1")

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(scenario())


def test_retry_policy_only_retries_reads_by_default() -> None:
    retry = build_retry(RetryPolicy(total=2))

    assert retry.total == 2
    assert set(retry.allowed_methods) == {"GET", "HEAD"}
    assert 429 in retry.status_forcelist


def test_retry_policy_retries_transport_failures_only() -> None:
    assert set(RetryPolicy().retry_on_exceptions) == {
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    }


def test_cache_components_follow_config() -> None:
    assert _build_cache_components(None) == (None, None)
    assert _build_cache_components(CacheConfig(enabled=False)) == (None, None)

    storage, policy = _build_cache_components(
        CacheConfig(backend="memory", should_cache=lambda payload: True)
    )
    assert storage is not None
    assert policy is not None

    with pytest.raises(ValueError, match="Unsupported cache backend"):
        _build_cache_components(CacheConfig(backend="redis"))  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("body", "expected"),
    [
        (b'{"results": []}', True),
        (b'{"error": "throttled"}', False),
        (b"not json", True),
        (None, True),
    ],
)
def test_should_cache_filter_inspects_json_body(body: bytes | None, expected: bool) -> None:
    response_filter = _ShouldCacheResponseFilter(
        lambda payload: isinstance(payload, dict) and "error" not in payload
    )

    assert response_filter.needs_body()
    assert response_filter.apply(None, body) is expected  # type: ignore[arg-type]
