"""iNaturalist API client used as the taxon lookup."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from crittersync.adapters.http_resilience import ResilientClient
from crittersync.common.text import normalize_name_key
from crittersync.domain.errors import TaxonLookupError

from .schema import INaturalistTaxaResponse, INaturalistTaxon
from .translator import translate_taxon

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from crittersync.config.http_resilience import ResilienceConfig
    from crittersync.config.inaturalist import INaturalistConfig
    from crittersync.domain.model import TaxonRecord

log = getLogger(__name__)

SEARCH_PAGE_SIZE = 30


class INaturalistAPIError(RuntimeError):
    """Raised when the iNaturalist API returns an unexpected response."""


class INaturalistClient:
    """Taxon lookup against the iNaturalist v1 API.

    Use as an async context manager: all lookups made inside the block share one
    HTTP client, and with it one rate limiter and one response cache.
    """

    def __init__(
        self,
        *,
        config: INaturalistConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient
        self._client: ResilientClient | None = None

    async def __aenter__(self) -> INaturalistClient:
        self._client = self._client_factory(self._resilience)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __call__(self, scientific_name: str) -> TaxonRecord:
        return await self.lookup_taxon(scientific_name)

    async def lookup_taxon(self, scientific_name: str) -> TaxonRecord:
        """Resolve ``scientific_name`` to a taxon record with its ancestor chain.

        Every failure (transport, HTTP status, payload, unknown name) surfaces as
        ``TaxonLookupError``.
        """

        try:
            match = await self._find_exact(scientific_name)
            if match is None:
                raise TaxonLookupError(scientific_name, "no matching taxon")
            if match.ancestors is None:
                match = await self.fetch_taxon(match.id)
        except httpx.HTTPStatusError as exc:
            raise TaxonLookupError(
                scientific_name, f"HTTP {exc.response.status_code} from iNaturalist"
            ) from exc
        except httpx.HTTPError as exc:
            raise TaxonLookupError(scientific_name, f"request failed: {exc}") from exc
        except (ValueError, INaturalistAPIError) as exc:
            raise TaxonLookupError(scientific_name, f"unexpected payload: {exc}") from exc

        return translate_taxon(match)

    async def search_taxa(self, query: str) -> INaturalistTaxaResponse:
        params = {"q": query, "is_active": "true", "per_page": str(SEARCH_PAGE_SIZE)}
        return await self._perform_request(path="taxa", params=params)

    async def fetch_taxon(self, taxon_id: int) -> INaturalistTaxon:
        response = await self._perform_request(path=f"taxa/{taxon_id}", params={})
        if not response.results:
            raise INaturalistAPIError(f"Taxon {taxon_id} returned no results")
        return response.results[0]

    async def _find_exact(self, scientific_name: str) -> INaturalistTaxon | None:
        wanted = normalize_name_key(scientific_name)
        response = await self.search_taxa(scientific_name)
        for taxon in response.results:
            if normalize_name_key(taxon.name) == wanted:
                return taxon
        log.debug(
            "No exact match for %s among %d results", scientific_name, len(response.results)
        )
        return None

    async def _perform_request(
        self,
        *,
        path: str,
        params: dict[str, str],
    ) -> INaturalistTaxaResponse:
        if self._client is None:
            raise INaturalistAPIError("INaturalistClient used outside of 'async with'")
        if self._resilience.base_url is None:
            raise INaturalistAPIError("Missing iNaturalist base_url in resilience configuration")
        payload = await self._client.get_json(path, params=params)
        if not isinstance(payload, dict):
            raise INaturalistAPIError("Unexpected iNaturalist response payload")

        return INaturalistTaxaResponse.model_validate(payload)
