"""iNaturalist v1 response schemas for taxon lookups."""

from __future__ import annotations

import logging
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

log = logging.getLogger(__name__)

type TaxonId = int


class INaturalistBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow")
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        # taxon payloads carry dozens of presentation fields we never read
        log.debug(
            "iNaturalist %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class INaturalistAncestor(INaturalistBaseModel):
    id: TaxonId
    name: str
    rank: str | None = None
    preferred_common_name: str | None = None


class INaturalistTaxon(INaturalistBaseModel):
    id: TaxonId
    name: str
    rank: str | None = None
    preferred_common_name: str | None = None
    iconic_taxon_name: str | None = None
    is_active: bool | None = None
    matched_term: str | None = None
    ancestor_ids: list[TaxonId] = Field(default_factory=list)
    ancestors: list[INaturalistAncestor] | None = None


class INaturalistTaxaResponse(INaturalistBaseModel):
    total_results: int = 0
    page: int | None = None
    per_page: int | None = None
    results: list[INaturalistTaxon] = Field(default_factory=list)
