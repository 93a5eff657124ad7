"""Local catalog records: critters and the categories they are filed under."""

from __future__ import annotations

from dataclasses import dataclass

type CritterId = int
type CategoryId = int


@dataclass(frozen=True, slots=True, kw_only=True)
class Critter:
    """A catalogued organism, optionally tagged with a species and a category."""

    id: CritterId
    name: str | None = None
    species: str | None = None
    category_id: CategoryId | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class CritterCategory:
    id: CategoryId
    name: str
