"""Loading of user supplied critter category overrides."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import yaml

from crittersync.domain.model import DEFAULT_GROUP_RANK, CategoryOverrides

from .errors import OverridesError

if TYPE_CHECKING:
    from pathlib import Path

log = logging.getLogger(__name__)

OVERRIDES_SECTION = "critter_categories"


def load_overrides(path: Path | None) -> CategoryOverrides:
    """Load category overrides from a YAML file; no path means no overrides."""

    if path is None:
        return CategoryOverrides()
    data = _load_yaml(path)
    return parse_overrides(data.get(OVERRIDES_SECTION), source=str(path))


def parse_overrides(section: object, *, source: str = "<overrides>") -> CategoryOverrides:
    if section is None:
        return CategoryOverrides()
    if not isinstance(section, dict):
        raise OverridesError(f"'{OVERRIDES_SECTION}' must be a mapping in {source}")

    group_rank = section.get("group_rank", DEFAULT_GROUP_RANK)
    if not isinstance(group_rank, str) or not group_rank.strip():
        raise OverridesError(f"'group_rank' must be a non-empty string in {source}")

    groups_raw = section.get("groups") or {}
    if not isinstance(groups_raw, dict):
        raise OverridesError(f"'groups' must map taxon names to group names in {source}")

    groups: dict[str, str] = {}
    for taxon, group in groups_raw.items():
        if not isinstance(taxon, str) or not isinstance(group, str) or not group.strip():
            raise OverridesError(f"Invalid override {taxon!r}: {group!r} in {source}")
        groups[taxon] = group.strip()

    overrides = CategoryOverrides.from_mapping(groups, group_rank=group_rank.strip().lower())
    log.debug("Loaded %d category overrides from %s", len(overrides), source)
    return overrides


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise OverridesError(f"Overrides file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except (OSError, yaml.YAMLError) as exc:
        raise OverridesError(f"Could not read overrides file {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise OverridesError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")
    return data
