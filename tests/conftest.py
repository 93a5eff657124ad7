from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import insert

from crittersync.adapters.sqlalchemy import (
    create_macdive_engine,
    critter_category_table,
    critter_table,
    metadata,
)

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("CRITTERSYNC_DATA_DIR", str(tmp_path / "data"))
    for name in (
        "MACDIVE_DATABASE",
        "INATURALIST_BASE_URL",
        "INATURALIST_RATE_LIMIT",
        "INATURALIST_CACHE",
        "CRITTERSYNC_MAX_CONCURRENCY",
        "CRITTERSYNC_REUSE_FOR_UNASSIGNED",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def macdive_path(tmp_path: Path) -> Path:
    return tmp_path / "MacDive.sqlite"


@pytest.fixture
def macdive_engine(macdive_path: Path) -> Iterator[Engine]:
    engine = create_macdive_engine(macdive_path)
    metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def seeded_engine(macdive_engine: Engine) -> Engine:
    """Categories Fish(1) and Coral(2); three critters in catalog order."""

    with macdive_engine.begin() as connection:
        connection.execute(
            insert(critter_category_table),
            [
                {"Z_PK": 1, "Z_ENT": 7, "Z_OPT": 1, "ZNAME": "Fish"},
                {"Z_PK": 2, "Z_ENT": 7, "Z_OPT": 1, "ZNAME": "Coral"},
            ],
        )
        connection.execute(
            insert(critter_table),
            [
                {
                    "Z_PK": 10,
                    "ZNAME": "clown anemonefish",
                    "ZSPECIES": "Amphiprion ocellaris",
                    "ZRELATIONSHIPCRITTERTOCRITTERCATEGORY": 1,
                },
                {
                    "Z_PK": 11,
                    "ZNAME": "Anna's Chromodoris",
                    "ZSPECIES": "Chromodoris annae",
                    "ZRELATIONSHIPCRITTERTOCRITTERCATEGORY": None,
                },
                {
                    "Z_PK": 12,
                    "ZNAME": "Mystery",
                    "ZSPECIES": None,
                    "ZRELATIONSHIPCRITTERTOCRITTERCATEGORY": 2,
                },
            ],
        )
    return macdive_engine
