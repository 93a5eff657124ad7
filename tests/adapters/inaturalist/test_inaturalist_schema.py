from __future__ import annotations

from crittersync.adapters.inaturalist import translate_taxon
from crittersync.adapters.inaturalist.schema import INaturalistTaxaResponse, INaturalistTaxon


def test_response_tolerates_unmodelled_fields() -> None:
    response = INaturalistTaxaResponse.model_validate(
        {
            "total_results": 1,
            "results": [
                {
                    "id": 47113,
                    "name": "Chromodorididae",
                    "rank": "family",
                    "wikipedia_url": "https://example.test/wiki",
                    "observations_count": 1234,
                }
            ],
        }
    )

    taxon = response.results[0]
    assert taxon.ancestors is None
    assert taxon.ancestor_ids == []
    assert taxon.model_extra == {
        "wikipedia_url": "https://example.test/wiki",
        "observations_count": 1234,
    }


def test_translate_cleans_blank_names() -> None:
    payload = INaturalistTaxon.model_validate(
        {
            "id": 1,
            "name": "Animalia",
            "rank": "kingdom",
            "preferred_common_name": "   ",
            "iconic_taxon_name": "Animalia",
        }
    )

    record = translate_taxon(payload)

    assert record.preferred_common_name is None
    assert record.iconic_taxon_name == "Animalia"
    assert record.ancestors == ()
