from __future__ import annotations

from datetime import datetime

import pytest

from catchwatch.domain.model import (
    ConversionFactor,
    ExporterBehaviour,
    SpeciesRiskToggle,
    VesselOfInterest,
    WeightKind,
    Weighting,
)
from catchwatch.domain.reference_cache import (
    DEFAULT_EXPORTER_RISK_SCORE,
    DEFAULT_SPECIES_RISK_SCORE,
    DEFAULT_VESSEL_RISK_SCORE,
    VESSEL_OF_INTEREST_RISK_SCORE,
    ReferenceCache,
    as_day,
)
from tests.helpers.documents import make_cache, make_vessel


def test_lookup_vessel_matches_exact_pln_within_licence_dates() -> None:
    cache = make_cache(
        make_vessel("WA1", "rssWA1", valid_to=datetime(2019, 6, 30)),
        make_vessel("WA1", "rssWA1-new", valid_from=datetime(2019, 7, 1)),
    )

    assert cache.get_rss_number("WA1", "2019-06-30") == "rssWA1"
    assert cache.get_rss_number("WA1", "2019-07-01") == "rssWA1-new"
    assert cache.get_rss_number("wa1", "2019-07-01") is None
    assert cache.get_rss_number("WA1", "2031-01-01") is None


def test_lookup_vessel_bounds_are_inclusive_at_day_granularity() -> None:
    cache = make_cache(
        make_vessel(valid_from=datetime(2019, 7, 10, 23, 59), valid_to=datetime(2019, 7, 12, 0, 1))
    )

    assert cache.lookup_vessel("WA1", "2019-07-10T00:00:00") is not None
    assert cache.lookup_vessel("WA1", "2019-07-12T23:00:00") is not None
    assert cache.lookup_vessel("WA1", "2019-07-13") is None


def test_lookup_vessel_returns_first_row_among_overlapping_licences() -> None:
    cache = make_cache(
        make_vessel("WA1", "rssWA1-first", valid_from=datetime(2019, 1, 1)),
        make_vessel("WA1", "rssWA1-second", valid_from=datetime(2019, 6, 1)),
    )

    vessel = cache.lookup_vessel("WA1", "2019-07-10")

    assert vessel is not None
    assert vessel.rss_number == "rssWA1-first"
    assert cache.get_rss_number("WA1", "2019-03-01") == "rssWA1-first"


def test_vessel_length_and_details() -> None:
    cache = make_cache(make_vessel("BM111", "C20415", vessel_length=6.88))

    assert cache.get_vessel_length("BM111", "2019-07-10") == 6.88
    details = cache.get_vessel_details("C20415")
    assert details is not None
    assert details.registration_number == "BM111"
    assert cache.get_vessel_details("unknown") is None


def test_update_vessels_keeps_previous_snapshot_on_empty_input() -> None:
    cache = make_cache(make_vessel())

    cache.update_vessels([])
    cache.update_vessels(None)

    assert [v.registration_number for v in cache.vessels] == ["WA1"]
    assert len(cache.vessel_index("WA1")) == 1


def test_update_vessels_rebuilds_index() -> None:
    cache = make_cache(make_vessel("WA1"))

    cache.update_vessels([make_vessel("WA2", "rssWA2")])

    assert cache.vessel_index("WA1") == []
    assert [v.rss_number for v in cache.vessel_index("WA2")] == ["rssWA2"]


def test_risking_setters_accept_empty_vessels_of_interest() -> None:
    cache = ReferenceCache()
    cache.update_vessels_of_interest([VesselOfInterest("BM111")])
    cache.update_vessels_of_interest([])
    cache.update_weighting(None)
    cache.update_species_toggle(None)

    assert cache.vessels_of_interest == []
    assert cache.weighting == Weighting()
    assert cache.species_risk_enabled is False


def test_conversion_factor_lookups() -> None:
    cache = ReferenceCache()
    cache.update_conversion_factors(
        [ConversionFactor("COD", "FRE", "GUT", to_live_weight_factor=1.17, risk_score=0.8)]
    )

    assert cache.get_to_live_weight_factor("COD", "FRE", "GUT") == 1.17
    assert cache.get_to_live_weight_factor("COD", "FRO", "GUT") == 1
    assert cache.get_species_risk_score("COD") == 0.8
    assert cache.get_species_risk_score("HAD") == DEFAULT_SPECIES_RISK_SCORE


def test_vessel_risk_score_uses_vessels_of_interest() -> None:
    cache = ReferenceCache()
    cache.update_vessels_of_interest([VesselOfInterest("BM111")])

    assert cache.get_vessel_risk_score("BM111") == VESSEL_OF_INTEREST_RISK_SCORE
    assert cache.get_vessel_risk_score("WA1") == DEFAULT_VESSEL_RISK_SCORE


@pytest.mark.parametrize(
    ("account_id", "contact_id", "expected"),
    [
        ("ACC-1", "CON-1", 0.9),
        (None, "CON-2", 0.4),
        ("ACC-1", "CON-3", 0.6),
        ("ACC-9", None, DEFAULT_EXPORTER_RISK_SCORE),
        (None, None, DEFAULT_EXPORTER_RISK_SCORE),
    ],
)
def test_exporter_risk_score_prefers_most_specific_row(
    account_id: str | None, contact_id: str | None, expected: float
) -> None:
    cache = ReferenceCache()
    cache.update_exporter_behaviour(
        [
            ExporterBehaviour(score=0.6, account_id="ACC-1"),
            ExporterBehaviour(score=0.9, account_id="ACC-1", contact_id="CON-1"),
            ExporterBehaviour(score=0.4, contact_id="CON-2"),
        ]
    )

    assert cache.get_exporter_risk_score(account_id, contact_id) == expected


def test_weighting_and_threshold() -> None:
    cache = ReferenceCache()
    cache.update_weighting(
        Weighting(exporter_weight=1, vessel_weight=2, species_weight=3, threshold=4)
    )
    cache.update_species_toggle(SpeciesRiskToggle(enabled=True))

    assert cache.get_weighting(WeightKind.VESSEL) == 2
    assert cache.get_risk_threshold() == 4
    assert cache.species_risk_enabled is True


def test_commodity_search_filters_on_state_and_presentation() -> None:
    cache = ReferenceCache()
    cache.update_species(
        [
            {
                "faoCode": "COD",
                "preservationState": "FRE",
                "presentationState": "GUT",
                "commodityCode": "1",
            },
            {
                "faoCode": "COD",
                "preservationState": "FRO",
                "presentationState": "GUT",
                "commodityCode": "2",
            },
        ]
    )

    rows = cache.commodity_search("COD", "FRO", "GUT")

    assert [row["commodityCode"] for row in rows] == ["2"]


def test_as_day_accepts_strings_and_datetimes() -> None:
    assert as_day("2019-07-10T23:30:00Z").isoformat() == "2019-07-10"
    assert as_day(datetime(2019, 7, 10, 5)).isoformat() == "2019-07-10"
