from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest

from catchwatch.adapters.landing_provider import ProviderTranslator
from catchwatch.domain.landings.refresh import LandingFetchPipeline, is_unchanged
from catchwatch.domain.model import (
    AuditKind,
    ConversionFactor,
    Landing,
    LandingDataKind,
    LandingItem,
    LandingQuery,
    LandingSource,
)
from tests.helpers.documents import make_cache, make_vessel
from tests.helpers.fakes import (
    FakeAuditRepository,
    FakeLandingProvider,
    FakeLandingRepository,
    catch_activity_payload,
    declaration_payload,
    elog_payload,
)

if TYPE_CHECKING:
    from catchwatch.common import BackgroundTasks
    from catchwatch.domain.reference_cache import ReferenceCache

LANDED_AT = "2019-07-10T06:00:00Z"


@pytest.fixture
def cache() -> ReferenceCache:
    cache = make_cache(
        make_vessel("WA1", "rssWA1", vessel_length=12.2),
        make_vessel("BM111", "C20415", vessel_length=6.88),
        make_vessel("NL1", "rssNL1", vessel_length=None),
    )
    cache.update_conversion_factors(
        [ConversionFactor("COD", "FRE", "GUT", to_live_weight_factor=1.17)]
    )
    return cache


def _pipeline(
    cache: ReferenceCache,
    provider: FakeLandingProvider,
    background: BackgroundTasks,
    landings: FakeLandingRepository | None = None,
    audit: FakeAuditRepository | None = None,
) -> LandingFetchPipeline:
    return LandingFetchPipeline(
        cache=cache,
        provider=provider,
        translator=ProviderTranslator(cache.get_to_live_weight_factor),
        landings=landings or FakeLandingRepository(),
        audit=audit or FakeAuditRepository(),
        background=background,
    )


def _declaration_landing(**overrides: object) -> Landing:
    values: dict[str, object] = {
        "rss_number": "rssWA1",
        "date_time_landed": datetime(2019, 7, 10, 6, tzinfo=UTC),
        "source": LandingSource.LANDING_DECLARATION,
        "items": (
            LandingItem(species="COD", weight=100, factor=1.17, state="FRE", presentation="GUT"),
        ),
    }
    values.update(overrides)
    return Landing(**values)  # type: ignore[arg-type]


def test_over_ten_metres_uses_landing_declarations(
    cache: ReferenceCache, background: BackgroundTasks
) -> None:
    provider = FakeLandingProvider(
        landing_data={
            (LandingDataKind.LANDING, "rssWA1", "2019-07-10"): [
                declaration_payload("rssWA1", LANDED_AT, ("COD", 100))
            ],
            (LandingDataKind.SALES_NOTES, "rssWA1", "2019-07-10"): [{"saleId": "S1"}],
        }
    )
    landings = FakeLandingRepository()
    audit = FakeAuditRepository()

    result = _pipeline(cache, provider, background, landings, audit).fetch_landings(
        "rssWA1", "2019-07-10"
    )

    assert result == [_declaration_landing()]
    assert provider.kinds_requested() == ["landing", "salesNotes"]
    assert landings.updates == [result]
    assert landings.cleared == [result]
    assert sorted(audit.kinds()) == [AuditKind.RAW_LANDINGS, AuditKind.SALES_NOTES]


def test_over_ten_metres_falls_back_to_elogs(
    cache: ReferenceCache, background: BackgroundTasks
) -> None:
    provider = FakeLandingProvider(
        landing_data={
            (LandingDataKind.ELOGS, "rssWA1", "2019-07-10"): [
                elog_payload("rssWA1", LANDED_AT, ("COD", 80))
            ],
        }
    )

    result = _pipeline(cache, provider, background).fetch_landings("rssWA1", "2019-07-10")

    assert provider.kinds_requested() == ["landing", "eLogs", "salesNotes"]
    assert [landing.source for landing in result] == [LandingSource.ELOG]
    assert result[0].items[0].factor == 1.0


def test_under_ten_metres_uses_catch_activity(
    cache: ReferenceCache, background: BackgroundTasks
) -> None:
    provider = FakeLandingProvider(
        catch_activity={
            ("C20415", "2019-07-10"): catch_activity_payload(LANDED_AT, ("COD", 12))
        }
    )
    audit = FakeAuditRepository()

    result = _pipeline(cache, provider, background, audit=audit).fetch_landings(
        "C20415", "2019-07-10"
    )

    assert provider.kinds_requested() == ["catchActivity", "salesNotes"]
    assert [(landing.rss_number, landing.source) for landing in result] == [
        ("C20415", LandingSource.CATCH_RECORDING)
    ]
    assert result[0].items[0].factor == 1.17
    assert audit.kinds() == [AuditKind.RAW_LANDINGS]


def test_under_ten_metres_without_data_returns_nothing(
    cache: ReferenceCache, background: BackgroundTasks
) -> None:
    provider = FakeLandingProvider()
    landings = FakeLandingRepository()

    result = _pipeline(cache, provider, background, landings).fetch_landings(
        "C20415", "2019-07-10"
    )

    assert result == []
    assert landings.updates == []


@pytest.mark.parametrize("rss_number", ["rssNL1", "unknown"])
def test_vessel_without_length_is_skipped(
    cache: ReferenceCache, background: BackgroundTasks, rss_number: str
) -> None:
    provider = FakeLandingProvider()

    result = _pipeline(cache, provider, background).fetch_landings(rss_number, "2019-07-10")

    assert result == []
    assert provider.calls == []


def test_unchanged_landings_are_marked_ignored_in_fetch_order(
    cache: ReferenceCache, background: BackgroundTasks
) -> None:
    stored = _declaration_landing()
    provider = FakeLandingProvider(
        landing_data={
            (LandingDataKind.LANDING, "rssWA1", "2019-07-10"): [
                declaration_payload("rssWA1", "2019-07-10T18:00:00Z", ("COD", 50)),
                declaration_payload("rssWA1", "2019-07-10T07:30:00Z", ("COD", 100)),
            ],
        }
    )
    landings = FakeLandingRepository([stored])

    result = _pipeline(cache, provider, background, landings).fetch_landings(
        "rssWA1", "2019-07-10"
    )

    assert [landing.ignore for landing in result] == [False, True]
    assert landings.updates == [result]


def test_landings_on_other_days_are_stored_but_not_returned(
    cache: ReferenceCache, background: BackgroundTasks
) -> None:
    provider = FakeLandingProvider(
        landing_data={
            (LandingDataKind.LANDING, "rssWA1", "2019-07-10"): [
                declaration_payload("rssWA1", "2019-07-11T00:30:00Z", ("COD", 100))
            ],
        }
    )
    landings = FakeLandingRepository()

    result = _pipeline(cache, provider, background, landings).fetch_landings(
        "rssWA1", "2019-07-10"
    )

    assert result == []
    assert len(landings.updates[0]) == 1


def test_clear_elogs_failure_is_logged(
    cache: ReferenceCache, background: BackgroundTasks, caplog: pytest.LogCaptureFixture
) -> None:
    provider = FakeLandingProvider(
        landing_data={
            (LandingDataKind.LANDING, "rssWA1", "2019-07-10"): [
                declaration_payload("rssWA1", LANDED_AT, ("COD", 100))
            ],
        }
    )
    landings = FakeLandingRepository()
    landings.fail_on_clear = RuntimeError("db locked")

    with caplog.at_level(logging.ERROR):
        result = _pipeline(cache, provider, background, landings).fetch_landings(
            "rssWA1", "2019-07-10"
        )

    assert len(result) == 1
    assert "ELOGS-CLEAR-ERROR" in caplog.text


def test_audit_failure_does_not_affect_result(
    cache: ReferenceCache, background: BackgroundTasks
) -> None:
    provider = FakeLandingProvider(
        landing_data={
            (LandingDataKind.LANDING, "rssWA1", "2019-07-10"): [
                declaration_payload("rssWA1", LANDED_AT, ("COD", 100))
            ],
            (LandingDataKind.SALES_NOTES, "rssWA1", "2019-07-10"): [{"saleId": "S1"}],
        }
    )
    audit = FakeAuditRepository()
    audit.fail_with = RuntimeError("audit store down")

    result = _pipeline(cache, provider, background, audit=audit).fetch_landings(
        "rssWA1", "2019-07-10"
    )

    assert result == [_declaration_landing()]


def test_batch_isolates_failing_vessels(
    cache: ReferenceCache, background: BackgroundTasks
) -> None:
    provider = FakeLandingProvider(
        landing_data={
            (LandingDataKind.LANDING, "rssWA1", "2019-07-10"): [
                declaration_payload("rssWA1", LANDED_AT, ("COD", 100))
            ],
        }
    )
    provider.failing_rss.add("C20415")
    landings = FakeLandingRepository()

    result = _pipeline(cache, provider, background, landings).fetch_and_process_new_landings(
        [LandingQuery("C20415", "2019-07-10"), LandingQuery("rssWA1", "2019-07-10")]
    )

    assert [landing.rss_number for landing in result] == ["rssWA1"]


def test_batch_continues_when_storage_fails(
    cache: ReferenceCache, background: BackgroundTasks
) -> None:
    provider = FakeLandingProvider(
        landing_data={
            (LandingDataKind.LANDING, "rssWA1", "2019-07-10"): [
                declaration_payload("rssWA1", LANDED_AT, ("COD", 100))
            ],
        },
        catch_activity={
            ("C20415", "2019-07-10"): catch_activity_payload(LANDED_AT, ("COD", 12))
        },
    )

    class BrokenLandingRepository(FakeLandingRepository):
        def update_landings(self, landings: object) -> None:
            raise RuntimeError("write failed")

    result = _pipeline(
        cache, provider, background, BrokenLandingRepository()
    ).fetch_and_process_new_landings(
        [LandingQuery("rssWA1", "2019-07-10"), LandingQuery("C20415", "2019-07-10")]
    )

    assert result == []


def test_is_unchanged_compares_day_source_and_items() -> None:
    stored = _declaration_landing()

    assert is_unchanged(_declaration_landing(date_time_landed=datetime(2019, 7, 10, 20)), stored)
    assert not is_unchanged(_declaration_landing(source=LandingSource.ELOG), stored)
    assert not is_unchanged(_declaration_landing(items=()), stored)
    assert not is_unchanged(
        _declaration_landing(date_time_landed=datetime(2019, 7, 11, 6, tzinfo=UTC)), stored
    )
