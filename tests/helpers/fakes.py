"""In-memory fakes for the domain ports."""

from __future__ import annotations

from concurrent.futures import Executor, Future
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from catchwatch.domain.model import LandingDataKind, Weighting
from catchwatch.domain.reference_cache import as_day

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from catchwatch.domain.model import (
        AuditKind,
        CatchCertificate,
        CcQueryRow,
        ConversionFactor,
        ExporterBehaviour,
        Landing,
        LandingQuery,
        LandingStatus,
        RssLanding,
        SpeciesAliases,
        SpeciesRiskToggle,
        SpeciesRow,
        VesselOfInterest,
        VesselRecord,
    )
    from catchwatch.domain.ports import CertificatePatch, RawPayload


class InlineExecutor(Executor):
    """Run submitted callables immediately so background work is observable in tests."""

    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Future[Any]:
        future: Future[Any] = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as exc:  # noqa: BLE001
            future.set_exception(exc)
        return future


class FakeCertificateRepository:
    def __init__(self, certificates: Iterable[CatchCertificate] = ()) -> None:
        self.certificates = {cert.document_number: cert for cert in certificates}
        self.upserts: list[tuple[str, CertificatePatch]] = []
        self.fail_on_upsert: Exception | None = None

    def get_catch_certificates(
        self,
        *,
        statuses: Iterable[LandingStatus] | None = None,
        ids: Iterable[str] | None = None,
    ) -> list[CatchCertificate]:
        wanted_statuses = set(statuses) if statuses is not None else None
        wanted_ids = set(ids) if ids is not None else None
        return [
            cert
            for cert in self.certificates.values()
            if any(
                (wanted_statuses is None or entry.status in wanted_statuses)
                and (wanted_ids is None or entry.id in wanted_ids)
                for entry in cert.catch_entries()
            )
        ]

    def upsert_certificate(self, document_number: str, patch: CertificatePatch) -> None:
        if self.fail_on_upsert is not None:
            raise self.fail_on_upsert
        self.upserts.append((document_number, patch))
        if patch.products is not None and document_number in self.certificates:
            self.certificates[document_number].products = patch.products

    def get_completed_without_commodity_description(self) -> list[CatchCertificate]:
        return sorted(
            (
                cert
                for cert in self.certificates.values()
                if any(p.commodity_code_description is None for p in cert.products)
            ),
            key=lambda cert: cert.created_at,
            reverse=True,
        )


class FakeLandingRepository:
    def __init__(self, stored: Iterable[Landing] = ()) -> None:
        self.stored: list[Landing] = list(stored)
        self.updates: list[list[Landing]] = []
        self.cleared: list[list[Landing]] = []
        self.fail_on_clear: Exception | None = None
        self.multiple_queries: list[list[RssLanding]] = []

    def get_stored_landings(self, rss_number: str, date_landed: str) -> list[Landing]:
        day = as_day(date_landed)
        return [
            landing
            for landing in self.stored
            if landing.rss_number == rss_number and landing.date_time_landed.date() == day
        ]

    def update_landings(self, landings: Sequence[Landing]) -> None:
        self.updates.append(list(landings))

    def clear_elogs(self, landings: Sequence[Landing]) -> None:
        if self.fail_on_clear is not None:
            raise self.fail_on_clear
        self.cleared.append(list(landings))

    def get_landings_multiple(self, queries: Sequence[RssLanding]) -> list[Landing]:
        self.multiple_queries.append(list(queries))
        keys = {(query.rss_number, as_day(query.date_landed)) for query in queries}
        return [
            landing
            for landing in self.stored
            if (landing.rss_number, landing.date_time_landed.date()) in keys
        ]


class FakeAuditRepository:
    def __init__(self) -> None:
        self.payloads: list[tuple[AuditKind, str, str, object]] = []
        self.fail_with: Exception | None = None

    def persist_audit_payload(
        self, kind: AuditKind, rss_number: str, date_landed: str, payload: object
    ) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.payloads.append((kind, rss_number, date_landed, payload))

    def kinds(self) -> list[AuditKind]:
        return [kind for kind, *_ in self.payloads]


class FakeLandingProvider:
    def __init__(
        self,
        landing_data: dict[tuple[LandingDataKind, str, str], list[RawPayload]] | None = None,
        catch_activity: dict[tuple[str, str], RawPayload] | None = None,
    ) -> None:
        self.landing_data = landing_data or {}
        self.catch_activity = catch_activity or {}
        self.calls: list[tuple[str, str, str]] = []
        self.failing_rss: set[str] = set()

    def fetch_landing_data(
        self, date_landed: str, rss_number: str, kind: LandingDataKind
    ) -> list[RawPayload]:
        self.calls.append((kind.value, rss_number, date_landed))
        if rss_number in self.failing_rss and kind is not LandingDataKind.SALES_NOTES:
            raise RuntimeError(f"provider down for {rss_number}")
        return self.landing_data.get((kind, rss_number, date_landed), [])

    def fetch_catch_activity(self, date_landed: str, rss_number: str) -> RawPayload | None:
        self.calls.append(("catchActivity", rss_number, date_landed))
        if rss_number in self.failing_rss:
            raise RuntimeError(f"provider down for {rss_number}")
        return self.catch_activity.get((rss_number, date_landed))

    def kinds_requested(self) -> list[str]:
        return [kind for kind, *_ in self.calls]


class FakeConsolidationService:
    def __init__(self, refresh: Sequence[LandingQuery] = ()) -> None:
        self.refresh = list(refresh)
        self.fail_with: Exception | None = None
        self.updated: list[list[Landing]] = []

    def fetch_refresh_landings(self) -> list[LandingQuery]:
        if self.fail_with is not None:
            raise self.fail_with
        return list(self.refresh)

    def update_consolidated_landings(self, landings: Sequence[Landing]) -> None:
        self.updated.append(list(landings))


class FakeReportingService:
    def __init__(self) -> None:
        self.new_landings: list[list[Landing]] = []
        self.exceeding: list[list[CcQueryRow]] = []
        self.resent: list[list[CcQueryRow]] = []
        self.processed = 0
        self.fail_on_report: Exception | None = None

    def report_new_landings(self, landings: Sequence[Landing]) -> None:
        if self.fail_on_report is not None:
            raise self.fail_on_report
        self.new_landings.append(list(landings))

    def report_exceeding_landings(self, rows: Sequence[CcQueryRow]) -> None:
        self.exceeding.append(list(rows))

    def resend_to_trade(self, rows: Sequence[CcQueryRow]) -> None:
        self.resent.append(list(rows))

    def process_reports(self) -> None:
        self.processed += 1


@dataclass
class FakeReferenceSource:
    """Each dataset is a value or an exception to raise when loaded."""

    remote: bool = False
    vessels: list[VesselRecord] | Exception = field(default_factory=list)
    species: list[SpeciesRow] | Exception = field(default_factory=list)
    species_aliases: SpeciesAliases | Exception = field(default_factory=dict)
    conversion_factors: list[ConversionFactor] | Exception = field(default_factory=list)
    vessels_of_interest: list[VesselOfInterest] | Exception = field(default_factory=list)
    weighting: Weighting | Exception = field(default_factory=Weighting)
    species_toggle: SpeciesRiskToggle | Exception | None = None
    exporter_behaviour: list[ExporterBehaviour] | Exception = field(default_factory=list)
    loaded: list[str] = field(default_factory=list)

    def _get(self, name: str) -> Any:
        self.loaded.append(name)
        value = getattr(self, name)
        if isinstance(value, Exception):
            raise value
        return value

    def load_vessels(self) -> list[VesselRecord]:
        return self._get("vessels")

    def load_species(self) -> list[SpeciesRow]:
        return self._get("species")

    def load_species_aliases(self) -> SpeciesAliases:
        return self._get("species_aliases")

    def load_conversion_factors(self) -> list[ConversionFactor]:
        return self._get("conversion_factors")

    def load_vessels_of_interest(self) -> list[VesselOfInterest]:
        return self._get("vessels_of_interest")

    def load_weighting(self) -> Weighting:
        return self._get("weighting")

    def load_species_toggle(self) -> SpeciesRiskToggle:
        return self._get("species_toggle")

    def load_exporter_behaviour(self) -> list[ExporterBehaviour]:
        return self._get("exporter_behaviour")


class FakeReprocessingStore:
    def __init__(self, ids: Iterable[str] = ()) -> None:
        self.ids = list(ids)
        self.writes: list[list[str]] = []

    def read(self) -> list[str]:
        return list(self.ids)

    def write(self, ids: Sequence[str]) -> None:
        self.writes.append(list(ids))
        self.ids = list(ids)


def declaration_payload(
    rss_number: str, landed_at: str, *items: tuple[str, float]
) -> dict[str, object]:
    return {
        "rssNumber": rss_number,
        "dateTimeLanded": landed_at,
        "items": [
            {"species": species, "weight": weight, "state": "FRE", "presentation": "GUT"}
            for species, weight in items
        ],
    }


def elog_payload(rss_number: str, landed_at: str, *items: tuple[str, float]) -> dict[str, object]:
    return {
        "rssNumber": rss_number,
        "activities": [
            {
                "dateTimeLanded": landed_at,
                "catches": [
                    {"species": species, "weight": weight, "state": "FRE", "presentation": "GUT"}
                    for species, weight in items
                ],
            }
        ],
    }


def catch_activity_payload(landed_at: str, *items: tuple[str, float]) -> dict[str, object]:
    return {
        "activities": [
            {
                "dateTimeLanded": landed_at,
                "catches": [
                    {"species": species, "weight": weight, "state": "FRE", "presentation": "GUT"}
                    for species, weight in items
                ],
            }
        ]
    }


__all__ = [
    "FakeAuditRepository",
    "FakeCertificateRepository",
    "FakeConsolidationService",
    "FakeLandingProvider",
    "FakeLandingRepository",
    "FakeReferenceSource",
    "FakeReportingService",
    "FakeReprocessingStore",
    "InlineExecutor",
    "catch_activity_payload",
    "declaration_payload",
    "elog_payload",
]
