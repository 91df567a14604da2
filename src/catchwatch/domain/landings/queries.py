"""Flatten certificates into query rows and work out which landings to fetch."""

from __future__ import annotations

from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

from catchwatch.domain.model import (
    CcQueryRow,
    LandingQuery,
    LandingSource,
    LandingStatus,
    PlnLanding,
    RssLanding,
    WindowState,
)
from catchwatch.domain.reference_cache import as_day
from catchwatch.domain.time_windows import (
    ensure_aware,
    retrospective_validation_required,
    row_window_state,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from datetime import date, datetime

    from catchwatch.domain.model import CatchCertificate, CatchEntry, Landing
    from catchwatch.domain.reference_cache import ReferenceCache

log = getLogger(__name__)

_PENDING_STATUSES = frozenset({LandingStatus.PENDING, None})
_SOURCE_PRIORITY = (
    LandingSource.LANDING_DECLARATION,
    LandingSource.CATCH_RECORDING,
    LandingSource.ELOG,
)

type LandingIndex = dict[tuple[str, date], list[Landing]]


def _optional_day(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return as_day(value)
    except ValueError:
        log.warning("[CC-QUERY][INVALID-DATE][%s]", value)
        return None


def _rss_number_on(cache: ReferenceCache, pln: str, date_landed: str) -> str | None:
    """The RSS number licensed to ``pln`` on the day; malformed dates resolve to nothing."""

    try:
        return cache.get_rss_number(pln, date_landed)
    except ValueError:
        log.warning("[CC-QUERY][INVALID-LANDING-DATE][%s][%s]", pln, date_landed)
        return None


def index_landings(landings: Iterable[Landing]) -> LandingIndex:
    """Group landings by vessel and day, declarations before catch recordings before eLogs."""

    index: LandingIndex = {}
    for landing in sorted(landings, key=lambda landing: _SOURCE_PRIORITY.index(landing.source)):
        day = ensure_aware(landing.date_time_landed).date()
        index.setdefault((landing.rss_number, day), []).append(landing)
    return index


def project_catch_certificates(
    certificates: Iterable[CatchCertificate],
    cache: ReferenceCache,
    now: datetime,
    landings: Iterable[Landing] = (),
) -> list[CcQueryRow]:
    """One row per catch entry, with the vessel's RSS number resolved for the landing date.

    Rows whose vessel and day match one of ``landings`` carry that landing's source
    and the live weight landed for the species (or its aliases); a pending entry
    with a matching landing is reported as ``HAS_LANDING_DATA``.
    """

    index = index_landings(landings)
    rows: list[CcQueryRow] = []
    for certificate in certificates:
        for product in certificate.products:
            for entry in product.caught_by:
                row = CcQueryRow(
                    document_number=certificate.document_number,
                    created_at=ensure_aware(certificate.created_at),
                    catch_entry_id=entry.id,
                    pln=entry.pln,
                    rss_number=_rss_number_on(cache, entry.pln, entry.date),
                    date_landed=entry.date,
                    species_code=product.species_code,
                    weight=entry.weight,
                    landing_status=entry.status,
                    data_ever_expected=entry.data_ever_expected,
                    landing_data_expected_date=_optional_day(entry.landing_data_expected_date),
                    landing_data_end_date=_optional_day(entry.landing_data_end_date),
                )
                row = _match_landing(row, entry, index, cache)
                rows.append(_flag_exceeding(row, now))
    return rows


def _match_landing(
    row: CcQueryRow, entry: CatchEntry, index: LandingIndex, cache: ReferenceCache
) -> CcQueryRow:
    if not index or row.rss_number is None:
        return row
    matches = index.get((row.rss_number, as_day(entry.date)))
    if not matches:
        return row
    source = matches[0].source
    species = {row.species_code, *cache.species_aliases(row.species_code)}
    landed_weight = sum(
        item.weight * item.factor
        for landing in matches
        if landing.source is source
        for item in landing.items
        if item.species in species
    )
    status = (
        LandingStatus.HAS_LANDING_DATA
        if row.landing_status in _PENDING_STATUSES
        else row.landing_status
    )
    return replace(
        row,
        landing_status=status,
        landing_source=source,
        landed_weight=landed_weight,
    )


def _flag_exceeding(row: CcQueryRow, now: datetime) -> CcQueryRow:
    if row.landing_status not in _PENDING_STATUSES or row.data_ever_expected is False:
        return row
    if row_window_state(now, row) is not WindowState.EXCEEDED:
        return row
    return replace(row, is_exceeding_14_day_limit=True)


def dedupe_landing_queries(queries: Iterable[LandingQuery]) -> list[LandingQuery]:
    """Drop repeated ``(rss_number, date_landed)`` pairs; the first occurrence wins."""

    seen: set[tuple[str, str]] = set()
    unique: list[LandingQuery] = []
    for query in queries:
        key = (query.rss_number, query.date_landed)
        if key in seen:
            continue
        seen.add(key)
        unique.append(query)
    return unique


def merge_landing_queries(
    refresh: Sequence[LandingQuery], missing: Sequence[LandingQuery]
) -> list[LandingQuery]:
    return dedupe_landing_queries([*refresh, *missing])


def uniquify_landings[T](items: Iterable[T]) -> list[T]:
    """Value-equality dedup that keeps the first occurrence of each item."""

    unique: list[T] = []
    for item in items:
        if item not in unique:
            unique.append(item)
    return unique


def pln_landings_from_certificate(certificate: CatchCertificate) -> list[PlnLanding]:
    return [
        PlnLanding(
            pln=entry.pln,
            date_landed=entry.date,
            created_at=certificate.created_at,
            data_ever_expected=entry.data_ever_expected,
            landing_data_expected_date=entry.landing_data_expected_date,
            landing_data_end_date=entry.landing_data_end_date,
            is_legally_due=entry.is_legally_due,
        )
        for entry in certificate.catch_entries()
    ]


def map_pln_landings_to_rss_landings(
    pln_landings: Iterable[PlnLanding], cache: ReferenceCache
) -> list[RssLanding]:
    """Re-key entries by RSS number.

    Entries whose vessel is unknown on the landing date, and entries for which
    landing data is never expected, are dropped.
    """

    rss_landings: list[RssLanding] = []
    for landing in pln_landings:
        if landing.data_ever_expected is False:
            continue
        rss_number = _rss_number_on(cache, landing.pln, landing.date_landed)
        if not rss_number:
            continue
        rss_landings.append(
            RssLanding(
                rss_number=rss_number,
                date_landed=landing.date_landed,
                created_at=landing.created_at,
                data_ever_expected=landing.data_ever_expected,
                landing_data_expected_date=landing.landing_data_expected_date,
                landing_data_end_date=landing.landing_data_end_date,
                is_legally_due=landing.is_legally_due,
            )
        )
    return rss_landings


class MissingLandingsResolver:
    """Decide which landings are due for a fetch and which are overdue."""

    def __init__(self, cache: ReferenceCache) -> None:
        self.cache = cache

    def project(
        self,
        certificates: Iterable[CatchCertificate],
        now: datetime,
        landings: Iterable[Landing] = (),
    ) -> list[CcQueryRow]:
        return project_catch_certificates(certificates, self.cache, now, landings)

    def compute_missing(
        self, certificates: Iterable[CatchCertificate], now: datetime
    ) -> list[LandingQuery]:
        rows = self.project(certificates, now)
        due = (
            LandingQuery(rss_number=row.rss_number, date_landed=row.date_landed)
            for row in rows
            if row.rss_number and retrospective_validation_required(now, row)
        )
        return dedupe_landing_queries(due)

    def compute_exceeding(
        self, certificates: Iterable[CatchCertificate], now: datetime
    ) -> list[CcQueryRow]:
        return [row for row in self.project(certificates, now) if row.is_exceeding_14_day_limit]


__all__ = [
    "MissingLandingsResolver",
    "dedupe_landing_queries",
    "index_landings",
    "map_pln_landings_to_rss_landings",
    "merge_landing_queries",
    "pln_landings_from_certificate",
    "project_catch_certificates",
    "uniquify_landings",
]
