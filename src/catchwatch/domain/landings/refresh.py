"""Fetch landings for vessels and dates, routed by vessel length."""

from __future__ import annotations

from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

from catchwatch.domain.model import AuditKind, LandingDataKind
from catchwatch.domain.reference_cache import as_day
from catchwatch.domain.time_windows import ensure_aware

if TYPE_CHECKING:
    from collections.abc import Sequence

    from catchwatch.common import BackgroundTasks
    from catchwatch.domain.model import Landing, LandingQuery
    from catchwatch.domain.ports import (
        AuditRepository,
        LandingDataProvider,
        LandingRepository,
        LandingTranslator,
        RawPayload,
    )
    from catchwatch.domain.reference_cache import ReferenceCache

log = getLogger(__name__)

OVER_10_METRES = 10


def _same_day(left: Landing, right: Landing) -> bool:
    return (
        ensure_aware(left.date_time_landed).date() == ensure_aware(right.date_time_landed).date()
    )


def is_unchanged(fetched: Landing, stored: Landing) -> bool:
    """Whether ``stored`` already holds the same day, source and set of items."""

    return (
        _same_day(fetched, stored)
        and fetched.source == stored.source
        and len(fetched.items) == len(stored.items)
        and all(item in fetched.items for item in stored.items)
    )


class LandingFetchPipeline:
    """Fetch, audit and store landings for a batch of queries.

    Vessels of ten metres or more are served from landing declarations with
    eLogs as the fallback; smaller vessels from catch activity. Sales notes are
    fetched in the background for audit only.
    """

    def __init__(
        self,
        *,
        cache: ReferenceCache,
        provider: LandingDataProvider,
        translator: LandingTranslator,
        landings: LandingRepository,
        audit: AuditRepository,
        background: BackgroundTasks,
    ) -> None:
        self.cache = cache
        self.provider = provider
        self.translator = translator
        self.landings = landings
        self.audit = audit
        self.background = background

    def fetch_and_process_new_landings(self, queries: Sequence[LandingQuery]) -> list[Landing]:
        new_landings: list[Landing] = []
        for query in queries:
            tag = f"{query.rss_number}-{query.date_landed}"
            try:
                log.info("[LANDINGS][CHECK-FOR-NEW-LANDINGS][FETCH-LANDINGS][%s]", tag)
                new_landings.extend(self.fetch_landings(query.rss_number, query.date_landed))
            except Exception as exc:  # noqa: BLE001
                log.error(
                    "[LANDINGS][CHECK-FOR-NEW-LANDINGS][FETCH-LANDINGS][ERROR][%s][%s]", tag, exc
                )
        return new_landings

    def fetch_landings(self, rss_number: str, date_landed: str) -> list[Landing]:
        tag = f"{rss_number}-{date_landed}"
        vessel = self.cache.get_vessel_details(rss_number)
        if vessel is None or vessel.vessel_length is None:
            log.info("[LANDINGS][FETCH-LANDING][%s][NO-VESSEL-LENGTH]", tag)
            return []

        log.info("[LANDINGS][FETCH-LANDING][%s][VESSELLENGTH:%s]", tag, vessel.vessel_length)
        if vessel.vessel_length >= OVER_10_METRES:
            landings = self._fetch_over_10_metres(rss_number, date_landed)
        else:
            landings = self._fetch_under_10_metres(rss_number, date_landed)
        log.info("[LANDINGS][FETCH-LANDING][%s][LANDINGS-FETCHED:%d]", tag, len(landings))

        if landings:
            landings = self.ignore_unchanged_landings(rss_number, date_landed, landings)
            self.landings.update_landings(landings)
            log.info("[LANDINGS][FETCH-LANDING][%s][LANDINGS-UPDATE]", tag)
            try:
                self.landings.clear_elogs(landings)
            except Exception as exc:  # noqa: BLE001
                log.error("[LANDINGS][FETCH-LANDING][%s][ELOGS-CLEAR-ERROR][%s]", tag, exc)

        day = as_day(date_landed)
        return [
            landing
            for landing in landings
            if ensure_aware(landing.date_time_landed).date() == day
        ]

    def _fetch_over_10_metres(self, rss_number: str, date_landed: str) -> list[Landing]:
        tag = f"{rss_number}-{date_landed}"
        try:
            # a landing may straddle the summertime offset, so expect zero to two payloads
            payloads = self.provider.fetch_landing_data(
                date_landed, rss_number, LandingDataKind.LANDING
            )
            landings = [
                landing
                for payload in payloads
                for landing in self.translator.declaration_to_landings(payload)
            ]
            log.info(
                "[LANDINGS][FETCH-LANDING-OVER10][%s][%d-LANDING-DECS-RETRIEVED]",
                tag,
                len(landings),
            )

            if not landings:
                payloads = self.provider.fetch_landing_data(
                    date_landed, rss_number, LandingDataKind.ELOGS
                )
                landings = [
                    landing
                    for payload in payloads
                    for landing in self.translator.elog_to_landings(payload)
                ]
                log.info(
                    "[LANDINGS][FETCH-LANDING-OVER10][%s][%d-ELOGS-RETRIEVED]", tag, len(landings)
                )

            self._submit_sales_notes("OVER10", rss_number, date_landed)
            self._save_raw_landings(payloads, "OVER10", rss_number, date_landed)
        except Exception as exc:  # noqa: BLE001
            log.error("[LANDINGS][FETCH-LANDING-OVER10][ERROR][%s][%s]", tag, exc)
            return []
        return landings

    def _fetch_under_10_metres(self, rss_number: str, date_landed: str) -> list[Landing]:
        tag = f"{rss_number}-{date_landed}"
        try:
            payload = self.provider.fetch_catch_activity(date_landed, rss_number)
            self._submit_sales_notes("UNDER10", rss_number, date_landed)

            if payload is None:
                log.info("[LANDINGS][FETCH-LANDING-UNDER10][NO-DATA][%s]", tag)
                return []

            self._save_raw_landings(payload, "UNDER10", rss_number, date_landed)
            landings = self.translator.catch_activity_to_landings(payload, rss_number)
            log.info(
                "[LANDINGS][FETCH-LANDING-UNDER10][%s][%d-LANDINGS-RETRIEVED]", tag, len(landings)
            )
        except Exception as exc:  # noqa: BLE001
            log.error("[LANDINGS][FETCH-LANDING-UNDER10][ERROR][%s][%s]", tag, exc)
            return []
        return landings

    def _submit_sales_notes(self, branch: str, rss_number: str, date_landed: str) -> None:
        def fetch_and_store() -> None:
            sales_notes = self.provider.fetch_landing_data(
                date_landed, rss_number, LandingDataKind.SALES_NOTES
            )
            self._save_audit(AuditKind.SALES_NOTES, sales_notes, branch, rss_number, date_landed)

        self.background.submit(
            fetch_and_store,
            label=f"[LANDINGS][FETCH-SALES-NOTES-{branch}][{rss_number}-{date_landed}]",
        )

    def _save_raw_landings(
        self,
        payload: Sequence[RawPayload] | RawPayload,
        branch: str,
        rss_number: str,
        date_landed: str,
    ) -> None:
        try:
            self._save_audit(AuditKind.RAW_LANDINGS, payload, branch, rss_number, date_landed)
        except Exception as exc:  # noqa: BLE001
            log.error(
                "[LANDINGS][FETCH-LANDING-%s][AUDIT-ERROR][%s-%s][%s]",
                branch,
                rss_number,
                date_landed,
                exc,
            )

    def _save_audit(
        self,
        kind: AuditKind,
        payload: Sequence[RawPayload] | RawPayload,
        branch: str,
        rss_number: str,
        date_landed: str,
    ) -> None:
        label = "LANDING" if kind is AuditKind.RAW_LANDINGS else "SALESNOTES"
        tag = f"{rss_number}-{date_landed}"
        if not payload:
            log.info("[LANDINGS][FETCH-%s-%s][NO-DATA][%s]", label, branch, tag)
            return
        log.info("[LANDINGS][FETCH-%s-%s][RETRIEVED][%s]", label, branch, tag)
        self.audit.persist_audit_payload(kind, rss_number, date_landed, payload)

    def ignore_unchanged_landings(
        self, rss_number: str, date_landed: str, landings: Sequence[Landing]
    ) -> list[Landing]:
        """Mark fetched landings already stored unchanged; order follows ``landings``."""

        tag = f"{rss_number}-{date_landed}"
        stored = self.landings.get_stored_landings(rss_number, date_landed)
        log.info(
            "[IGNORE-UNCHANGED-LANDINGS][%s][LANDINGS:%d][STORED:%d]",
            tag,
            len(landings),
            len(stored),
        )
        if not stored:
            return list(landings)

        marked: list[Landing] = []
        for landing in landings:
            unchanged = any(is_unchanged(landing, existing) for existing in stored)
            log.info("[IGNORE-UNCHANGED-LANDINGS][%s][HAS-LANDING][%s]", tag, unchanged)
            marked.append(replace(landing, ignore=True) if unchanged else landing)
        return marked


__all__ = ["LandingFetchPipeline", "is_unchanged"]
