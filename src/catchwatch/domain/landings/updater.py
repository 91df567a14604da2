"""The landings-and-reporting job: reconciliation, overdue checks and resubmission."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from catchwatch.domain.model import LandingStatus
from catchwatch.domain.ports import CertificatePatch
from catchwatch.domain.time_windows import utcnow

from .queries import (
    MissingLandingsResolver,
    map_pln_landings_to_rss_landings,
    merge_landing_queries,
    pln_landings_from_certificate,
    uniquify_landings,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from datetime import datetime

    from catchwatch.common import BackgroundTasks
    from catchwatch.domain.model import CatchCertificate, CcQueryRow, Landing, LandingQuery
    from catchwatch.domain.ports import (
        CertificateRepository,
        ConsolidationService,
        LandingRepository,
        ReportingService,
    )
    from catchwatch.domain.reference_cache import ReferenceCache
    from catchwatch.domain.time_windows import Clock

    from .refresh import LandingFetchPipeline
    from .reprocessing import ReprocessingQueue

log = getLogger(__name__)

_JOB = "[RUN-LANDINGS-AND-REPORTING-JOB]"
_RESUBMIT = "[RUN-RESUBMIT-TRADE-DOCUMENT]"


class LandingsUpdater:
    """Wire the resolver, fetch pipeline and reprocessing queue into one job."""

    def __init__(
        self,
        *,
        cache: ReferenceCache,
        certificates: CertificateRepository,
        landings: LandingRepository,
        pipeline: LandingFetchPipeline,
        consolidation: ConsolidationService,
        reporting: ReportingService,
        reprocessing: ReprocessingQueue,
        background: BackgroundTasks,
        run_resubmit_to_trade: bool = False,
        clock: Clock = utcnow,
    ) -> None:
        self.cache = cache
        self.certificates = certificates
        self.landings = landings
        self.pipeline = pipeline
        self.consolidation = consolidation
        self.reporting = reporting
        self.reprocessing = reprocessing
        self.background = background
        self.run_resubmit_to_trade = run_resubmit_to_trade
        self.clock = clock
        self.resolver = MissingLandingsResolver(cache)

    # queries -------------------------------------------------------------------

    def _pending_certificates(self, purpose: str) -> list[CatchCertificate]:
        certificates = self.certificates.get_catch_certificates(statuses=[LandingStatus.PENDING])
        log.info(
            "%s[NUMBER-CERTIFICATES-WITH-PENDING-LANDING:FOR-%s][%d]",
            _JOB,
            purpose,
            len(certificates),
        )
        return certificates

    def get_missing_landings(self, now: datetime | None = None) -> list[LandingQuery]:
        at = now or self.clock()
        return self.resolver.compute_missing(self._pending_certificates("MISSING-LANDINGS"), at)

    def get_exceeding_landings(self, now: datetime | None = None) -> list[CcQueryRow]:
        at = now or self.clock()
        certificates = self._pending_certificates("EXCEEDING-14-DAY-LIMIT-LANDINGS")
        return self.resolver.compute_exceeding(certificates, at)

    # phases --------------------------------------------------------------------

    def run_reconciliation_cycle(self) -> list[Landing]:
        """Fetch refresh-listed and missing landings, then always flush reports."""

        new_landings: list[Landing] = []
        try:
            try:
                refresh = self.consolidation.fetch_refresh_landings()
            except Exception as exc:  # noqa: BLE001
                log.error("%s[OVERUSED-ELOG-DEMINIMUS-LANDINGS][FAILED][%s]", _JOB, exc)
                refresh = []
            log.info("%s[OVERUSED-ELOG-DEMINIMUS-LANDINGS][%d]", _JOB, len(refresh))

            missing = self.get_missing_landings()
            log.info("%s[MISSING-LANDINGS][%d]", _JOB, len(missing))

            queries = merge_landing_queries(refresh, missing)
            log.info(
                "%s[MISSING-LANDINGS-PLUS-OVERUSED-ELOG-DEMINIMUS-LANDINGS][%d]", _JOB, len(queries)
            )

            new_landings = self.pipeline.fetch_and_process_new_landings(queries)
            log.info("%s[NEW-LANDINGS][%d]", _JOB, len(new_landings))

            if new_landings:
                self.reporting.report_new_landings(new_landings)
                self.apply_landing_statuses(new_landings)
                landings = list(new_landings)
                self.background.submit(
                    lambda: self.consolidation.update_consolidated_landings(landings),
                    label=f"{_JOB}[LANDINGS-UPDATE]",
                )
        except Exception as exc:  # noqa: BLE001
            log.error("%s[LANDING-AND-REPORTING-CRON][ERROR][%s]", _JOB, exc)
        finally:
            self.reporting.process_reports()
        return new_landings

    def apply_landing_statuses(self, landings: Sequence[Landing]) -> int:
        """Mark pending catch entries matched by ``landings`` as having landing data.

        Each affected certificate is upserted on its own, so one failing document
        leaves the others updated. Returns the number of certificates upserted.
        """

        updated = 0
        now = self.clock()
        for certificate in self._pending_certificates("LANDING-UPDATES"):
            number = certificate.document_number
            try:
                landed = {
                    row.catch_entry_id
                    for row in self.resolver.project([certificate], now, landings)
                    if row.landing_source is not None
                }
                changed = False
                for entry in certificate.catch_entries():
                    if entry.id in landed and entry.status in (LandingStatus.PENDING, None):
                        entry.status = LandingStatus.HAS_LANDING_DATA
                        changed = True
                if not changed:
                    continue
                log.info("%s[RUN-UPDATE-FOR-LANDINGS][UPSERT][%s]", _JOB, number)
                self.certificates.upsert_certificate(
                    number, CertificatePatch(products=certificate.products)
                )
                updated += 1
            except Exception as exc:  # noqa: BLE001
                log.error("%s[RUN-UPDATE-FOR-LANDINGS][%s][ERROR][%s]", _JOB, number, exc)
        return updated

    def run_exceeding_check(self) -> list[CcQueryRow]:
        exceeding: list[CcQueryRow] = []
        try:
            exceeding = self.get_exceeding_landings()
            log.info("%s[EXCEEDING-14-DAYS-LANDINGS][%d]", _JOB, len(exceeding))
            if exceeding:
                self.reporting.report_exceeding_landings(exceeding)
        except Exception as exc:  # noqa: BLE001
            log.error("%s[EXCEEDING-14-DAYS-LANDINGS][ERROR][%s]", _JOB, exc)
        return exceeding

    def resubmit_certificates_to_trade(self) -> int:
        """Resend completed certificates lacking commodity descriptions; returns the count."""

        if not self.run_resubmit_to_trade:
            return 0
        resubmitted = 0
        try:
            certificates = self.certificates.get_completed_without_commodity_description()
            log.info("%s[CERTS][LENGTH:%d]", _RESUBMIT, len(certificates))
            for certificate in certificates:
                if self._resubmit(certificate):
                    resubmitted += 1
            log.info("%s[COMPLETE]", _RESUBMIT)
        except Exception as exc:  # noqa: BLE001
            log.error("%s[ERROR][%s]", _RESUBMIT, exc)
        return resubmitted

    def _resubmit(self, certificate: CatchCertificate) -> bool:
        number = certificate.document_number
        log.info("%s[CERT][%s]", _RESUBMIT, number)

        pln_landings = pln_landings_from_certificate(certificate)
        if not pln_landings:
            log.info("%s[%s][NO-LANDINGS-FOUND]", _RESUBMIT, number)
            return False

        by_rss = uniquify_landings(map_pln_landings_to_rss_landings(pln_landings, self.cache))
        stored = self.landings.get_landings_multiple(by_rss)
        log.info("%s[RUNNING-CCQUERY][WITH][%d][LANDINGS]", _RESUBMIT, len(stored))

        rows = self.resolver.project([certificate], certificate.created_at, stored)
        if not rows:
            log.info("%s[%s][NO-VALIDATIONS]", _RESUBMIT, number)
            return False

        self.reporting.resend_to_trade(rows)
        log.info("%s[%s][RESULT][%d][COMPLETE]", _RESUBMIT, number, len(rows))

        for product in certificate.products:
            if product.commodity_code_description is not None:
                continue
            matches = self.cache.commodity_search(
                product.species_code, product.state_code, product.presentation_code
            )
            description = next(
                (
                    row.get("commodityCodeDescr")
                    for row in matches
                    if row.get("commodityCode") == product.commodity_code
                ),
                None,
            )
            if description:
                product.commodity_code_description = description
                log.info(
                    "%s[DESCRIPTION-UPDATED][%s][WITH][%s]",
                    _RESUBMIT,
                    product.species_code,
                    description,
                )

        patch = CertificatePatch(products=certificate.products)
        self.certificates.upsert_certificate(number, patch)
        log.info("%s[%s][UPDATE-COMPLETE]", _RESUBMIT, number)
        return True

    # job -----------------------------------------------------------------------

    def run_landings_and_reporting_job(
        self, *, refresh_risking_data: Callable[[], None] | None = None
    ) -> None:
        """Run every phase of the job; a failing phase never stops the next one."""

        phases: list[tuple[str, Callable[[], object]]] = []
        if refresh_risking_data is not None:
            phases.append(("REFRESH-RISKING-DATA", refresh_risking_data))
        phases.extend(
            [
                ("REPROCESS-LANDINGS", self.reprocessing.run_batch),
                ("LANDINGS-AND-REPORTING", self.run_reconciliation_cycle),
                ("EXCEEDING-14-DAYS-LANDINGS", self.run_exceeding_check),
                ("RESUBMIT-TRADE-DOCUMENT", self.resubmit_certificates_to_trade),
            ]
        )
        for name, phase in phases:
            try:
                phase()
            except Exception as exc:  # noqa: BLE001
                log.error("%s[%s][ERROR][%s]", _JOB, name, exc)
        log.info("%s[COMPLETE]", _JOB)


__all__ = ["LandingsUpdater"]
