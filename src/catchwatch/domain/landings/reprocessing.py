"""Batched status reset for landings listed in the reprocessing queue."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from catchwatch.domain.model import LandingStatus
from catchwatch.domain.ports import CertificatePatch

if TYPE_CHECKING:
    from catchwatch.domain.ports import CertificateRepository, ReprocessingStore

log = getLogger(__name__)

_TAG = "[RUN-LANDINGS-AND-REPORTING-JOB][REPROCESS-LANDINGS]"


@dataclass(slots=True)
class ReprocessingResult:
    read: int = 0
    selected: int = 0
    certificates_updated: int = 0
    remaining: int | None = None
    written: bool = False
    error: str | None = None


class ReprocessingQueue:
    """Reset the first ``limit`` queued landings to pending, then trim the queue.

    The queue is rewritten only after every certificate in the batch has been
    stored. Any failure leaves the queue untouched, so the batch is retried on
    the next run; re-marking a landing as pending is idempotent.
    """

    def __init__(
        self,
        *,
        store: ReprocessingStore,
        certificates: CertificateRepository,
        enabled: bool,
        limit: int,
    ) -> None:
        self.store = store
        self.certificates = certificates
        self.enabled = enabled
        self.limit = limit

    def run_batch(self, limit: int | None = None) -> ReprocessingResult:
        result = ReprocessingResult()
        if not self.enabled:
            return result

        batch_limit = self.limit if limit is None else limit
        try:
            queued = self.store.read()
            result.read = len(queued)
            log.info("%s[NUMBER-LANDINGS-TO-REPROCESS][%d]", _TAG, len(queued))

            selected = queued[:batch_limit]
            result.selected = len(selected)
            log.info("%s[NUMBER-LANDINGS-TO-REPROCESS-WITH-LIMIT][%d]", _TAG, len(selected))
            if not selected:
                return result

            certificates = self.certificates.get_catch_certificates(ids=selected)
            log.info(
                "%s[NUMBER-CERTIFICATES-WITH-LANDINGS-TO-REPROCESS][%d]", _TAG, len(certificates)
            )
            if not certificates:
                return result

            wanted = set(selected)
            for certificate in certificates:
                for entry in certificate.catch_entries():
                    if entry.id in wanted:
                        entry.status = LandingStatus.PENDING
                self.certificates.upsert_certificate(
                    certificate.document_number,
                    CertificatePatch(products=certificate.products),
                )
                result.certificates_updated += 1

            remaining = [landing_id for landing_id in queued if landing_id not in wanted]
            log.info(
                "%s[UPDATING-REPROCESS-FILE-FOR-NEXT-RUN][NUMBER-OF-UNPROCESSED-LANDINGS][%d]",
                _TAG,
                len(remaining),
            )
            self.store.write(remaining)
            result.remaining = len(remaining)
            result.written = True
            log.info("%s[REPROCESS-FILE-UPDATED]", _TAG)
        except Exception as exc:  # noqa: BLE001
            log.error("%s[ERROR][%s]", _TAG, exc)
            result.error = str(exc)
        return result


__all__ = ["ReprocessingQueue", "ReprocessingResult"]
