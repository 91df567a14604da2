"""Reporting service that queues outcomes and emits them as log records on flush.

Mapping outcomes to partner payloads is owned by downstream services; this
adapter only records what would be reported so a run is traceable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from catchwatch.domain.model import CcQueryRow, Landing

log = getLogger(__name__)


@dataclass(slots=True)
class ReportQueue:
    new_landings: list[Landing] = field(default_factory=list)
    exceeding: list[CcQueryRow] = field(default_factory=list)
    resend: list[CcQueryRow] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.new_landings) + len(self.exceeding) + len(self.resend)


class LoggingReportingService:
    def __init__(self) -> None:
        self.queue = ReportQueue()
        self.flushed = 0

    def report_new_landings(self, landings: Sequence[Landing]) -> None:
        self.queue.new_landings.extend(landings)

    def report_exceeding_landings(self, rows: Sequence[CcQueryRow]) -> None:
        self.queue.exceeding.extend(rows)

    def resend_to_trade(self, rows: Sequence[CcQueryRow]) -> None:
        self.queue.resend.extend(rows)

    def process_reports(self) -> None:
        queue, self.queue = self.queue, ReportQueue()
        log.info("[REPORTS][PROCESS][%d]", len(queue))
        for landing in queue.new_landings:
            log.info(
                "[REPORTS][NEW-LANDING][%s][%s][%s]",
                landing.rss_number,
                landing.date_time_landed.isoformat(),
                landing.source,
            )
        for row in queue.exceeding:
            log.info(
                "[REPORTS][EXCEEDING-14-DAY-LIMIT][%s][%s][%s-%s]",
                row.document_number,
                row.catch_entry_id,
                row.rss_number,
                row.date_landed,
            )
        for row in queue.resend:
            log.info("[REPORTS][RESEND-TO-TRADE][%s][%s]", row.document_number, row.catch_entry_id)
        self.flushed += len(queue)


__all__ = ["LoggingReportingService", "ReportQueue"]
