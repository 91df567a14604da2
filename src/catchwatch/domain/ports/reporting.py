"""Port for downstream reporting of landing validation outcomes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from catchwatch.domain.model import CcQueryRow, Landing


@runtime_checkable
class ReportingService(Protocol):
    def report_new_landings(self, landings: Sequence[Landing]) -> None: ...

    def report_exceeding_landings(self, rows: Sequence[CcQueryRow]) -> None: ...

    def resend_to_trade(self, rows: Sequence[CcQueryRow]) -> None: ...

    def process_reports(self) -> None:
        """Flush whatever has been queued for reporting."""
        ...


__all__ = ["ReportingService"]
