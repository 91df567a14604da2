"""Ports for fetching landing data from upstream services."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from catchwatch.domain.model import Landing, LandingDataKind, LandingQuery

type RawPayload = dict[str, Any]


@runtime_checkable
class LandingDataProvider(Protocol):
    """Upstream provider of landing declarations, eLogs, sales notes and catch activity."""

    def fetch_landing_data(
        self, date_landed: str, rss_number: str, kind: LandingDataKind
    ) -> list[RawPayload]: ...

    def fetch_catch_activity(self, date_landed: str, rss_number: str) -> RawPayload | None: ...


@runtime_checkable
class LandingTranslator(Protocol):
    """Map raw provider payloads to domain landings."""

    def declaration_to_landings(self, payload: RawPayload) -> list[Landing]: ...

    def elog_to_landings(self, payload: RawPayload) -> list[Landing]: ...

    def catch_activity_to_landings(self, payload: RawPayload, rss_number: str) -> list[Landing]: ...


@runtime_checkable
class ConsolidationService(Protocol):
    """Downstream service consolidating landings across certificates."""

    def fetch_refresh_landings(self) -> list[LandingQuery]: ...

    def update_consolidated_landings(self, landings: Sequence[Landing]) -> None: ...


__all__ = ["ConsolidationService", "LandingDataProvider", "LandingTranslator", "RawPayload"]
