"""HTTP client for the landings consolidation service."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import TypeAdapter

from catchwatch.adapters.http_resilience import ResilientClient

from .schema import ConsolidatedLandingPayload, RefreshLandingPayload

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from catchwatch.config import ConsolidationSettings, ResilienceConfig
    from catchwatch.domain.model import Landing, LandingQuery

log = getLogger(__name__)

REFRESH_PATH = "/v1/landings/refresh"
UPDATE_LANDINGS_PATH = "/v1/jobs/landings"

_refresh_adapter = TypeAdapter(list[RefreshLandingPayload])


class ConsolidationServiceError(RuntimeError):
    """Raised when the consolidation service rejects a request."""


class ConsolidationClient:
    def __init__(
        self,
        *,
        settings: ConsolidationSettings,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._resilience = settings.resilience
        self._client_factory = client_factory or ResilientClient

    def fetch_refresh_landings(self) -> list[LandingQuery]:
        log.info("[RUN-LANDINGS-AND-REPORTING-JOB][LANDINGS-REFRESH]")
        return asyncio.run(self._fetch_refresh_landings_async())

    def update_consolidated_landings(self, landings: Sequence[Landing]) -> None:
        log.info("[RUN-LANDINGS-AND-REPORTING-JOB][%d][LANDINGS-UPDATE]", len(landings))
        asyncio.run(self._update_consolidated_landings_async(landings))

    async def _fetch_refresh_landings_async(self) -> list[LandingQuery]:
        async with self._client_factory(self._resilience) as client:
            response = await client.get(REFRESH_PATH)
        self._raise_for_status(response, REFRESH_PATH)
        payload = _refresh_adapter.validate_python(response.json() or [])
        return [item.to_query() for item in payload]

    async def _update_consolidated_landings_async(self, landings: Sequence[Landing]) -> None:
        body = {
            "landings": [
                ConsolidatedLandingPayload.from_landing(landing).model_dump(
                    mode="json", by_alias=True
                )
                for landing in landings
            ]
        }
        async with self._client_factory(self._resilience) as client:
            response = await client.post(UPDATE_LANDINGS_PATH, json=body)
        self._raise_for_status(response, UPDATE_LANDINGS_PATH)

    @staticmethod
    def _raise_for_status(response: httpx.Response, path: str) -> None:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ConsolidationServiceError(
                f"Consolidation service returned {response.status_code} for {path}"
            ) from exc
