"""HTTP client for the upstream landing-data provider."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING, Any, cast

import httpx

from catchwatch.adapters.http_resilience import ResilientClient

if TYPE_CHECKING:
    from collections.abc import Callable

    from catchwatch.config import ProviderSettings, ResilienceConfig
    from catchwatch.domain.model import LandingDataKind
    from catchwatch.domain.ports import RawPayload

log = getLogger(__name__)

LANDING_DATA_PATH = "/v1/landings/{kind}"
CATCH_ACTIVITY_PATH = "/v1/catch-activity"


class LandingProviderError(RuntimeError):
    """Raised when the provider answers with an error or an unexpected payload."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class LandingProviderClient:
    """Fetch landing declarations, eLogs, sales notes and catch activity."""

    def __init__(
        self,
        *,
        settings: ProviderSettings,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._resilience = settings.resilience
        self._client_factory = client_factory or ResilientClient

    def fetch_landing_data(
        self, date_landed: str, rss_number: str, kind: LandingDataKind
    ) -> list[RawPayload]:
        return asyncio.run(self._fetch_landing_data_async(date_landed, rss_number, kind))

    def fetch_catch_activity(self, date_landed: str, rss_number: str) -> RawPayload | None:
        return asyncio.run(self._fetch_catch_activity_async(date_landed, rss_number))

    async def _fetch_landing_data_async(
        self, date_landed: str, rss_number: str, kind: LandingDataKind
    ) -> list[RawPayload]:
        payload = await self._get(
            LANDING_DATA_PATH.format(kind=kind.value),
            rss_number=rss_number,
            date_landed=date_landed,
        )
        if payload is None:
            return []
        if isinstance(payload, dict):
            return [cast(dict[str, Any], payload)]
        if isinstance(payload, list):
            return [
                cast(dict[str, Any], item)
                for item in cast(list[object], payload)
                if isinstance(item, dict)
            ]
        raise LandingProviderError(f"Unexpected {kind.value} payload for {rss_number}")

    async def _fetch_catch_activity_async(
        self, date_landed: str, rss_number: str
    ) -> RawPayload | None:
        payload = await self._get(
            CATCH_ACTIVITY_PATH, rss_number=rss_number, date_landed=date_landed
        )
        if payload is None:
            return None
        if not isinstance(payload, dict):
            raise LandingProviderError(f"Unexpected catch activity payload for {rss_number}")
        return cast(dict[str, Any], payload)

    async def _get(self, path: str, *, rss_number: str, date_landed: str) -> object:
        params = httpx.QueryParams({"rssNumber": rss_number, "dateLanded": date_landed})
        async with self._client_factory(self._resilience) as client:
            response = await client.get(path, params=params)

        if response.status_code in {httpx.codes.NO_CONTENT, httpx.codes.NOT_FOUND}:
            log.info("[LANDING-PROVIDER][NO-DATA][%s][%s-%s]", path, rss_number, date_landed)
            return None
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise LandingProviderError(
                f"Landing provider returned {response.status_code} for {path}",
                status_code=response.status_code,
            ) from exc
        return response.json()
