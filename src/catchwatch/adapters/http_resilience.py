"""Async HTTP client with retries, rate limiting and optional response caching."""

from __future__ import annotations

import threading
from logging import getLogger
from typing import TYPE_CHECKING, TypedDict, Unpack

import httpx
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage
from hishel.httpx import AsyncCacheClient
from httpx_retries import Retry, RetryTransport

from catchwatch.config.storage import get_http_cache_path

if TYPE_CHECKING:
    from types import TracebackType

    from httpx._types import QueryParamTypes, URLTypes

    from catchwatch.config.http_resilience import (
        CacheConfig,
        RateLimit,
        ResilienceConfig,
        RetryPolicy,
    )

log = getLogger(__name__)

_LIMITERS: dict[tuple[str, int, float], AsyncLimiter] = {}
_LIMITERS_LOCK = threading.Lock()


class RequestOptions(TypedDict, total=False):
    json: object
    params: QueryParamTypes | None


def shared_limiter(name: str, ratelimit: RateLimit) -> AsyncLimiter:
    """The limiter for a service, shared by every client opened for it in this process.

    Adapters open one client per call; the limit holds across all of them.
    """

    key = (name, ratelimit.max_calls, ratelimit.per_seconds)
    with _LIMITERS_LOCK:
        limiter = _LIMITERS.get(key)
        if limiter is None:
            limiter = _LIMITERS[key] = AsyncLimiter(ratelimit.max_calls, ratelimit.per_seconds)
    return limiter


def build_retry(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.total,
        backoff_factor=policy.backoff_factor,
        max_backoff_wait=policy.max_backoff_wait,
        respect_retry_after_header=policy.respect_retry_after_header,
        allowed_methods=tuple(policy.allowed_methods),
        status_forcelist=tuple(policy.status_forcelist),
        retry_on_exceptions=policy.retry_on_exceptions,
        backoff_jitter=policy.backoff_jitter,
    )


class ResilientClient:
    """``httpx.AsyncClient`` configured from one service's :class:`ResilienceConfig`.

    Every request passes through the service's shared rate limiter (if any) and is
    logged at debug level as ``[HTTP][<service>][<METHOD> <url>][<status>]``.
    """

    def __init__(self, config: ResilienceConfig) -> None:
        self.config = config
        self._limiter = (
            shared_limiter(config.name, config.ratelimit) if config.ratelimit else None
        )
        transport = RetryTransport(retry=build_retry(config.retry))
        base_url = config.base_url or ""
        storage = _build_cache_storage(config.name, config.cache)
        if storage is not None:
            self._client: httpx.AsyncClient = AsyncCacheClient(
                base_url=base_url,
                timeout=config.timeout_seconds,
                transport=transport,
                storage=storage,
            )
        else:
            self._client = httpx.AsyncClient(
                base_url=base_url, timeout=config.timeout_seconds, transport=transport
            )

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        url: URLTypes,
        **kwargs: Unpack[RequestOptions],
    ) -> httpx.Response:
        if self._limiter is None:
            response = await self._client.request(method, url, **kwargs)
        else:
            async with self._limiter:
                response = await self._client.request(method, url, **kwargs)
        log.debug(
            "[HTTP][%s][%s %s][%d]",
            self.config.name,
            method,
            response.request.url,
            response.status_code,
        )
        return response

    async def get(self, url: URLTypes, **kwargs: Unpack[RequestOptions]) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: URLTypes, **kwargs: Unpack[RequestOptions]) -> httpx.Response:
        return await self.request("POST", url, **kwargs)


def _build_cache_storage(name: str, config: CacheConfig | None) -> AsyncSqliteStorage | None:
    if config is None or not config.enabled:
        return None

    if config.backend == "sqlite":
        database_path = config.sqlite_path or str(get_http_cache_path())
    else:
        database_path = ":memory:"
    log.debug("[HTTP][%s] response cache at %s", name, database_path)
    return AsyncSqliteStorage(
        database_path=database_path,
        default_ttl=config.default_ttl_seconds,
        refresh_ttl_on_access=config.refresh_ttl_on_access,
    )


__all__ = ["RequestOptions", "ResilientClient", "build_retry", "shared_limiter"]
