"""MockTransport-backed client factories for the HTTP adapters."""

from __future__ import annotations

from collections.abc import Callable

import httpx

from catchwatch.adapters.http_resilience import ResilientClient
from catchwatch.config import ResilienceConfig

type Handler = Callable[[httpx.Request], httpx.Response]


def make_client_factory(handler: Handler) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
            base_url=resilience.base_url or "http://testserver",
            transport=httpx.MockTransport(async_handler),
        )
        return client

    return factory


def recording_handler(
    responses: dict[str, httpx.Response], requests: list[httpx.Request]
) -> Handler:
    """Answer by request path and remember every request; unknown paths get a 404."""

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return responses.get(request.url.path, httpx.Response(404))

    return handler


__all__ = ["make_client_factory", "recording_handler"]
