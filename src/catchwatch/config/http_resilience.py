"""Transport policies for the landing provider, consolidation service and blob store."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

import httpx

LANDING_PROVIDER_TIMEOUT_SECONDS = 60.0
CONSOLIDATION_TIMEOUT_SECONDS = 30.0
REFERENCE_BLOB_TIMEOUT_SECONDS = 120.0

# the provider throttles per client; one vessel-date costs up to three calls
LANDING_PROVIDER_CALLS_PER_SECOND = 5


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    total: int = 3
    backoff_factor: float = 0.5
    max_backoff_wait: float = 30.0
    respect_retry_after_header: bool = True
    allowed_methods: frozenset[str] = field(
        default_factory=lambda: frozenset({"GET", "HEAD", "OPTIONS"})
    )
    status_forcelist: frozenset[int] = field(
        default_factory=lambda: frozenset({429, 500, 502, 503, 504})
    )
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )
    backoff_jitter: float = 1.0


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class CacheConfig:
    """Response cache; reference blobs are served with validators and rarely change."""

    enabled: bool = True
    backend: Literal["sqlite", "memory"] = "memory"
    sqlite_path: str | None = None
    default_ttl_seconds: float | None = None
    refresh_ttl_on_access: bool = True


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    cache: CacheConfig | None = None


def landing_provider_resilience(base_url: str) -> ResilienceConfig:
    return ResilienceConfig(
        name="landing-provider",
        base_url=base_url,
        timeout_seconds=LANDING_PROVIDER_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=LANDING_PROVIDER_CALLS_PER_SECOND, per_seconds=1.0),
        retry=RetryPolicy(total=2),
    )


def consolidation_resilience(base_url: str) -> ResilienceConfig:
    # the landings update is a POST and must not be replayed
    return ResilienceConfig(
        name="landings-consolidation",
        base_url=base_url,
        timeout_seconds=CONSOLIDATION_TIMEOUT_SECONDS,
    )


def reference_blob_resilience(base_url: str) -> ResilienceConfig:
    return ResilienceConfig(
        name="reference-blobs",
        base_url=base_url,
        timeout_seconds=REFERENCE_BLOB_TIMEOUT_SECONDS,
        cache=CacheConfig(backend="sqlite"),
    )
