"""Ports for reading and writing certificates, landings and audit payloads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from catchwatch.domain.model import (
        AuditKind,
        CatchCertificate,
        Landing,
        LandingStatus,
        Product,
        RssLanding,
    )


@dataclass(slots=True, frozen=True)
class CertificatePatch:
    """Fields of a stored certificate to overwrite; ``None`` leaves a field as is."""

    products: list[Product] | None = None


@runtime_checkable
class CertificateRepository(Protocol):
    """Persistence contract for catch certificate documents."""

    def get_catch_certificates(
        self,
        *,
        statuses: Iterable[LandingStatus] | None = None,
        ids: Iterable[str] | None = None,
    ) -> list[CatchCertificate]:
        """Completed certificates with a catch entry matching every given filter."""
        ...

    def upsert_certificate(self, document_number: str, patch: CertificatePatch) -> None: ...

    def get_completed_without_commodity_description(self) -> list[CatchCertificate]:
        """Completed certificates with a product lacking a commodity description, newest first."""
        ...


@runtime_checkable
class LandingRepository(Protocol):
    """Persistence contract for landings fetched from providers."""

    def get_stored_landings(self, rss_number: str, date_landed: str) -> list[Landing]: ...

    def update_landings(self, landings: Sequence[Landing]) -> None: ...

    def clear_elogs(self, landings: Sequence[Landing]) -> None: ...

    def get_landings_multiple(self, queries: Sequence[RssLanding]) -> list[Landing]: ...


@runtime_checkable
class AuditRepository(Protocol):
    """Append-only store for raw provider payloads."""

    def persist_audit_payload(
        self,
        kind: AuditKind,
        rss_number: str,
        date_landed: str,
        payload: object,
    ) -> None: ...


@runtime_checkable
class ReprocessingStore(Protocol):
    """Backing store of landing identifiers waiting for a status reset."""

    def read(self) -> list[str]: ...

    def write(self, ids: Sequence[str]) -> None: ...


__all__ = [
    "AuditRepository",
    "CertificatePatch",
    "CertificateRepository",
    "LandingRepository",
    "ReprocessingStore",
]
