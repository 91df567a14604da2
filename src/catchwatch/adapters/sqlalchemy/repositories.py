"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from datetime import datetime
from logging import getLogger
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import and_, delete, insert, or_, select, update

from catchwatch.domain.model import (
    CatchCertificate,
    DocumentStatus,
    Landing,
    LandingSource,
)
from catchwatch.domain.reference_cache import as_day
from catchwatch.domain.time_windows import ensure_aware, utcnow

from .tables import audit_payload_table, catch_certificate_table, landing_table

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from sqlalchemy import CursorResult, Row
    from sqlalchemy.orm import Session, sessionmaker

    from catchwatch.domain.model import AuditKind, CatchEntry, LandingStatus, RssLanding
    from catchwatch.domain.ports import CertificatePatch

log = getLogger(__name__)


def _day_key(value: str | datetime) -> str:
    if isinstance(value, datetime):
        value = ensure_aware(value)
    return as_day(value).isoformat()


def _certificate_from_row(row: Row[Any]) -> CatchCertificate:
    return CatchCertificate(
        document_number=row.document_number,
        created_at=row.created_at,
        status=row.status,
        products=row.products,
    )


def _landing_from_row(row: Row[Any]) -> Landing:
    return Landing(
        rss_number=row.rss_number,
        date_time_landed=row.date_time_landed,
        source=row.source,
        items=row.items,
    )


def _entry_matches(
    entry: CatchEntry,
    statuses: frozenset[LandingStatus] | None,
    ids: frozenset[str] | None,
) -> bool:
    if statuses is not None and entry.status not in statuses:
        return False
    return ids is None or entry.id in ids


class SqlAlchemyCertificateRepository:
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def add(self, certificate: CatchCertificate) -> None:
        with self.session_factory.begin() as session:
            session.execute(
                insert(catch_certificate_table).values(
                    document_number=certificate.document_number,
                    status=certificate.status,
                    created_at=certificate.created_at,
                    products=certificate.products,
                )
            )

    def get_catch_certificates(
        self,
        *,
        statuses: Iterable[LandingStatus] | None = None,
        ids: Iterable[str] | None = None,
    ) -> list[CatchCertificate]:
        wanted_statuses = frozenset(statuses) if statuses is not None else None
        wanted_ids = frozenset(ids) if ids is not None else None
        return [
            certificate
            for certificate in self._completed()
            if any(
                _entry_matches(entry, wanted_statuses, wanted_ids)
                for entry in certificate.catch_entries()
            )
        ]

    def upsert_certificate(self, document_number: str, patch: CertificatePatch) -> None:
        if patch.products is None:
            return
        with self.session_factory.begin() as session:
            result = cast(
                "CursorResult[Any]",
                session.execute(
                    update(catch_certificate_table)
                    .where(catch_certificate_table.c.document_number == document_number)
                    .values(products=patch.products)
                ),
            )
        if result.rowcount == 0:
            log.warning("[CATCH-CERTIFICATES][UPSERT][NOT-FOUND][%s]", document_number)

    def get_completed_without_commodity_description(self) -> list[CatchCertificate]:
        return [
            certificate
            for certificate in self._completed(newest_first=True)
            if any(product.commodity_code_description is None for product in certificate.products)
        ]

    def _completed(self, *, newest_first: bool = False) -> list[CatchCertificate]:
        order = catch_certificate_table.c.created_at
        stmt = (
            select(catch_certificate_table)
            .where(catch_certificate_table.c.status == DocumentStatus.COMPLETE)
            .order_by(order.desc() if newest_first else order)
        )
        with self.session_factory() as session:
            return [_certificate_from_row(row) for row in session.execute(stmt)]


class SqlAlchemyLandingRepository:
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def get_stored_landings(self, rss_number: str, date_landed: str) -> list[Landing]:
        stmt = (
            select(landing_table)
            .where(landing_table.c.rss_number == rss_number)
            .where(landing_table.c.date_landed == _day_key(date_landed))
            .order_by(landing_table.c.id)
        )
        with self.session_factory() as session:
            return [_landing_from_row(row) for row in session.execute(stmt)]

    def update_landings(self, landings: Sequence[Landing]) -> None:
        """Store each landing not marked ``ignore``, replacing the same landing event."""

        with self.session_factory.begin() as session:
            for landing in landings:
                if landing.ignore:
                    continue
                landed_at = ensure_aware(landing.date_time_landed)
                session.execute(
                    delete(landing_table)
                    .where(landing_table.c.rss_number == landing.rss_number)
                    .where(landing_table.c.date_time_landed == landed_at)
                    .where(landing_table.c.source == landing.source)
                )
                session.execute(
                    insert(landing_table).values(
                        rss_number=landing.rss_number,
                        date_landed=landed_at.date().isoformat(),
                        date_time_landed=landed_at,
                        source=landing.source,
                        items=landing.items,
                    )
                )

    def clear_elogs(self, landings: Sequence[Landing]) -> None:
        """Drop stored eLogs for each vessel and day that now has a non-eLog landing."""

        superseded = {
            (landing.rss_number, _day_key(landing.date_time_landed))
            for landing in landings
            if landing.source is not LandingSource.ELOG
        }
        if not superseded:
            return
        with self.session_factory.begin() as session:
            for rss_number, day in superseded:
                result = cast(
                    "CursorResult[Any]",
                    session.execute(
                        delete(landing_table)
                        .where(landing_table.c.rss_number == rss_number)
                        .where(landing_table.c.date_landed == day)
                        .where(landing_table.c.source == LandingSource.ELOG)
                    ),
                )
                if result.rowcount:
                    log.info(
                        "[LANDINGS][CLEAR-ELOGS][%s-%s][%d]", rss_number, day, result.rowcount
                    )

    def get_landings_multiple(self, queries: Sequence[RssLanding]) -> list[Landing]:
        keys = {(query.rss_number, _day_key(query.date_landed)) for query in queries}
        if not keys:
            return []
        stmt = (
            select(landing_table)
            .where(
                or_(
                    *(
                        and_(
                            landing_table.c.rss_number == rss_number,
                            landing_table.c.date_landed == day,
                        )
                        for rss_number, day in keys
                    )
                )
            )
            .order_by(landing_table.c.id)
        )
        with self.session_factory() as session:
            return [_landing_from_row(row) for row in session.execute(stmt)]


class SqlAlchemyAuditRepository:
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def persist_audit_payload(
        self,
        kind: AuditKind,
        rss_number: str,
        date_landed: str,
        payload: object,
    ) -> None:
        with self.session_factory.begin() as session:
            session.execute(
                insert(audit_payload_table).values(
                    kind=kind,
                    rss_number=rss_number,
                    date_landed=_day_key(date_landed),
                    payload=payload,
                    created_at=utcnow(),
                )
            )

    def list_payloads(self, kind: AuditKind | None = None) -> list[tuple[AuditKind, object]]:
        stmt = select(audit_payload_table.c.kind, audit_payload_table.c.payload).order_by(
            audit_payload_table.c.id
        )
        if kind is not None:
            stmt = stmt.where(audit_payload_table.c.kind == kind)
        with self.session_factory() as session:
            return [(row.kind, row.payload) for row in session.execute(stmt)]


__all__ = [
    "SqlAlchemyAuditRepository",
    "SqlAlchemyCertificateRepository",
    "SqlAlchemyLandingRepository",
]
