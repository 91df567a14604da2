"""SQLAlchemy Core tables for certificates, landings and audit payloads."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from pydantic import TypeAdapter
from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Dialect,
    Enum,
    Index,
    Integer,
    String,
    Table,
    TypeDecorator,
    orm,
)

from catchwatch.domain.model import (
    AuditKind,
    DocumentStatus,
    LandingItem,
    LandingSource,
    Product,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


_products_adapter = TypeAdapter(list[Product])
_items_adapter = TypeAdapter(tuple[LandingItem, ...])


class ProductListType(TypeDecorator[list[Product]]):
    """Certificate products stored as one JSON document."""

    impl = JSON
    cache_ok = True

    def process_bind_param(self, value: list[Product] | None, dialect: Dialect) -> Any:
        _ = dialect
        if value is None:
            return None
        return _products_adapter.dump_python(value, mode="json")

    def process_result_value(self, value: Any, dialect: Dialect) -> list[Product]:
        _ = dialect
        if value is None:
            return []
        return _products_adapter.validate_python(value)


class LandingItemsType(TypeDecorator[tuple[LandingItem, ...]]):
    impl = JSON
    cache_ok = True

    def process_bind_param(self, value: tuple[LandingItem, ...] | None, dialect: Dialect) -> Any:
        _ = dialect
        if value is None:
            return []
        return _items_adapter.dump_python(value, mode="json")

    def process_result_value(self, value: Any, dialect: Dialect) -> tuple[LandingItem, ...]:
        _ = dialect
        if value is None:
            return ()
        return _items_adapter.validate_python(value)


metadata_registry = orm.registry()
metadata_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

catch_certificate_table = Table(
    "catch_certificate",
    metadata_registry.metadata,
    Column("document_number", String, primary_key=True),
    Column("status", Enum(DocumentStatus, native_enum=False), nullable=False),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("products", ProductListType(), nullable=False),
)

landing_table = Table(
    "landing",
    metadata_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("rss_number", String, nullable=False),
    # calendar day of date_time_landed, kept for lookups by (rss_number, day)
    Column("date_landed", String(10), nullable=False),
    Column("date_time_landed", UTCDateTime(), nullable=False),
    Column("source", Enum(LandingSource, native_enum=False), nullable=False),
    Column("items", LandingItemsType(), nullable=False),
    Index(None, "rss_number", "date_landed"),
)

audit_payload_table = Table(
    "audit_payload",
    metadata_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("kind", Enum(AuditKind, native_enum=False), nullable=False),
    Column("rss_number", String, nullable=False),
    Column("date_landed", String(10), nullable=False),
    Column("payload", JSON, nullable=False),
    Column("created_at", UTCDateTime(), nullable=False),
)


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the metadata."""

    log.info("Creating all tables")
    metadata_registry.metadata.create_all(engine)


__all__ = [
    "UTCDateTime",
    "audit_payload_table",
    "catch_certificate_table",
    "create_all_tables",
    "landing_table",
    "metadata_registry",
]
