"""SQLAlchemy adapter package for catchwatch."""

from __future__ import annotations

from .lifecycle import (
    StartupError,
    ensure_started,
    session_factory,
    shutdown,
    startup,
)
from .repositories import (
    SqlAlchemyAuditRepository,
    SqlAlchemyCertificateRepository,
    SqlAlchemyLandingRepository,
)
from .tables import create_all_tables, metadata_registry

__all__ = [
    "SqlAlchemyAuditRepository",
    "SqlAlchemyCertificateRepository",
    "SqlAlchemyLandingRepository",
    "StartupError",
    "create_all_tables",
    "ensure_started",
    "metadata_registry",
    "session_factory",
    "shutdown",
    "startup",
]
