"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import ConsolidationService, LandingDataProvider, LandingTranslator, RawPayload
from .persistence import (
    AuditRepository,
    CertificatePatch,
    CertificateRepository,
    LandingRepository,
    ReprocessingStore,
)
from .reference import ReferenceDataSource
from .reporting import ReportingService

__all__ = [
    "AuditRepository",
    "CertificatePatch",
    "CertificateRepository",
    "ConsolidationService",
    "LandingDataProvider",
    "LandingRepository",
    "LandingTranslator",
    "RawPayload",
    "ReferenceDataSource",
    "ReportingService",
    "ReprocessingStore",
]
