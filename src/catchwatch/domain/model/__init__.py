"""Domain model for reference data, certificates and landings."""

from __future__ import annotations

from .document import CatchCertificate, CatchEntry, CcQueryRow, Product
from .enums import (
    AuditKind,
    DocumentStatus,
    LandingDataKind,
    LandingSource,
    LandingStatus,
    WeightKind,
    WindowState,
)
from .landing import Landing, LandingItem, LandingQuery, PlnLanding, RssLanding
from .reference import (
    ConversionFactor,
    ExporterBehaviour,
    ReferenceSnapshot,
    SpeciesAliases,
    SpeciesRiskToggle,
    SpeciesRow,
    VesselOfInterest,
    VesselRecord,
    Weighting,
    build_vessel_index,
)

__all__ = [
    "AuditKind",
    "CatchCertificate",
    "CatchEntry",
    "CcQueryRow",
    "ConversionFactor",
    "DocumentStatus",
    "ExporterBehaviour",
    "Landing",
    "LandingDataKind",
    "LandingItem",
    "LandingQuery",
    "LandingSource",
    "LandingStatus",
    "PlnLanding",
    "Product",
    "ReferenceSnapshot",
    "RssLanding",
    "SpeciesAliases",
    "SpeciesRiskToggle",
    "SpeciesRow",
    "VesselOfInterest",
    "VesselRecord",
    "WeightKind",
    "Weighting",
    "WindowState",
    "build_vessel_index",
]
