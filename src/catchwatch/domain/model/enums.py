"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class LandingStatus(StrEnum):
    PENDING = "PENDING_LANDING_DATA"
    HAS_LANDING_DATA = "HAS_LANDING_DATA"
    EXCEEDING_14_DAY_LIMIT = "EXCEEDING_14_DAY_LIMIT"
    DATA_NEVER_EXPECTED = "LANDING_DATA_NEVER_EXPECTED"
    COMPLETE = "COMPLETE"


class DocumentStatus(StrEnum):
    DRAFT = "DRAFT"
    COMPLETE = "COMPLETE"
    LOCKED = "LOCKED"
    VOID = "VOID"


class LandingSource(StrEnum):
    LANDING_DECLARATION = "LANDING_DECLARATION"
    CATCH_RECORDING = "CATCH_RECORDING"
    ELOG = "ELOG"


class LandingDataKind(StrEnum):
    """Data families served by the primary landing provider."""

    LANDING = "landing"
    ELOGS = "eLogs"
    SALES_NOTES = "salesNotes"


class AuditKind(StrEnum):
    RAW_LANDINGS = "rawLandings"
    SALES_NOTES = "salesNotes"


class WeightKind(StrEnum):
    EXPORTER = "exporterWeight"
    VESSEL = "vesselWeight"
    SPECIES = "speciesWeight"


class WindowState(StrEnum):
    """Where a pending record sits relative to its retrospective window."""

    NOT_YET_DUE = "not_yet_due"
    DUE = "due"
    EXCEEDED = "exceeded"
