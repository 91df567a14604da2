"""Reference datasets held by the in-memory cache."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from .enums import WeightKind

type SpeciesRow = dict[str, Any]
type SpeciesAliases = dict[str, list[str]]


@dataclass(slots=True, frozen=True)
class VesselRecord:
    """One licence period of a fishing vessel."""

    registration_number: str
    rss_number: str | None = None
    fishing_vessel_name: str | None = None
    cfr: str | None = None
    ircs: str | None = None
    imo: str | None = None
    flag: str | None = None
    home_port: str | None = None
    admin_port: str | None = None
    licence_number: str | None = None
    licence_valid_from: datetime | None = None
    licence_valid_to: datetime | None = None
    vessel_length: float | None = None
    licence_holder_name: str | None = None
    vessel_not_found: bool = False

    def is_licensed_on(self, day: date) -> bool:
        """Both licence bounds are inclusive at day granularity."""

        if self.licence_valid_from is None or self.licence_valid_to is None:
            return False
        return self.licence_valid_from.date() <= day <= self.licence_valid_to.date()


@dataclass(slots=True, frozen=True)
class ConversionFactor:
    species: str
    state: str | None = None
    presentation: str | None = None
    to_live_weight_factor: float | None = None
    quota_status: str | None = None
    risk_score: float | None = None


@dataclass(slots=True, frozen=True)
class Weighting:
    exporter_weight: float = 0
    vessel_weight: float = 0
    species_weight: float = 0
    threshold: float = 0

    def weight_for(self, kind: WeightKind) -> float:
        match kind:
            case WeightKind.EXPORTER:
                return self.exporter_weight
            case WeightKind.VESSEL:
                return self.vessel_weight
            case WeightKind.SPECIES:
                return self.species_weight


@dataclass(slots=True, frozen=True)
class VesselOfInterest:
    registration_number: str


@dataclass(slots=True, frozen=True)
class SpeciesRiskToggle:
    enabled: bool


@dataclass(slots=True, frozen=True)
class ExporterBehaviour:
    score: float
    account_id: str | None = None
    contact_id: str | None = None
    name: str | None = None


def build_vessel_index(vessels: list[VesselRecord]) -> dict[str, list[VesselRecord]]:
    """Group vessels by exact registration number, keeping snapshot order."""

    index: dict[str, list[VesselRecord]] = {}
    for vessel in vessels:
        index.setdefault(vessel.registration_number, []).append(vessel)
    return index


@dataclass(slots=True)
class ReferenceSnapshot:
    """Everything the cache serves; each field is replaced wholesale on refresh."""

    vessels: list[VesselRecord] = field(default_factory=list[VesselRecord])
    vessel_index: dict[str, list[VesselRecord]] = field(
        default_factory=dict[str, list[VesselRecord]]
    )
    species: list[SpeciesRow] = field(default_factory=list[SpeciesRow])
    species_aliases: SpeciesAliases = field(default_factory=dict[str, list[str]])
    conversion_factors: list[ConversionFactor] = field(default_factory=list[ConversionFactor])
    weighting: Weighting = field(default_factory=Weighting)
    vessels_of_interest: list[VesselOfInterest] = field(default_factory=list[VesselOfInterest])
    species_risk_enabled: bool = False
    exporter_behaviour: list[ExporterBehaviour] = field(default_factory=list[ExporterBehaviour])
