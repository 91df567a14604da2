"""Parse the reference dataset formats shared by the file and object-store sources.

Vessels, species aliases and the species toggle are JSON; species rows are a
tab-delimited table; conversion factors, weighting, vessels of interest and
exporter behaviour are comma-separated with a header row.
"""

from __future__ import annotations

import csv
import io
import json
from datetime import datetime  # noqa: TC003  # resolved at runtime by pydantic
from typing import Any, cast

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from catchwatch.domain.model import (
    ConversionFactor,
    ExporterBehaviour,
    SpeciesAliases,
    SpeciesRiskToggle,
    SpeciesRow,
    VesselOfInterest,
    VesselRecord,
    Weighting,
)


def to_float(value: object) -> float | None:
    """Numeric strings become floats; anything non-numeric becomes ``None``."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _read_table(text: str, *, delimiter: str = ",") -> list[dict[str, str]]:
    reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")), delimiter=delimiter)
    return [
        {key.strip(): (value or "").strip() for key, value in row.items() if key}
        for row in reader
    ]


class VesselPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    registration_number: str = Field(alias="registrationNumber")
    rss_number: str | None = Field(default=None, alias="rssNumber")
    fishing_vessel_name: str | None = Field(default=None, alias="fishingVesselName")
    cfr: str | None = None
    ircs: str | None = None
    imo: str | None = None
    flag: str | None = None
    home_port: str | None = Field(default=None, alias="homePort")
    admin_port: str | None = Field(default=None, alias="adminPort")
    licence_number: str | None = Field(default=None, alias="fishingLicenceNumber")
    licence_valid_from: datetime | None = Field(default=None, alias="fishingLicenceValidFrom")
    licence_valid_to: datetime | None = Field(default=None, alias="fishingLicenceValidTo")
    vessel_length: float | None = Field(default=None, alias="vesselLength")
    licence_holder_name: str | None = Field(default=None, alias="licenceHolderName")

    _normalize_length = field_validator("vessel_length", mode="before")(to_float)
    _normalize_blanks = field_validator(
        "licence_valid_from", "licence_valid_to", "imo", "ircs", mode="before"
    )(_blank_to_none)

    @field_validator("licence_number", "imo", mode="before")
    @classmethod
    def _stringify(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value

    def to_record(self) -> VesselRecord:
        return VesselRecord(**self.model_dump())


class SpeciesAliasPayload(BaseModel):
    species_code: str = Field(alias="speciesCode")
    species_alias: list[str] = Field(alias="speciesAlias")

    @field_validator("species_alias", mode="before")
    @classmethod
    def _as_list(cls, value: object) -> object:
        return [value] if isinstance(value, str) else value


_vessels_adapter = TypeAdapter(list[VesselPayload])
_aliases_adapter = TypeAdapter(list[SpeciesAliasPayload])


def parse_vessels(text: str) -> list[VesselRecord]:
    return [payload.to_record() for payload in _vessels_adapter.validate_json(text)]


def parse_species(text: str) -> list[SpeciesRow]:
    return cast(list[SpeciesRow], _read_table(text, delimiter="\t"))


def parse_species_aliases(text: str) -> SpeciesAliases:
    return {
        alias.species_code: alias.species_alias for alias in _aliases_adapter.validate_json(text)
    }


def parse_conversion_factors(text: str) -> list[ConversionFactor]:
    return [
        ConversionFactor(
            species=row["species"],
            state=row.get("state") or None,
            presentation=row.get("presentation") or None,
            to_live_weight_factor=to_float(row.get("toLiveWeightFactor")),
            quota_status=row.get("quotaStatus") or None,
            risk_score=to_float(row.get("riskScore")),
        )
        for row in _read_table(text)
        if row.get("species")
    ]


def parse_vessels_of_interest(text: str) -> list[VesselOfInterest]:
    return [
        VesselOfInterest(registration_number=row["registrationNumber"])
        for row in _read_table(text)
        if row.get("registrationNumber")
    ]


def parse_weighting(text: str) -> Weighting:
    rows = _read_table(text)
    if not rows:
        raise ValueError("Weighting risk table has no rows")
    row = rows[0]
    return Weighting(
        exporter_weight=to_float(row.get("exporterWeight")) or 0,
        vessel_weight=to_float(row.get("vesselWeight")) or 0,
        species_weight=to_float(row.get("speciesWeight")) or 0,
        threshold=to_float(row.get("threshold")) or 0,
    )


def parse_species_toggle(text: str) -> SpeciesRiskToggle:
    payload = json.loads(text)
    if isinstance(payload, list):
        payload = cast(list[Any], payload)[0] if payload else {}
    if not isinstance(payload, dict):
        raise ValueError("Species toggle must be a JSON object")
    return SpeciesRiskToggle(enabled=bool(cast(dict[str, Any], payload).get("enabled")))


def parse_exporter_behaviour(text: str) -> list[ExporterBehaviour]:
    behaviour: list[ExporterBehaviour] = []
    for row in _read_table(text):
        score = to_float(row.get("score"))
        if score is None:
            continue
        behaviour.append(
            ExporterBehaviour(
                score=score,
                account_id=row.get("accountId") or None,
                contact_id=row.get("contactId") or None,
                name=row.get("name") or None,
            )
        )
    return behaviour


__all__ = [
    "VesselPayload",
    "parse_conversion_factors",
    "parse_exporter_behaviour",
    "parse_species",
    "parse_species_aliases",
    "parse_species_toggle",
    "parse_vessels",
    "parse_vessels_of_interest",
    "parse_weighting",
    "to_float",
]
