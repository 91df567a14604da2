"""Pydantic models describing landing-provider payloads."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003  # resolved at runtime by pydantic

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class ProviderBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class CatchItemPayload(ProviderBaseModel):
    species: str
    weight: float
    state: str | None = None
    presentation: str | None = None

    _normalize_codes = field_validator("state", "presentation", mode="before")(_blank_to_none)


class LandingDeclarationPayload(ProviderBaseModel):
    """A landing declaration; one vessel may produce two around a clock change."""

    rss_number: str = Field(alias="rssNumber")
    date_time_landed: datetime = Field(alias="dateTimeLanded")
    items: list[CatchItemPayload] = Field(default_factory=list[CatchItemPayload])


class LandingActivityPayload(ProviderBaseModel):
    date_time_landed: datetime = Field(alias="dateTimeLanded")
    catches: list[CatchItemPayload] = Field(default_factory=list[CatchItemPayload])


class ELogPayload(ProviderBaseModel):
    """An electronic logbook trip with one activity per landing."""

    rss_number: str = Field(alias="rssNumber")
    activities: list[LandingActivityPayload] = Field(default_factory=list[LandingActivityPayload])


class CatchActivityPayload(ProviderBaseModel):
    """Catch recordings of a vessel under ten metres."""

    activities: list[LandingActivityPayload] = Field(default_factory=list[LandingActivityPayload])
