"""Pydantic models for the landings consolidation service."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003  # resolved at runtime by pydantic

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from catchwatch.domain.model import Landing, LandingQuery, LandingSource


class ConsolidationModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, alias_generator=to_camel)


class RefreshLandingPayload(ConsolidationModel):
    rss_number: str
    date_landed: str

    def to_query(self) -> LandingQuery:
        return LandingQuery(rss_number=self.rss_number, date_landed=self.date_landed)


class ConsolidatedItemPayload(ConsolidationModel):
    species: str
    weight: float
    factor: float
    state: str | None = None
    presentation: str | None = None


class ConsolidatedLandingPayload(ConsolidationModel):
    rss_number: str
    date_time_landed: datetime
    source: LandingSource
    items: list[ConsolidatedItemPayload] = Field(default_factory=list[ConsolidatedItemPayload])

    @classmethod
    def from_landing(cls, landing: Landing) -> ConsolidatedLandingPayload:
        return cls(
            rss_number=landing.rss_number,
            date_time_landed=landing.date_time_landed,
            source=landing.source,
            items=[
                ConsolidatedItemPayload(
                    species=item.species,
                    weight=item.weight,
                    factor=item.factor,
                    state=item.state,
                    presentation=item.presentation,
                )
                for item in landing.items
            ],
        )
