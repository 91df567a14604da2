"""Landing events and the queries that request them."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime  # noqa: TC003  # resolved at runtime by pydantic

from .enums import LandingSource  # noqa: TC001


@dataclass(slots=True, frozen=True)
class LandingQuery:
    """Minimal identity of a landing that may need fetching."""

    rss_number: str
    date_landed: str


@dataclass(slots=True, frozen=True)
class LandingItem:
    species: str
    weight: float
    factor: float
    state: str | None = None
    presentation: str | None = None


@dataclass(slots=True, frozen=True)
class Landing:
    rss_number: str
    date_time_landed: datetime
    source: LandingSource
    items: tuple[LandingItem, ...] = field(default_factory=tuple[LandingItem, ...])
    ignore: bool = False


@dataclass(slots=True, frozen=True)
class PlnLanding:
    """A catch entry of one certificate keyed by registration number."""

    pln: str
    date_landed: str
    created_at: datetime | None = None
    data_ever_expected: bool | None = None
    landing_data_expected_date: str | None = None
    landing_data_end_date: str | None = None
    is_legally_due: bool | None = None


@dataclass(slots=True, frozen=True)
class RssLanding:
    """The same entry once its vessel has been resolved to an RSS number."""

    rss_number: str
    date_landed: str
    created_at: datetime | None = None
    data_ever_expected: bool | None = None
    landing_data_expected_date: str | None = None
    landing_data_end_date: str | None = None
    is_legally_due: bool | None = None

    def as_query(self) -> LandingQuery:
        return LandingQuery(rss_number=self.rss_number, date_landed=self.date_landed)
