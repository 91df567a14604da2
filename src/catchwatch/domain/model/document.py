"""Catch certificate documents and their flattened query projection."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime  # noqa: TC003  # resolved at runtime by pydantic

from .enums import DocumentStatus, LandingSource, LandingStatus


@dataclass(slots=True)
class CatchEntry:
    """A landing declared against a product, identified by ``id``."""

    id: str
    pln: str
    date: str
    vessel: str | None = None
    weight: float = 0
    status: LandingStatus | None = None
    data_ever_expected: bool | None = None
    landing_data_expected_date: str | None = None
    landing_data_end_date: str | None = None
    is_legally_due: bool | None = None


@dataclass(slots=True)
class Product:
    species_code: str
    species: str | None = None
    state_code: str | None = None
    presentation_code: str | None = None
    commodity_code: str | None = None
    commodity_code_description: str | None = None
    caught_by: list[CatchEntry] = field(default_factory=list[CatchEntry])


@dataclass(slots=True)
class CatchCertificate:
    document_number: str
    created_at: datetime
    status: DocumentStatus = DocumentStatus.COMPLETE
    products: list[Product] = field(default_factory=list[Product])

    def catch_entries(self) -> list[CatchEntry]:
        return [entry for product in self.products for entry in product.caught_by]


@dataclass(slots=True, frozen=True)
class CcQueryRow:
    """One catch entry of one certificate, with its vessel resolved."""

    document_number: str
    created_at: datetime
    catch_entry_id: str
    pln: str
    rss_number: str | None
    date_landed: str
    species_code: str
    weight: float
    landing_status: LandingStatus | None
    data_ever_expected: bool | None = None
    landing_data_expected_date: date | None = None
    landing_data_end_date: date | None = None
    is_exceeding_14_day_limit: bool = False
    landing_source: LandingSource | None = None
    landed_weight: float | None = None
