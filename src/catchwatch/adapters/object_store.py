"""Reference datasets read from blob containers of the shared object store."""

from __future__ import annotations

import asyncio
import json
from logging import getLogger
from typing import TYPE_CHECKING, Any, cast

import httpx

from catchwatch.adapters.http_resilience import ResilientClient

from .reference_parsing import (
    parse_conversion_factors,
    parse_exporter_behaviour,
    parse_species,
    parse_species_aliases,
    parse_species_toggle,
    parse_vessels,
    parse_vessels_of_interest,
    parse_weighting,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from catchwatch.config import ReferenceSourceSettings, ResilienceConfig
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

log = getLogger(__name__)

CATCH_CERT_DATA_CONTAINER = "catchcertdata"
NOTIFICATIONS_BLOB = "Notification.json"
VESSEL_DATA_VIEW_NAME = "VesselAndLicenceData"
SPECIES_CONTAINER = "commoditycodedata"
SPECIES_BLOB = "commodity_code.txt"
SPECIES_ALIASES_CONTAINER = "speciesmismatch"
SPECIES_ALIASES_BLOB = "speciesmismatch.json"
CONVERSION_FACTORS_CONTAINER = "conversionfactors"
CONVERSION_FACTORS_BLOB = "conversionfactors.csv"
EXPORTER_BEHAVIOUR_CONTAINER = "exporterbehaviour"
EXPORTER_BEHAVIOUR_BLOB = "exporter_behaviour.csv"
RISKING_CONTAINER = "riskingdata"
WEIGHTING_BLOB = "weightingRisk.csv"
VESSELS_OF_INTEREST_BLOB = "vesselsOfInterest.csv"
SPECIES_TOGGLE_BLOB = "speciesToggle.json"


class ObjectStoreError(RuntimeError):
    """Raised when a blob cannot be read from the object store."""

    def __init__(self, container: str, blob: str, message: str) -> None:
        super().__init__(f"Cannot read remote file {blob} from container {container}: {message}")
        self.container = container
        self.blob = blob


class ObjectStoreReferenceSource:
    """Production source; every failure surfaces as :class:`ObjectStoreError`."""

    remote = True

    def __init__(
        self,
        *,
        settings: ReferenceSourceSettings,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._settings = settings
        self._resilience = settings.resilience
        self._client_factory = client_factory or ResilientClient

    def read_blob(self, container: str, blob: str) -> str:
        return asyncio.run(self._read_blob_async(container, blob))

    def load_vessels(self) -> list[VesselRecord]:
        return asyncio.run(self._load_vessels_async())

    def load_species(self) -> list[SpeciesRow]:
        return parse_species(self.read_blob(SPECIES_CONTAINER, SPECIES_BLOB))

    def load_species_aliases(self) -> SpeciesAliases:
        return parse_species_aliases(
            self.read_blob(SPECIES_ALIASES_CONTAINER, SPECIES_ALIASES_BLOB)
        )

    def load_conversion_factors(self) -> list[ConversionFactor]:
        return parse_conversion_factors(
            self.read_blob(CONVERSION_FACTORS_CONTAINER, CONVERSION_FACTORS_BLOB)
        )

    def load_vessels_of_interest(self) -> list[VesselOfInterest]:
        return parse_vessels_of_interest(
            self.read_blob(RISKING_CONTAINER, VESSELS_OF_INTEREST_BLOB)
        )

    def load_weighting(self) -> Weighting:
        return parse_weighting(self.read_blob(RISKING_CONTAINER, WEIGHTING_BLOB))

    def load_species_toggle(self) -> SpeciesRiskToggle:
        return parse_species_toggle(self.read_blob(RISKING_CONTAINER, SPECIES_TOGGLE_BLOB))

    def load_exporter_behaviour(self) -> list[ExporterBehaviour]:
        return parse_exporter_behaviour(
            self.read_blob(EXPORTER_BEHAVIOUR_CONTAINER, EXPORTER_BEHAVIOUR_BLOB)
        )

    async def _load_vessels_async(self) -> list[VesselRecord]:
        log.info("[BLOB-STORAGE][READING-NOTIFICATION-FILE]")
        notifications = json.loads(
            await self._read_blob_async(CATCH_CERT_DATA_CONTAINER, NOTIFICATIONS_BLOB)
        )
        if not isinstance(notifications, list):
            raise ObjectStoreError(
                CATCH_CERT_DATA_CONTAINER, NOTIFICATIONS_BLOB, "expected a list of views"
            )
        for notification in cast(list[Any], notifications):
            if not isinstance(notification, dict):
                continue
            entry = cast(dict[str, Any], notification)
            if entry.get("viewName") == VESSEL_DATA_VIEW_NAME:
                blob = str(entry["blobName"])
                log.info("[BLOB-STORAGE][READING-VESSEL-DATA][%s]", blob)
                text = await self._read_blob_async(CATCH_CERT_DATA_CONTAINER, blob)
                return parse_vessels(text)
        raise ObjectStoreError(
            CATCH_CERT_DATA_CONTAINER,
            NOTIFICATIONS_BLOB,
            f"cannot find vessel data in notification json, looking for {VESSEL_DATA_VIEW_NAME}",
        )

    async def _read_blob_async(self, container: str, blob: str) -> str:
        path = f"/{container}/{blob}"
        params = httpx.QueryParams(self._settings.sas_token)
        try:
            async with self._client_factory(self._resilience) as client:
                response = await client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise ObjectStoreError(container, blob, str(exc)) from exc
        return response.text


__all__ = ["ObjectStoreError", "ObjectStoreReferenceSource"]
