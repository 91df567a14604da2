"""Populate the reference cache from a local or remote source."""

from __future__ import annotations

from datetime import datetime
from logging import getLogger
from typing import TYPE_CHECKING

from catchwatch.config import VesselNotFoundSettings

from .model import VesselRecord

if TYPE_CHECKING:
    from collections.abc import Callable

    from .ports import ReferenceDataSource
    from .reference_cache import ReferenceCache

log = getLogger(__name__)

VESSEL_NOT_FOUND_FLAG = "GBR"
VESSEL_NOT_FOUND_RSS = "N/A"
VESSEL_NOT_FOUND_PORT = "N/A"
VESSEL_NOT_FOUND_LICENCE_NUMBER = "27619"
VESSEL_NOT_FOUND_HOLDER = "licenced holder not found"
VESSEL_NOT_FOUND_VALID_FROM = datetime(2016, 7, 1, 0, 1)
VESSEL_NOT_FOUND_VALID_TO = datetime(2300, 12, 31, 0, 1)

# datasets whose remote load failure aborts the whole load
CRITICAL_REMOTE_DATASETS = frozenset(
    {"vessels", "species", "species_aliases", "conversion_factors", "exporter_behaviour"}
)


class ReferenceDataLoadError(RuntimeError):
    """A reference dataset could not be loaded from the remote store."""

    def __init__(self, dataset: str, cause: BaseException) -> None:
        super().__init__(f"[BLOB-STORAGE-LOAD-ERROR][{dataset.upper()}] {cause}")
        self.dataset = dataset
        self.cause = cause


def vessel_not_found_placeholder(settings: VesselNotFoundSettings) -> VesselRecord:
    return VesselRecord(
        registration_number=settings.pln,
        fishing_vessel_name=settings.name,
        flag=VESSEL_NOT_FOUND_FLAG,
        rss_number=VESSEL_NOT_FOUND_RSS,
        vessel_length=0,
        licence_number=VESSEL_NOT_FOUND_LICENCE_NUMBER,
        licence_valid_from=VESSEL_NOT_FOUND_VALID_FROM,
        licence_valid_to=VESSEL_NOT_FOUND_VALID_TO,
        home_port=VESSEL_NOT_FOUND_PORT,
        admin_port=VESSEL_NOT_FOUND_PORT,
        licence_holder_name=VESSEL_NOT_FOUND_HOLDER,
        vessel_not_found=True,
    )


def add_vessel_not_found(
    vessels: list[VesselRecord], settings: VesselNotFoundSettings
) -> list[VesselRecord]:
    if not settings.enabled:
        return vessels
    return [*vessels, vessel_not_found_placeholder(settings)]


class CacheLoader:
    """Load each reference dataset in isolation and hand it to the cache.

    A local source degrades per dataset. A remote source re-raises failures of
    the datasets listed in ``CRITICAL_REMOTE_DATASETS`` as
    :class:`ReferenceDataLoadError`; the risking datasets always degrade.
    """

    def __init__(
        self,
        cache: ReferenceCache,
        source: ReferenceDataSource,
        *,
        vessel_not_found: VesselNotFoundSettings | None = None,
    ) -> None:
        self.cache = cache
        self.source = source
        self.vessel_not_found = vessel_not_found or VesselNotFoundSettings()

    def load_all(self) -> None:
        log.info("[LOAD-REFERENCE-DATA][START][remote=%s]", self.source.remote)
        self.load_vessels()
        self.load_species_and_factors()
        self.refresh_risking_data()
        self.load_exporter_behaviour()
        log.info(
            "[LOAD-REFERENCE-DATA][COMPLETE][vessels=%d][species=%d][factors=%d]",
            len(self.cache.vessels),
            len(self.cache.species),
            len(self.cache.conversion_factors),
        )

    def load_vessels(self) -> None:
        vessels = self._load("vessels", self.source.load_vessels)
        if vessels:
            self.cache.update_vessels(add_vessel_not_found(vessels, self.vessel_not_found))

    def load_species_and_factors(self) -> None:
        self.cache.update_species(self._load("species", self.source.load_species))
        self.cache.update_species_aliases(
            self._load("species_aliases", self.source.load_species_aliases)
        )
        self.cache.update_conversion_factors(
            self._load("conversion_factors", self.source.load_conversion_factors)
        )

    def refresh_risking_data(self) -> None:
        self.cache.update_vessels_of_interest(
            self._load("vessels_of_interest", self.source.load_vessels_of_interest)
        )
        weighting = self._load("weighting", self.source.load_weighting)
        self.cache.update_weighting(weighting)
        toggle = self._load("species_toggle", self.source.load_species_toggle)
        self.cache.update_species_toggle(toggle)
        log.info(
            "[LOAD-RISKING-DATA][vessels-of-interest=%d][threshold=%s][species-risk=%s]",
            len(self.cache.vessels_of_interest),
            self.cache.weighting.threshold,
            self.cache.species_risk_enabled,
        )

    def load_exporter_behaviour(self) -> None:
        self.cache.update_exporter_behaviour(
            self._load("exporter_behaviour", self.source.load_exporter_behaviour)
        )

    def _load[T](self, dataset: str, loader: Callable[[], T]) -> T | None:
        try:
            value = loader()
        except Exception as exc:
            if self.source.remote and dataset in CRITICAL_REMOTE_DATASETS:
                log.exception("[LOAD-REFERENCE-DATA][%s][ERROR]", dataset.upper())
                raise ReferenceDataLoadError(dataset, exc) from exc
            log.error("[LOAD-REFERENCE-DATA][%s][SKIPPED][%s]", dataset.upper(), exc)
            return None
        log.info("[LOAD-REFERENCE-DATA][%s][LOADED]", dataset.upper())
        return value


__all__ = [
    "CRITICAL_REMOTE_DATASETS",
    "CacheLoader",
    "ReferenceDataLoadError",
    "add_vessel_not_found",
    "vessel_not_found_placeholder",
]
