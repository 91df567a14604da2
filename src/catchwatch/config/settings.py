"""Job settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import env_flag, env_int, env_str, require_env_vars
from .http_resilience import (
    ResilienceConfig,
    consolidation_resilience,
    landing_provider_resilience,
    reference_blob_resilience,
)

DEFAULT_LANDING_REPROCESSING_LIMIT = 50
DEFAULT_VESSEL_NOT_FOUND_NAME = "Vessel not found"
DEFAULT_VESSEL_NOT_FOUND_PLN = "N/A"


@dataclass(frozen=True, slots=True)
class VesselNotFoundSettings:
    enabled: bool = True
    name: str = DEFAULT_VESSEL_NOT_FOUND_NAME
    pln: str = DEFAULT_VESSEL_NOT_FOUND_PLN


@dataclass(frozen=True, slots=True)
class JobSettings:
    """Flags consumed by the landings-and-reporting job."""

    in_dev: bool = False
    run_landing_reprocessing: bool = False
    landing_reprocessing_limit: int = DEFAULT_LANDING_REPROCESSING_LIMIT
    run_resubmit_to_trade: bool = False
    vessel_not_found: VesselNotFoundSettings = VesselNotFoundSettings()


@dataclass(frozen=True, slots=True)
class ReferenceSourceSettings:
    """Remote object-store location of the reference datasets."""

    blob_url: str
    sas_token: str
    resilience: ResilienceConfig


@dataclass(frozen=True, slots=True)
class ProviderSettings:
    resilience: ResilienceConfig


@dataclass(frozen=True, slots=True)
class ConsolidationSettings:
    resilience: ResilienceConfig


def _environment_name() -> str:
    return os.getenv("CATCHWATCH_ENV") or os.getenv("NODE_ENV") or "production"


def get_job_settings() -> JobSettings:
    return JobSettings(
        in_dev=_environment_name() == "development",
        run_landing_reprocessing=env_flag("RUN_LANDING_REPROCESSING_JOB"),
        landing_reprocessing_limit=env_int(
            "LANDING_REPROCESSING_LIMIT", default=DEFAULT_LANDING_REPROCESSING_LIMIT
        ),
        run_resubmit_to_trade=env_flag("RUN_RESUBMIT_CC_TO_TRADE"),
        vessel_not_found=VesselNotFoundSettings(
            enabled=env_flag("VESSEL_NOT_FOUND_ENABLE", default=True),
            name=env_str("VESSEL_NOT_FOUND_NAME", default=DEFAULT_VESSEL_NOT_FOUND_NAME),
            pln=env_str("VESSEL_NOT_FOUND_PLN", default=DEFAULT_VESSEL_NOT_FOUND_PLN),
        ),
    )


def get_reference_source_settings() -> ReferenceSourceSettings:
    values = require_env_vars(("REFERENCE_BLOB_URL", "REFERENCE_BLOB_SAS"))
    blob_url = values["REFERENCE_BLOB_URL"].rstrip("/")
    return ReferenceSourceSettings(
        blob_url=blob_url,
        sas_token=values["REFERENCE_BLOB_SAS"].lstrip("?"),
        resilience=reference_blob_resilience(blob_url),
    )


def get_provider_settings() -> ProviderSettings:
    values = require_env_vars(("LANDING_PROVIDER_URL",))
    return ProviderSettings(
        resilience=landing_provider_resilience(values["LANDING_PROVIDER_URL"].rstrip("/")),
    )


def get_consolidation_settings() -> ConsolidationSettings:
    values = require_env_vars(("MMO_CC_LANDINGS_CONSOLIDATION_SVC_URL",))
    return ConsolidationSettings(
        resilience=consolidation_resilience(
            values["MMO_CC_LANDINGS_CONSOLIDATION_SVC_URL"].rstrip("/")
        ),
    )
