"""Application configuration helpers."""

from __future__ import annotations

from .env import env_flag, env_int, env_str, require_env_var, require_env_vars
from .errors import (
    ConfigurationError,
    InvalidConfigurationValueError,
    MissingConfigurationError,
)
from .http_resilience import (
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
    consolidation_resilience,
    landing_provider_resilience,
    reference_blob_resilience,
)
from .settings import (
    ConsolidationSettings,
    JobSettings,
    ProviderSettings,
    ReferenceSourceSettings,
    VesselNotFoundSettings,
    get_consolidation_settings,
    get_job_settings,
    get_provider_settings,
    get_reference_source_settings,
)
from .storage import (
    DatabaseConfig,
    ReferenceFilePaths,
    StorageConfig,
    get_database_config,
    get_storage_config,
)

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "ConsolidationSettings",
    "DatabaseConfig",
    "InvalidConfigurationValueError",
    "JobSettings",
    "MissingConfigurationError",
    "ProviderSettings",
    "RateLimit",
    "ReferenceFilePaths",
    "ReferenceSourceSettings",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "VesselNotFoundSettings",
    "consolidation_resilience",
    "env_flag",
    "env_int",
    "env_str",
    "get_consolidation_settings",
    "get_database_config",
    "get_job_settings",
    "get_provider_settings",
    "get_reference_source_settings",
    "get_storage_config",
    "landing_provider_resilience",
    "reference_blob_resilience",
    "require_env_var",
    "require_env_vars",
]
