"""Application orchestration entry points."""

from __future__ import annotations

from dataclasses import dataclass
from functools import cache
from logging import getLogger
from typing import TYPE_CHECKING

from catchwatch.adapters.consolidation import ConsolidationClient
from catchwatch.adapters.landing_provider import LandingProviderClient, ProviderTranslator
from catchwatch.adapters.object_store import ObjectStoreReferenceSource
from catchwatch.adapters.reference_files import FileReprocessingStore, LocalReferenceSource
from catchwatch.adapters.reporting import LoggingReportingService
from catchwatch.adapters.sqlalchemy import (
    SqlAlchemyAuditRepository,
    SqlAlchemyCertificateRepository,
    SqlAlchemyLandingRepository,
    ensure_started,
)
from catchwatch.common import BackgroundTasks
from catchwatch.config import (
    get_consolidation_settings,
    get_job_settings,
    get_provider_settings,
    get_reference_source_settings,
    get_storage_config,
)
from catchwatch.domain.cache_loading import CacheLoader
from catchwatch.domain.landings import LandingFetchPipeline, LandingsUpdater, ReprocessingQueue
from catchwatch.domain.reference_cache import ReferenceCache

if TYPE_CHECKING:
    from datetime import datetime

    from catchwatch.config import JobSettings
    from catchwatch.domain.landings import ReprocessingResult
    from catchwatch.domain.model import CcQueryRow, Landing, LandingQuery
    from catchwatch.domain.ports import (
        AuditRepository,
        CertificateRepository,
        ConsolidationService,
        LandingDataProvider,
        LandingRepository,
        ReferenceDataSource,
        ReportingService,
        ReprocessingStore,
    )

log = getLogger(__name__)


@dataclass(slots=True)
class Services:
    """Everything one worker process needs, sharing a single reference cache."""

    settings: JobSettings
    cache: ReferenceCache
    loader: CacheLoader
    updater: LandingsUpdater
    reprocessing: ReprocessingQueue
    background: BackgroundTasks


def build_services(
    *,
    settings: JobSettings | None = None,
    reference_cache: ReferenceCache | None = None,
    source: ReferenceDataSource | None = None,
    provider: LandingDataProvider | None = None,
    consolidation: ConsolidationService | None = None,
    reporting: ReportingService | None = None,
    certificates: CertificateRepository | None = None,
    landings: LandingRepository | None = None,
    audit: AuditRepository | None = None,
    reprocess_store: ReprocessingStore | None = None,
    background: BackgroundTasks | None = None,
) -> Services:
    """Wire the domain services to adapters; any collaborator may be supplied instead."""

    job_settings = settings or get_job_settings()
    shared_cache = reference_cache or ReferenceCache()
    storage = get_storage_config()

    if certificates is None or landings is None or audit is None:
        factory = ensure_started()
        certificates = certificates or SqlAlchemyCertificateRepository(factory)
        landings = landings or SqlAlchemyLandingRepository(factory)
        audit = audit or SqlAlchemyAuditRepository(factory)

    if source is None:
        if job_settings.in_dev:
            source = LocalReferenceSource(storage.reference_files())
        else:
            source = ObjectStoreReferenceSource(settings=get_reference_source_settings())

    tasks = background or BackgroundTasks()
    pipeline = LandingFetchPipeline(
        cache=shared_cache,
        provider=provider or LandingProviderClient(settings=get_provider_settings()),
        translator=ProviderTranslator(shared_cache.get_to_live_weight_factor),
        landings=landings,
        audit=audit,
        background=tasks,
    )
    reprocessing = ReprocessingQueue(
        store=reprocess_store or FileReprocessingStore(storage.reprocess_queue_path()),
        certificates=certificates,
        enabled=job_settings.run_landing_reprocessing,
        limit=job_settings.landing_reprocessing_limit,
    )
    updater = LandingsUpdater(
        cache=shared_cache,
        certificates=certificates,
        landings=landings,
        pipeline=pipeline,
        consolidation=consolidation or ConsolidationClient(settings=get_consolidation_settings()),
        reporting=reporting or LoggingReportingService(),
        reprocessing=reprocessing,
        background=tasks,
        run_resubmit_to_trade=job_settings.run_resubmit_to_trade,
    )
    return Services(
        settings=job_settings,
        cache=shared_cache,
        loader=CacheLoader(shared_cache, source, vessel_not_found=job_settings.vessel_not_found),
        updater=updater,
        reprocessing=reprocessing,
        background=tasks,
    )


@cache
def get_services() -> Services:
    """Process-wide services, built from the environment on first use."""

    return build_services()


def _resolve(services: Services | None) -> Services:
    return services or get_services()


def load_reference_cache(services: Services | None = None) -> ReferenceCache:
    """Full reload of every reference dataset from the configured source."""

    resolved = _resolve(services)
    resolved.loader.load_all()
    return resolved.cache


def refresh_reference_cache(services: Services | None = None) -> ReferenceCache:
    log.info("[REFRESH-REFERENCE-DATA][START]")
    return load_reference_cache(services)


def compute_missing_landings(
    now: datetime | None = None, services: Services | None = None
) -> list[LandingQuery]:
    return _resolve(services).updater.get_missing_landings(now)


def compute_exceeding_landings(
    now: datetime | None = None, services: Services | None = None
) -> list[CcQueryRow]:
    return _resolve(services).updater.get_exceeding_landings(now)


def run_reconciliation_cycle(services: Services | None = None) -> list[Landing]:
    return _resolve(services).updater.run_reconciliation_cycle()


def run_reprocessing_batch(
    limit: int | None = None, services: Services | None = None
) -> ReprocessingResult:
    return _resolve(services).reprocessing.run_batch(limit)


def run_landings_and_reporting_job(services: Services | None = None) -> None:
    """Run every phase of the landings job, refreshing the risking datasets first."""

    resolved = _resolve(services)
    log.info("[RUN-LANDINGS-AND-REPORTING-JOB][START]")
    resolved.updater.run_landings_and_reporting_job(
        refresh_risking_data=resolved.loader.refresh_risking_data
    )


def resubmit_certificates_to_trade(services: Services | None = None) -> int:
    return _resolve(services).updater.resubmit_certificates_to_trade()


__all__ = [
    "Services",
    "build_services",
    "compute_exceeding_landings",
    "compute_missing_landings",
    "get_services",
    "load_reference_cache",
    "refresh_reference_cache",
    "resubmit_certificates_to_trade",
    "run_landings_and_reporting_job",
    "run_reconciliation_cycle",
    "run_reprocessing_batch",
]
