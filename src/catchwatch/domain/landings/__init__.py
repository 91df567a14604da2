"""Landing reconciliation: missing-landing queries, fetching and reprocessing."""

from __future__ import annotations

from .queries import (
    MissingLandingsResolver,
    dedupe_landing_queries,
    map_pln_landings_to_rss_landings,
    merge_landing_queries,
    pln_landings_from_certificate,
    project_catch_certificates,
    uniquify_landings,
)
from .refresh import LandingFetchPipeline, is_unchanged
from .reprocessing import ReprocessingQueue, ReprocessingResult
from .updater import LandingsUpdater

__all__ = [
    "LandingFetchPipeline",
    "LandingsUpdater",
    "MissingLandingsResolver",
    "ReprocessingQueue",
    "ReprocessingResult",
    "dedupe_landing_queries",
    "is_unchanged",
    "map_pln_landings_to_rss_landings",
    "merge_landing_queries",
    "pln_landings_from_certificate",
    "project_catch_certificates",
    "uniquify_landings",
]
