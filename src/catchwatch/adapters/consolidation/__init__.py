"""Public interface for the landings consolidation adapter."""

from __future__ import annotations

from .client import ConsolidationClient, ConsolidationServiceError
from .schema import ConsolidatedLandingPayload, RefreshLandingPayload

__all__ = [
    "ConsolidatedLandingPayload",
    "ConsolidationClient",
    "ConsolidationServiceError",
    "RefreshLandingPayload",
]
