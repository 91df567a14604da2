"""Public interface for the landing-provider adapter."""

from __future__ import annotations

from .client import LandingProviderClient, LandingProviderError
from .schema import (
    CatchActivityPayload,
    CatchItemPayload,
    ELogPayload,
    LandingActivityPayload,
    LandingDeclarationPayload,
)
from .translator import ProviderTranslator

__all__ = [
    "CatchActivityPayload",
    "CatchItemPayload",
    "ELogPayload",
    "LandingActivityPayload",
    "LandingDeclarationPayload",
    "LandingProviderClient",
    "LandingProviderError",
    "ProviderTranslator",
]
