"""Port for the source of reference datasets."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
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


@runtime_checkable
class ReferenceDataSource(Protocol):
    """One loader per dataset; each may raise independently of the others."""

    remote: bool

    def load_vessels(self) -> list[VesselRecord]: ...

    def load_species(self) -> list[SpeciesRow]: ...

    def load_species_aliases(self) -> SpeciesAliases: ...

    def load_conversion_factors(self) -> list[ConversionFactor]: ...

    def load_vessels_of_interest(self) -> list[VesselOfInterest]: ...

    def load_weighting(self) -> Weighting: ...

    def load_species_toggle(self) -> SpeciesRiskToggle: ...

    def load_exporter_behaviour(self) -> list[ExporterBehaviour]: ...


__all__ = ["ReferenceDataSource"]
