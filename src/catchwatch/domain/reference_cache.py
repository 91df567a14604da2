"""Process-wide snapshot of reference data with indexed lookups.

Each ``update_*`` method replaces exactly one dataset with a single assignment
and ignores empty input, so a failed or partial load never clobbers the value
readers currently see. Readers get either the previous or the new value of a
dataset; datasets are not kept consistent with each other during a refresh.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from .model import (
    ConversionFactor,
    ExporterBehaviour,
    ReferenceSnapshot,
    VesselOfInterest,
    VesselRecord,
    WeightKind,
    Weighting,
    build_vessel_index,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .model import Landing, SpeciesAliases, SpeciesRiskToggle, SpeciesRow

log = getLogger(__name__)

DEFAULT_SPECIES_RISK_SCORE = 0.5
VESSEL_OF_INTEREST_RISK_SCORE = 1.0
DEFAULT_VESSEL_RISK_SCORE = 0.5
DEFAULT_EXPORTER_RISK_SCORE = 1.0


def as_day(value: date | datetime | str) -> date:
    """Reduce a date, datetime or ISO string to its calendar day."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(value.strip().replace("Z", "+00:00")).date()


class ReferenceCache:
    """Owner of the current :class:`ReferenceSnapshot`."""

    def __init__(self, snapshot: ReferenceSnapshot | None = None) -> None:
        self._snapshot = snapshot or ReferenceSnapshot()

    @property
    def snapshot(self) -> ReferenceSnapshot:
        return self._snapshot

    # accessors -----------------------------------------------------------------

    @property
    def vessels(self) -> list[VesselRecord]:
        return self._snapshot.vessels

    @property
    def species(self) -> list[SpeciesRow]:
        return self._snapshot.species

    @property
    def conversion_factors(self) -> list[ConversionFactor]:
        return self._snapshot.conversion_factors

    @property
    def weighting(self) -> Weighting:
        return self._snapshot.weighting

    @property
    def vessels_of_interest(self) -> list[VesselOfInterest]:
        return self._snapshot.vessels_of_interest

    @property
    def species_risk_enabled(self) -> bool:
        return self._snapshot.species_risk_enabled

    @property
    def exporter_behaviour(self) -> list[ExporterBehaviour]:
        return self._snapshot.exporter_behaviour

    def species_aliases(self, species_code: str) -> list[str]:
        return self._snapshot.species_aliases.get(species_code, [])

    def commodity_search(
        self, species_code: str, state: str | None, presentation: str | None
    ) -> list[SpeciesRow]:
        """Commodity-code rows for a species in a given state and presentation."""

        return [
            row
            for row in self._snapshot.species
            if row.get("faoCode") == species_code
            and row.get("preservationState") == state
            and row.get("presentationState") == presentation
        ]

    # setters -------------------------------------------------------------------

    def update_vessels(self, vessels: Sequence[VesselRecord] | None) -> None:
        if not vessels:
            return
        rows = list(vessels)
        # vessels and their index travel together in one assignment
        self._snapshot = replace(
            self._snapshot, vessels=rows, vessel_index=build_vessel_index(rows)
        )

    def update_species(self, species: Sequence[SpeciesRow] | None) -> None:
        if species:
            self._snapshot.species = list(species)

    def update_species_aliases(self, aliases: SpeciesAliases | None) -> None:
        if aliases:
            self._snapshot.species_aliases = dict(aliases)

    def update_conversion_factors(self, factors: Sequence[ConversionFactor] | None) -> None:
        if factors:
            self._snapshot.conversion_factors = list(factors)

    def update_weighting(self, weighting: Weighting | None) -> None:
        if weighting is not None:
            self._snapshot.weighting = weighting

    def update_vessels_of_interest(
        self, vessels_of_interest: Sequence[VesselOfInterest] | None
    ) -> None:
        # an empty list is a legitimate value for this dataset
        if vessels_of_interest is not None:
            self._snapshot.vessels_of_interest = list(vessels_of_interest)

    def update_species_toggle(self, toggle: SpeciesRiskToggle | None) -> None:
        if toggle is not None:
            self._snapshot.species_risk_enabled = toggle.enabled

    def update_exporter_behaviour(self, rows: Sequence[ExporterBehaviour] | None) -> None:
        if rows:
            self._snapshot.exporter_behaviour = list(rows)

    # vessel lookups ------------------------------------------------------------

    def vessel_index(self, registration_number: str) -> list[VesselRecord]:
        """Return every vessel row whose PLN equals ``registration_number`` exactly."""

        return list(self._snapshot.vessel_index.get(registration_number, ()))

    def lookup_vessel(
        self, registration_number: str, landed: date | datetime | str
    ) -> VesselRecord | None:
        day = as_day(landed)
        for vessel in self._snapshot.vessel_index.get(registration_number, ()):
            if vessel.is_licensed_on(day):
                return vessel
        log.info("[VESSEL-LOOKUP][NOT-FOUND][%s][%s]", registration_number, day.isoformat())
        return None

    def get_rss_number(
        self, registration_number: str, landed: date | datetime | str
    ) -> str | None:
        vessel = self.lookup_vessel(registration_number, landed)
        return vessel.rss_number if vessel else None

    def get_vessel_length(
        self, registration_number: str, landed: date | datetime | str
    ) -> float | None:
        vessel = self.lookup_vessel(registration_number, landed)
        return vessel.vessel_length if vessel else None

    def get_vessel_details(self, rss_number: str) -> VesselRecord | None:
        for vessel in self._snapshot.vessels:
            if vessel.rss_number == rss_number:
                return vessel
        log.info("[VESSEL-DETAILS][NOT-FOUND][%s]", rss_number)
        return None

    def get_plns_for_landings(self, landings: Iterable[Landing]) -> list[tuple[Landing, str]]:
        """Pair fetched landings with the PLN licensed to their RSS number on that day."""

        matched: list[tuple[Landing, str]] = []
        for landing in landings:
            day = landing.date_time_landed.date()
            vessel = next(
                (
                    v
                    for v in self._snapshot.vessels
                    if v.rss_number == landing.rss_number and v.is_licensed_on(day)
                ),
                None,
            )
            if vessel is not None:
                matched.append((landing, vessel.registration_number))
        return matched

    # scoring -------------------------------------------------------------------

    def get_conversion_factor(
        self, species: str, state: str | None, presentation: str | None
    ) -> ConversionFactor | None:
        return next(
            (
                f
                for f in self._snapshot.conversion_factors
                if f.species == species and f.state == state and f.presentation == presentation
            ),
            None,
        )

    def get_to_live_weight_factor(
        self, species: str, state: str | None, presentation: str | None
    ) -> float:
        factor = self.get_conversion_factor(species, state, presentation)
        if factor is None or not factor.to_live_weight_factor:
            return 1
        return factor.to_live_weight_factor

    def get_species_risk_score(self, species_code: str) -> float:
        factor = next(
            (f for f in self._snapshot.conversion_factors if f.species == species_code), None
        )
        if factor is None or factor.risk_score is None:
            return DEFAULT_SPECIES_RISK_SCORE
        return factor.risk_score

    def get_vessel_risk_score(self, registration_number: str) -> float:
        if any(
            v.registration_number == registration_number
            for v in self._snapshot.vessels_of_interest
        ):
            return VESSEL_OF_INTEREST_RISK_SCORE
        return DEFAULT_VESSEL_RISK_SCORE

    def get_exporter_risk_score(self, account_id: str | None, contact_id: str | None) -> float:
        rows = self._snapshot.exporter_behaviour
        if (not account_id and not contact_id) or not rows:
            return DEFAULT_EXPORTER_RISK_SCORE

        if not account_id:
            individual = next(
                (r for r in rows if r.contact_id == contact_id and not r.account_id), None
            )
            return individual.score if individual else DEFAULT_EXPORTER_RISK_SCORE

        candidates = (
            lambda r: r.account_id == account_id and r.contact_id == contact_id,
            lambda r: r.contact_id == contact_id and not r.account_id,
            lambda r: r.account_id == account_id and not r.contact_id,
        )
        for predicate in candidates:
            match = next((r for r in rows if predicate(r)), None)
            if match is not None:
                return match.score
        return DEFAULT_EXPORTER_RISK_SCORE

    def get_weighting(self, kind: WeightKind) -> float:
        return self._snapshot.weighting.weight_for(kind)

    def get_risk_threshold(self) -> float:
        return self._snapshot.weighting.threshold
