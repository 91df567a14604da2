"""Reference datasets and the reprocessing queue read from the local filesystem."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

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
    from collections.abc import Sequence
    from pathlib import Path

    from catchwatch.config import ReferenceFilePaths
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


class ReferenceFileError(RuntimeError):
    """Raised when a local reference file is missing or unreadable."""

    def __init__(self, path: Path, cause: BaseException) -> None:
        super().__init__(f"Cannot read reference file {path}: {cause}")
        self.path = path


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ReferenceFileError(path, exc) from exc


class LocalReferenceSource:
    """Development source: every dataset lives in a fixed file under the data directory."""

    remote = False

    def __init__(self, paths: ReferenceFilePaths) -> None:
        self.paths = paths

    def load_vessels(self) -> list[VesselRecord]:
        return parse_vessels(_read_text(self.paths.vessels))

    def load_species(self) -> list[SpeciesRow]:
        return parse_species(_read_text(self.paths.species))

    def load_species_aliases(self) -> SpeciesAliases:
        return parse_species_aliases(_read_text(self.paths.species_aliases))

    def load_conversion_factors(self) -> list[ConversionFactor]:
        return parse_conversion_factors(_read_text(self.paths.conversion_factors))

    def load_vessels_of_interest(self) -> list[VesselOfInterest]:
        return parse_vessels_of_interest(_read_text(self.paths.vessels_of_interest))

    def load_weighting(self) -> Weighting:
        return parse_weighting(_read_text(self.paths.weighting))

    def load_species_toggle(self) -> SpeciesRiskToggle:
        return parse_species_toggle(_read_text(self.paths.species_toggle))

    def load_exporter_behaviour(self) -> list[ExporterBehaviour]:
        return parse_exporter_behaviour(_read_text(self.paths.exporter_behaviour))


class FileReprocessingStore:
    """Landing ids waiting for a status reset, one per line."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def read(self) -> list[str]:
        if not self.path.exists():
            log.info("[REPROCESS-LANDINGS][NO-FILE][%s]", self.path)
            return []
        text = _read_text(self.path)
        return [line.strip() for line in text.splitlines() if line.strip()]

    def write(self, ids: Sequence[str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("\n".join(ids), encoding="utf-8")


__all__ = ["FileReprocessingStore", "LocalReferenceSource", "ReferenceFileError"]
