"""Data storage configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

DEFAULT_DB_FILENAME: Final[str] = "catchwatch.db"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"

VESSELS_FILENAME: Final[str] = "vessels.json"
SPECIES_FILENAME: Final[str] = "commodity_code.txt"
SPECIES_ALIASES_FILENAME: Final[str] = "speciesmismatch.json"
CONVERSION_FACTORS_FILENAME: Final[str] = "conversionfactors.csv"
VESSELS_OF_INTEREST_FILENAME: Final[str] = "vesselsOfInterest.csv"
WEIGHTING_FILENAME: Final[str] = "weightingRisk.csv"
SPECIES_TOGGLE_FILENAME: Final[str] = "speciesToggle.json"
EXPORTER_BEHAVIOUR_FILENAME: Final[str] = "exporter_behaviour.csv"
REPROCESS_LANDINGS_FILENAME: Final[str] = "reprocess-landings.csv"


@dataclass(frozen=True, slots=True)
class ReferenceFilePaths:
    """Fixed locations of the local reference datasets."""

    vessels: Path
    species: Path
    species_aliases: Path
    conversion_factors: Path
    vessels_of_interest: Path
    weighting: Path
    species_toggle: Path
    exporter_behaviour: Path

    @classmethod
    def in_directory(cls, directory: Path) -> ReferenceFilePaths:
        return cls(
            vessels=directory / VESSELS_FILENAME,
            species=directory / SPECIES_FILENAME,
            species_aliases=directory / SPECIES_ALIASES_FILENAME,
            conversion_factors=directory / CONVERSION_FACTORS_FILENAME,
            vessels_of_interest=directory / VESSELS_OF_INTEREST_FILENAME,
            weighting=directory / WEIGHTING_FILENAME,
            species_toggle=directory / SPECIES_TOGGLE_FILENAME,
            exporter_behaviour=directory / EXPORTER_BEHAVIOUR_FILENAME,
        )


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """One directory holds the reference files, the reprocessing queue and local state.

    The reference files and queue are expected to exist already; the SQLite
    database and HTTP cache are created on demand.
    """

    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME
    http_cache_filename: str = HTTP_CACHE_FILENAME
    reprocess_filename: str = REPROCESS_LANDINGS_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def reference_files(self) -> ReferenceFilePaths:
        return ReferenceFilePaths.in_directory(self.resolve_data_dir())

    def reprocess_queue_path(self) -> Path:
        return self.resolve_data_dir() / self.reprocess_filename

    def state_file(self, filename: str) -> Path:
        data_dir = self.resolve_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir / filename

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.state_file(self.database_filename)}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def _default_data_dir() -> Path:
    # the repository ships sample reference files under ./data for development
    return Path.cwd() / "data"


def get_storage_config() -> StorageConfig:
    env_dir = os.getenv("CATCHWATCH_DATA_DIR")
    data_dir = Path(env_dir) if env_dir else _default_data_dir()
    return StorageConfig(data_dir=data_dir)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    env_uri = os.getenv("DATABASE_URI")
    if env_uri:
        return DatabaseConfig(uri=env_uri)
    storage_config = storage or get_storage_config()
    return DatabaseConfig(uri=storage_config.database_uri())


def get_http_cache_path() -> Path:
    config = get_storage_config()
    return config.state_file(config.http_cache_filename)
