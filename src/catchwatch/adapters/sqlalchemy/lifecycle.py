"""Process-wide engine for the certificate, landing and audit tables."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from catchwatch.config import get_database_config

from .tables import create_all_tables

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the SQLAlchemy adapter is started twice or used before startup."""


@dataclass(slots=True)
class _EngineState:
    engine: Engine | None = None
    factory: sessionmaker[Session] | None = None


_STATE = _EngineState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> sessionmaker[Session]:
    """Create the tables on ``engine`` (or on ``DATABASE_URI``) and keep it for the process."""

    if _STATE.engine is not None and not force:
        raise StartupError("SQLAlchemy adapter already started; pass force=True to replace it")
    if _STATE.engine is not None and _STATE.engine is not engine:
        _STATE.engine.dispose()

    if engine is None:
        uri = database_uri or get_database_config().uri
        log.info("[DATABASE][STARTUP][%s]", uri.split("://", 1)[0])
        engine = create_engine(uri, future=True)
    create_all_tables(engine)
    _STATE.engine = engine
    _STATE.factory = sessionmaker(bind=engine, expire_on_commit=False)
    return _STATE.factory


def ensure_started() -> sessionmaker[Session]:
    """Return the session factory, starting the adapter from configuration if needed."""

    if _STATE.factory is None:
        return startup()
    return _STATE.factory


def session_factory() -> sessionmaker[Session]:
    if _STATE.factory is None:
        raise StartupError("SQLAlchemy adapter not started; call startup() first")
    return _STATE.factory


def shutdown() -> None:
    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None
    _STATE.factory = None


__all__ = ["StartupError", "ensure_started", "session_factory", "shutdown", "startup"]
