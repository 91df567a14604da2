from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from catchwatch.adapters.sqlalchemy import create_all_tables, shutdown, startup
from catchwatch.common import BackgroundTasks
from tests.helpers.fakes import InlineExecutor

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Iterator

SAMPLE_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@pytest.fixture
def sample_data_dir() -> Path:
    return SAMPLE_DATA_DIR


@pytest.fixture
def background() -> Iterator[BackgroundTasks]:
    tasks = BackgroundTasks(InlineExecutor())
    try:
        yield tasks
    finally:
        tasks.shutdown()


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session_factory(sqlite_engine: Engine) -> Iterator[sessionmaker[Session]]:
    startup(engine=sqlite_engine, force=True)
    try:
        yield sessionmaker(bind=sqlite_engine, expire_on_commit=False)
    finally:
        shutdown()
