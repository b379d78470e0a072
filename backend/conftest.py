"""Root conftest: test env vars, structlog routed to stdlib for caplog, shared database fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest
import structlog
from dotenv import load_dotenv

from shared.db import (
    Database,
    SqliteActivityRepository,
    SqliteCommunityRepository,
    SqliteCompetitionRepository,
    SqliteGameRepository,
    SqlitePlayerRepository,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

load_dotenv(Path(__file__).resolve().parent.parent / ".env.tests")

structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ],
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=False,
)


@pytest.fixture(autouse=True)
def _clear_log_context():
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def db(tmp_path: Path) -> Iterator[Database]:
    database = Database(tmp_path / "dommatch.db")
    database.connect()
    yield database
    database.close()


@pytest.fixture
def game_repo(db: Database) -> SqliteGameRepository:
    return SqliteGameRepository(db)


@pytest.fixture
def player_repo(db: Database) -> SqlitePlayerRepository:
    return SqlitePlayerRepository(db)


@pytest.fixture
def community_repo(db: Database) -> SqliteCommunityRepository:
    return SqliteCommunityRepository(db)


@pytest.fixture
def competition_repo(db: Database) -> SqliteCompetitionRepository:
    return SqliteCompetitionRepository(db)


@pytest.fixture
def activity_repo(db: Database) -> SqliteActivityRepository:
    return SqliteActivityRepository(db)
