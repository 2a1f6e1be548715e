# tests/conftest.py
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from sample.adapters.persistence import ApplicationDbContext, Database
from sample.core.ports.repositories import ICommandRepository, IQueryRepository
from sample.shared.config import AppEnv, Settings
from sample.shared.container import Container


@pytest.fixture(scope="function")
def test_settings(tmp_path):
    """Settings pointing at a fresh SQLite file; no .env, no collector."""
    return Settings(
        _env_file=None,
        APP_ENV=AppEnv.TESTING,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        LOG_LEVEL="WARNING",
        LOG_FORMAT="console",
        OTEL_EXPORTER_OTLP_ENDPOINT=None,
        REDIS_URL=None,
    )


@pytest_asyncio.fixture
async def database(test_settings):
    """A Database with the schema created; disposed after the test."""
    db = Database(test_settings.DATABASE_URL)
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_context(database):
    context = ApplicationDbContext(database)
    yield context
    await context.aclose()


@pytest.fixture(scope="function")
def mock_logger():
    """Stands in for a structlog bound logger."""
    return MagicMock()


@pytest.fixture(scope="function")
def mock_queries():
    """Returns a mock query repository."""
    repo = MagicMock(spec=IQueryRepository)
    repo.get_by_id = AsyncMock(return_value=None)
    repo.list_all = AsyncMock(return_value=[])
    repo.find = AsyncMock(return_value=[])
    repo.first_or_none = AsyncMock(return_value=None)
    repo.count = AsyncMock(return_value=0)
    repo.exists = AsyncMock(return_value=False)
    return repo


@pytest.fixture(scope="function")
def mock_commands():
    """Returns a mock command repository that echoes what it is given."""
    repo = MagicMock(spec=ICommandRepository)
    repo.add = AsyncMock(side_effect=lambda entity: entity)
    repo.add_range = AsyncMock(side_effect=lambda entities: list(entities))
    repo.update = AsyncMock(side_effect=lambda entity: entity)
    repo.remove = AsyncMock()
    repo.remove_by_id = AsyncMock(return_value=True)
    return repo


@pytest.fixture(scope="function")
def container(test_settings):
    """
    Sets up the Dependency Injection Container for testing.
    The settings provider is overridden so every provider sees the test database.
    """
    container = Container()
    container.settings.override(test_settings)

    yield container

    # Clean up overrides after test
    container.unwire()
    container.reset_override()
