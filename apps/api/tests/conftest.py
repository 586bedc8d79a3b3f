"""
Fixtures comunes.
Cada test usa su propio fichero SQLite en tmp_path: sin estado compartido.
"""

from collections.abc import AsyncIterator

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from core.database import Database
from main import create_app


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    db_file = tmp_path / "test.db"
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{db_file}",
        DATABASE_SYNC_URL=f"sqlite:///{db_file}",
        APP_ENV="test",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
async def database(test_settings: Settings) -> AsyncIterator[Database]:
    db = Database(test_settings.DATABASE_URL)
    await db.init_schema()
    yield db
    await db.dispose()


@pytest.fixture
async def session(database: Database) -> AsyncIterator[AsyncSession]:
    async with database.sessionmaker() as s:
        yield s


@pytest.fixture
async def client(test_settings: Settings) -> AsyncIterator[httpx.AsyncClient]:
    """Cliente HTTP contra la app real (lifespan incluido: schema + config por defecto)."""
    app = create_app(test_settings)
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
            yield c
