from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from marketplace.config import get_settings
from marketplace.infrastructure.db.sqlite import enable_sqlite_savepoints

settings = get_settings()

# Sin URL se usa SQLite en memoria (dev / pruebas)
DB_URL = settings.database_url or "sqlite+aiosqlite:///:memory:"

if DB_URL.startswith("sqlite"):
    engine = create_async_engine(DB_URL, poolclass=StaticPool)
    enable_sqlite_savepoints(engine)
else:
    engine = create_async_engine(DB_URL, pool_pre_ping=True)
AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session
