"""
Configuración de pytest y fixtures compartidas.

Este módulo provee fixtures reutilizables para:
- Reloj e ids deterministas (FakeClock / FakeIdGenerator)
- Repositorios in-memory y casos de uso ya cableados
- Base de datos SQLite in-memory para los adaptadores SQL
- Cliente HTTP de prueba (FastAPI TestClient)
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from marketplace.api.dependencies import build_use_cases, get_use_cases
from marketplace.application.interfaces.clock import FakeClock
from marketplace.application.interfaces.id_generator import FakeIdGenerator
from marketplace.config import Settings
from marketplace.domain.entities.listing import AddOn, Listing, ListingKind, PricingModel, RentalUnit
from marketplace.domain.entities.principal import Principal, UserProfile
from marketplace.infrastructure.db.sqlite import enable_sqlite_savepoints
from marketplace.infrastructure.db.tables import metadata
from marketplace.infrastructure.in_memory import (
    InMemoryChangeNotifier,
    InMemoryConversationRepo,
    InMemoryIdempotencyRepo,
    InMemoryListingRepo,
    InMemoryMessageRepo,
    InMemoryOverrideRepo,
    InMemoryReservationRepo,
    InMemoryTransactionManager,
    InMemoryTransactionRepo,
    InMemoryUserRepo,
)
from marketplace.main import app

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

OWNER_ID = "owner-1"
BUYER_ID = "buyer-1"
STRANGER_ID = "stranger-1"
LISTING_ID = "villa-1"

# 2024-06-01 10:00 UTC
NOW = datetime(2024, 6, 1, 10, 0, tzinfo=timezone.utc)


def make_listing(**overrides) -> Listing:
    data = dict(
        id=LISTING_ID,
        kind=ListingKind.LODGING,
        owner_id=OWNER_ID,
        title="Villa Lomé",
        base_price=Decimal("100"),
        currency_code="XOF",
        rental_unit=RentalUnit.DAY,
        add_ons=[
            AddOn(id="addon-a", name="Petit-déjeuner", price=Decimal("10"), pricing_model=PricingModel.PER_NIGHT),
            AddOn(id="addon-b", name="Ménage", price=Decimal("25"), pricing_model=PricingModel.PER_STAY),
        ],
    )
    data.update(overrides)
    return Listing(**data)


# ============================================================================
# FIXTURES DE DOMINIO
# ============================================================================

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(NOW)


@pytest.fixture
def ids() -> FakeIdGenerator:
    return FakeIdGenerator()


@pytest.fixture
def notifier() -> InMemoryChangeNotifier:
    return InMemoryChangeNotifier()


@pytest.fixture
def owner() -> Principal:
    return Principal(id=OWNER_ID)


@pytest.fixture
def buyer() -> Principal:
    return Principal(id=BUYER_ID)


@pytest.fixture
def stranger() -> Principal:
    return Principal(id=STRANGER_ID)


@pytest.fixture
def listing() -> Listing:
    return make_listing()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


# ============================================================================
# FIXTURES IN-MEMORY
# ============================================================================

@pytest_asyncio.fixture
async def memory_bundle(listing: Listing) -> dict:
    """Repositorios in-memory con un anuncio y dos perfiles ya cargados."""
    bundle = {
        "listing_repo": InMemoryListingRepo(),
        "override_repo": InMemoryOverrideRepo(),
        "reservation_repo": InMemoryReservationRepo(),
        "transaction_repo": InMemoryTransactionRepo(),
        "conversation_repo": InMemoryConversationRepo(),
        "message_repo": InMemoryMessageRepo(),
        "user_repo": InMemoryUserRepo(),
        "idempotency_repo": InMemoryIdempotencyRepo(),
        "tx_manager": InMemoryTransactionManager(),
    }
    await bundle["listing_repo"].save(listing)
    await bundle["user_repo"].save(
        UserProfile(id=OWNER_ID, full_name="Kossi", email="owner@example.com", phone="+22890000000")
    )
    await bundle["user_repo"].save(
        UserProfile(id=BUYER_ID, full_name="Ama", email="buyer@example.com", phone="+22891111111")
    )
    return bundle


@pytest.fixture
def use_cases(memory_bundle: dict, settings: Settings, clock: FakeClock, ids: FakeIdGenerator, notifier):
    return build_use_cases(memory_bundle, settings, clock, ids, notifier)


# ============================================================================
# FIXTURES DE BASE DE DATOS
# ============================================================================

@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """
    Engine async sobre SQLite in-memory.
    Se crea uno por test para aislar los datos.
    """
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    enable_sqlite_savepoints(engine)

    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Sesión nueva por test; las escrituras confirman vía SQLAlchemyTransactionManager."""
    session_factory = async_sessionmaker(test_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


# ============================================================================
# FIXTURES DE CLIENTE HTTP
# ============================================================================

@pytest.fixture
def client(memory_bundle: dict, settings: Settings, clock: FakeClock, ids: FakeIdGenerator, notifier) -> Generator[TestClient, None, None]:
    """
    FastAPI TestClient con los casos de uso cableados sobre el bundle in-memory
    del test (reloj e ids deterministas).
    """
    def override_get_use_cases():
        return build_use_cases(memory_bundle, settings, clock, ids, notifier)

    app.dependency_overrides[get_use_cases] = override_get_use_cases

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def auth(principal_id: str) -> dict:
    return {"X-Principal-Id": principal_id}


# ============================================================================
# MARKERS DE PYTEST
# ============================================================================

def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "integration: Tests contra SQLite in-memory o el stack HTTP completo"
    )
