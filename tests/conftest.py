"""Shared test fixtures for pytest"""
import itertools
from datetime import date, timedelta
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient

from main import app
from src.application.dtos import (CampaignSettings, HunterCreate,
                                  HuntingGuideCreate, PermitCreate,
                                  PermitRequestCreate, TaxCreate, UserCreate)
from src.application.storage import RegistryStorage
from src.infrastructure.config.settings import Settings, get_settings
from src.infrastructure.persistence.database import (create_engine,
                                                     create_schema,
                                                     create_session_factory,
                                                     drop_schema)
from src.presentation.api.dependencies import get_storage


@pytest.fixture
async def test_engine(tmp_path):
    """SQLite test database in a temporary file, schema created"""
    settings = Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'registry.db'}")
    engine = create_engine(settings)
    await create_schema(engine)

    yield engine

    await drop_schema(engine)
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return create_session_factory(test_engine)


@pytest.fixture
async def test_db(session_factory):
    """Create test database session"""
    async with session_factory() as session:
        yield session


@pytest.fixture
def storage(session_factory):
    return RegistryStorage(session_factory)


@pytest.fixture
async def client(storage, test_engine):
    """HTTP client for API testing (maintenance routes disabled)"""
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_settings] = lambda: Settings(maintenance_enabled=False)
    app.state.engine = test_engine

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def future_date():
    return date.today() + timedelta(days=180)


@pytest.fixture
def make_hunter(storage):
    """Create hunters with unique identity numbers"""
    counter = itertools.count(1)

    async def make(**overrides):
        n = next(counter)
        data = {
            "last_name": "Ngono",
            "first_name": f"Paul {n}",
            "date_of_birth": date(1980, 5, 17),
            "id_number": f"CM-{n:06d}",
            "address": "Quartier Bastos, Yaounde",
            "profession": "Farmer",
            "category": "resident",
            "region": "Centre",
            "zone": "Mfoundi",
        }
        data.update(overrides)
        return await storage.create_hunter(HunterCreate(**data))

    return make


@pytest.fixture
def make_user(storage):
    counter = itertools.count(1)

    async def make(**overrides):
        n = next(counter)
        data = {"username": f"agent{n}", "email": f"agent{n}@example.com", "role": "agent"}
        data.update(overrides)
        return await storage.create_user(UserCreate(**data))

    return make


@pytest.fixture
def make_guide(storage):
    counter = itertools.count(1)

    async def make(**overrides):
        n = next(counter)
        data = {
            "last_name": "Mballa",
            "first_name": f"Guide {n}",
            "phone": "+237600000000",
            "zone": "Faro",
            "region": "Nord",
            "id_number": f"GD-{n:05d}",
        }
        data.update(overrides)
        return await storage.create_hunting_guide(HuntingGuideCreate(**data))

    return make


@pytest.fixture
def make_permit(storage, future_date):
    counter = itertools.count(1)

    async def make(hunter_id: int, **overrides):
        n = next(counter)
        data = {
            "permit_number": f"P-2025-{n:04d}",
            "hunter_id": hunter_id,
            "issue_date": date.today() - timedelta(days=10),
            "expiry_date": future_date,
            "price": Decimal("50000.00"),
            "type": "petite-chasse",
        }
        data.update(overrides)
        return await storage.create_permit(PermitCreate(**data))

    return make


@pytest.fixture
def make_tax(storage):
    counter = itertools.count(1)

    async def make(hunter_id: int, permit_id: int | None = None, **overrides):
        n = next(counter)
        data = {
            "tax_number": f"T-2025-{n:04d}",
            "hunter_id": hunter_id,
            "permit_id": permit_id,
            "amount": Decimal("15000.00"),
            "issue_date": date.today(),
            "animal_type": "phacochere",
            "quantity": 1,
            "location": "Benoue",
        }
        data.update(overrides)
        return await storage.create_tax(TaxCreate(**data))

    return make


@pytest.fixture
def make_permit_request(storage):
    async def make(user_id: int, hunter_id: int):
        return await storage.create_permit_request(
            PermitRequestCreate(
                user_id=user_id,
                hunter_id=hunter_id,
                requested_type="petite-chasse",
                requested_category="resident",
            )
        )

    return make


@pytest.fixture
async def open_campaign(storage):
    """A campaign covering today"""
    today = date.today()
    return await storage.save_hunting_campaign_settings(
        CampaignSettings(
            start_date=today - timedelta(days=30),
            end_date=today + timedelta(days=30),
            year=str(today.year),
        )
    )
