import os

# Point the app at SQLite before app.database builds its engine
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from datetime import datetime, timedelta
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from app.config import get_settings
from app.database import Base, get_db
from app.main import app
from app.models import City, Driver, DriverStatus, Order, Profile, Vendor
from tests.fixtures.test_data import MANILA, fake, generate_drivers, generate_order

# Use in-memory SQLite for tests by default, unless TEST_DATABASE_URL is set
TEST_DB_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


@pytest.fixture
async def test_engine():
    """Fresh test database engine."""
    engine = create_async_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False} if "sqlite" in TEST_DB_URL else {},
        poolclass=StaticPool if "sqlite" in TEST_DB_URL else None,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Function-scoped session inside a transaction that is rolled back."""
    connection = await test_engine.connect()
    transaction = await connection.begin()

    session_maker = async_sessionmaker(
        bind=connection,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    session = session_maker()

    yield session

    await session.close()
    await transaction.rollback()
    await connection.close()


@pytest.fixture
async def client(db_session) -> AsyncGenerator[AsyncClient, None]:
    """Test client with override for get_db."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def settings():
    """Cached settings instance; patch attributes with monkeypatch.setattr."""
    return get_settings()


@pytest.fixture
async def city(db_session):
    """An active city."""
    city = City(name=fake.city(), is_active=True)
    db_session.add(city)
    await db_session.flush()
    return city


@pytest.fixture
def make_driver(db_session):
    """
    Factory for drivers with a linked profile.

    Each driver gets a created_at one second after the previous one, so the
    candidate fetch order (and with it tie-breaking) is known.
    """
    base_time = datetime(2026, 1, 1, 8, 0, 0)
    counter = {"n": 0}

    async def _make(
        lat: float = MANILA[0],
        lng: float = MANILA[1],
        rating=4.5,
        status: DriverStatus = DriverStatus.APPROVED,
        is_available: bool = True,
        full_name: str = None,
        city_id=None,
        total_deliveries: int = 0,
        phone: str = None,
    ) -> Driver:
        profile = Profile(full_name=full_name or fake.name())
        db_session.add(profile)
        await db_session.flush()

        driver = Driver(
            user_id=profile.id,
            city_id=city_id,
            status=status,
            is_available=is_available,
            current_latitude=lat,
            current_longitude=lng,
            rating=rating,
            total_deliveries=total_deliveries,
            phone=phone,
            created_at=base_time + timedelta(seconds=counter["n"]),
        )
        counter["n"] += 1
        db_session.add(driver)
        await db_session.flush()
        return driver

    return _make


@pytest.fixture
async def sample_drivers(make_driver, city):
    """8 approved, available drivers scattered within 8 km of Manila centre."""
    drivers = []
    for d_data in generate_drivers(count=8):
        drivers.append(await make_driver(
            lat=d_data["latitude"],
            lng=d_data["longitude"],
            rating=d_data["rating"],
            full_name=d_data["full_name"],
            phone=d_data["phone"],
            total_deliveries=d_data["total_deliveries"],
            city_id=city.id,
        ))
    return drivers


@pytest.fixture
def make_order(db_session, city):
    """Factory for an order picked up from a (optionally unlocated) vendor."""
    async def _make(vendor_lat=MANILA[0], vendor_lng=MANILA[1], vendor_name="Jollibee Ermita", **fields) -> Order:
        vendor = Vendor(name=vendor_name, latitude=vendor_lat, longitude=vendor_lng, city_id=city.id)
        db_session.add(vendor)
        await db_session.flush()

        order_data = generate_order()
        order_data.update(fields)
        order = Order(vendor_id=vendor.id, **order_data)
        db_session.add(order)
        await db_session.flush()
        return order

    return _make


@pytest.fixture
async def order(make_order):
    """An undispatched order from a vendor at Manila centre."""
    return await make_order()
