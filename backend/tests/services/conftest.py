"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so the readiness probe pings the test engine
    - seed_references holds the reference data every lifecycle test builds on

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for store and route
      tests (PostgreSQL-specific features not exercised here)
    - Reference rows are stored in normalized form, as the CRUD layer would
"""

from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from rfid_ledger.db.base import Base
from rfid_ledger.infrastructure.database import get_db, DatabaseSessionManager
from rfid_ledger.models import Location, Product, RfidBinding, RfidTransaction, Site
import rfid_ledger.infrastructure.database as db_module
from rfid_ledger.main import app


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
async def seed_references(test_db):
    """Two sites, three locations, one product and two bindings.

    Returns the ids tests need, captured before any rollback can expire the rows.
    """
    main = Site(site_id=1, site_name="MAIN..SITE")
    north = Site(site_id=2, site_name="NORTH..SITE")
    test_db.add_all([main, north])
    await test_db.flush()
    test_db.add_all([
        Location(location_id=10, location_name="DOCK..A", site_id=1),
        Location(location_id=11, location_name="DOCK..B", site_id=1),
        Location(location_id=20, location_name="GATE..1", site_id=2),
        Product(ref_code=12345, name="Pallet"),
        Product(ref_code=54321, name="Crate"),
    ])
    await test_db.flush()
    test_db.add_all([
        RfidBinding(tag_id="TAG1", epc="EPC001", ref_code=12345),
        RfidBinding(tag_id="TAG2", epc="EPC002", ref_code=54321),
    ])
    await test_db.commit()
    return {"dock_a": 10, "dock_b": 11, "gate_1": 20}


@pytest.fixture
def add_scan(test_db):
    """Insert a transaction row directly, bypassing the lifecycle checks."""
    async def _add(tag_id, epc, scan_date, rssi, location_id):
        test_db.add(RfidTransaction(
            tag_id=tag_id,
            epc=epc,
            scan_date=datetime.strptime(scan_date, "%Y-%m-%d %H:%M:%S"),
            location_id=location_id,
            rssi=Decimal(rssi),
        ))
        await test_db.commit()
    return _add
