"""Pytest configuration and fixtures."""

import os

# Must be set before the app modules build their engine.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

import uuid
from datetime import date
from decimal import Decimal
from typing import Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from core.auth import current_active_user
from db.base import Base
from db.database import get_async_session, StockRecord
from db.users import User
from db.warehouse import Warehouse
from main import app
from schemas.orders import (
    InboundOrderCreate,
    InboundOrderItemCreate,
    OutboundOrderCreate,
    OutboundOrderItemCreate,
)
from services.ledger import create_batch
from services.orders import create_inbound_order, create_outbound_order

# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
async def db_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine):
    """Create a test database session."""
    session_maker = async_sessionmaker(db_engine, expire_on_commit=False)
    async with session_maker() as session:
        yield session


async def _make_user(db_session, email: str, organization_id: Optional[uuid.UUID]) -> User:
    user = User(
        email=email,
        hashed_password="not-a-real-hash",
        is_active=True,
        is_superuser=False,
        is_verified=True,
        full_name="Test Operator",
        organization_id=organization_id,
    )
    db_session.add(user)
    await db_session.commit()
    return user


@pytest.fixture
async def test_user(db_session) -> User:
    """Create a test user belonging to a fresh organization."""
    return await _make_user(db_session, "operator@example.com", uuid.uuid4())


@pytest.fixture
def organization_id(test_user) -> uuid.UUID:
    # Plain value: ORM instances expire when a service rolls back
    return test_user.organization_id


@pytest.fixture
async def other_user(db_session) -> User:
    return await _make_user(db_session, "outsider@example.com", uuid.uuid4())


async def _make_warehouse(db_session, organization_id: uuid.UUID, name: str) -> Warehouse:
    warehouse = Warehouse(organization_id=organization_id, name=name, temperature_controlled=True)
    db_session.add(warehouse)
    await db_session.commit()
    return warehouse


@pytest.fixture
async def warehouse(db_session, organization_id) -> Warehouse:
    return await _make_warehouse(db_session, organization_id, "Main Cold Store")


@pytest.fixture
def warehouse_id(warehouse) -> uuid.UUID:
    return warehouse.id


@pytest.fixture
async def other_warehouse(db_session, other_user) -> Warehouse:
    return await _make_warehouse(db_session, other_user.organization_id, "Someone Else's Store")


@pytest.fixture
def add_stock(db_session, warehouse_id):
    """Put an available batch straight into the ledger."""

    async def _add(
        product_name: str,
        quantity,
        *,
        batch_id: Optional[str] = None,
        inbound_date: Optional[date] = None,
        expiration_date: Optional[date] = None,
        for_warehouse: Optional[uuid.UUID] = None,
        unit: str = "kg",
    ) -> StockRecord:
        record, _ = await create_batch(
            db_session,
            warehouse_id=for_warehouse or warehouse_id,
            product_name=product_name,
            quantity=Decimal(str(quantity)),
            unit=unit,
            batch_id=batch_id,
            expiration_date=expiration_date,
            inbound_date=inbound_date,
        )
        await db_session.commit()
        return record

    return _add


@pytest.fixture
def make_inbound_order(db_session, test_user, organization_id, warehouse_id):
    async def _make(items: list[dict], *, purchase_order_id: Optional[uuid.UUID] = None):
        payload = InboundOrderCreate(
            warehouse_id=warehouse_id,
            purchase_order_id=purchase_order_id,
            items=[InboundOrderItemCreate(**it) for it in items],
        )
        return await create_inbound_order(db_session, organization_id, test_user.id, payload)

    return _make


@pytest.fixture
def make_outbound_order(db_session, test_user, organization_id, warehouse_id):
    async def _make(items: list[dict]):
        payload = OutboundOrderCreate(
            warehouse_id=warehouse_id,
            items=[OutboundOrderItemCreate(**it) for it in items],
        )
        return await create_outbound_order(db_session, organization_id, test_user.id, payload)

    return _make


@pytest.fixture
def stock_rows(db_session, warehouse_id):
    """Available stock of the test warehouse as (product, batch, quantity) tuples."""

    async def _rows(product_name: Optional[str] = None):
        stmt = select(StockRecord.product_name, StockRecord.batch_id, StockRecord.quantity).where(
            StockRecord.warehouse_id == warehouse_id,
            StockRecord.status == "available",
        )
        if product_name:
            stmt = stmt.where(StockRecord.product_name == product_name)
        res = await db_session.execute(stmt.order_by(StockRecord.product_name, StockRecord.batch_id))
        return [(p, b, Decimal(q)) for (p, b, q) in res.all()]

    return _rows


@pytest.fixture
async def client(db_session, test_user):
    """Async API client with the session and the current user overridden."""
    # Detached copy so a rollback inside a request never expires it
    api_user = User(
        id=test_user.id,
        email=test_user.email,
        hashed_password="not-a-real-hash",
        is_active=True,
        is_superuser=False,
        is_verified=True,
        organization_id=test_user.organization_id,
    )

    async def override_get_async_session():
        yield db_session

    app.dependency_overrides[get_async_session] = override_get_async_session
    app.dependency_overrides[current_active_user] = lambda: api_user
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
