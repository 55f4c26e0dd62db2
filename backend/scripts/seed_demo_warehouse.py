import asyncio
import logging
import sys
import uuid
from datetime import date, timedelta
from pathlib import Path

"""
Seed a demo organization: one user, one cold-storage warehouse with a few
locations, and a confirmed inbound order of fruit batches (some close to
expiry, so alerts show up).

This script can be run from either:
- backend/: `python scripts/seed_demo_warehouse.py`
- repo root: `python backend/scripts/seed_demo_warehouse.py`
"""

# Allow running from repo root by ensuring `backend/` is on sys.path
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from sqlalchemy import select

from db.database import async_session_maker, create_db_and_tables
from db.users import User
from db.warehouse import Warehouse, WarehouseLocation
from schemas.inventory import InboundConfirmItem
from schemas.orders import InboundOrderCreate, InboundOrderItemCreate
from services.inbound import confirm_inbound_order
from services.orders import create_inbound_order

from fastapi_users.password import PasswordHelper


logger = logging.getLogger(__name__)
password_helper = PasswordHelper()

DEMO_EMAIL = "demo@fruitwarehouse.local"
DEMO_PASSWORD = "demo-password"
DEMO_WAREHOUSE = "Demo Cold Storage"


async def get_or_create_user(session, email: str, password: str) -> User:
    result = await session.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if user:
        return user

    user = User(
        email=email,
        hashed_password=password_helper.hash(password),
        is_active=True,
        is_superuser=False,
        is_verified=True,
        full_name="Demo Operator",
        organization_id=uuid.uuid4(),
    )
    session.add(user)
    await session.flush()
    return user


async def get_or_create_warehouse(session, organization_id, name: str) -> Warehouse:
    result = await session.execute(
        select(Warehouse).where(Warehouse.organization_id == organization_id, Warehouse.name == name)
    )
    warehouse = result.scalar_one_or_none()
    if warehouse:
        return warehouse

    warehouse = Warehouse(
        organization_id=organization_id,
        name=name,
        location="Dock 3",
        temperature_controlled=True,
        locations=[
            WarehouseLocation(location_code=f"A-{rack}-{shelf}", rack_number=rack, shelf_number=shelf)
            for rack in (1, 2)
            for shelf in (1, 2)
        ],
    )
    session.add(warehouse)
    await session.flush()
    return warehouse


def demo_batches(today: date) -> list[dict]:
    return [
        {"product_name": "Apple", "quantity": 120, "unit": "kg", "batch_id": "APL-001", "expiration_date": today + timedelta(days=30)},
        {"product_name": "Apple", "quantity": 80, "unit": "kg", "batch_id": "APL-002", "expiration_date": today + timedelta(days=12)},
        {"product_name": "Banana", "quantity": 60, "unit": "kg", "batch_id": "BAN-001", "expiration_date": today + timedelta(days=5)},
        {"product_name": "Strawberry", "quantity": 25, "unit": "box", "batch_id": "STR-001", "expiration_date": today + timedelta(days=2)},
    ]


async def seed_into(session, today: date | None = None):
    """Seed the demo organization through the regular services. Returns (user, warehouse, order)."""
    today = today or date.today()
    user = await get_or_create_user(session, DEMO_EMAIL, DEMO_PASSWORD)
    warehouse = await get_or_create_warehouse(session, user.organization_id, DEMO_WAREHOUSE)
    await session.commit()

    batches = demo_batches(today)
    order = await create_inbound_order(
        session,
        user.organization_id,
        user.id,
        InboundOrderCreate(
            warehouse_id=warehouse.id,
            items=[InboundOrderItemCreate(**b) for b in batches],
        ),
    )
    order = await confirm_inbound_order(
        session,
        order.id,
        user.organization_id,
        [InboundConfirmItem(**b) for b in batches],
        user_id=user.id,
    )
    logger.info("Seeded %s with order %s", warehouse.name, order.inbound_number)
    return user, warehouse, order


async def seed():
    await create_db_and_tables()
    async with async_session_maker() as session:
        await seed_into(session)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed())
