import logging
from typing import List, Tuple
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from db.database import (
    Warehouse as WarehouseModel,
    WarehouseLocation as WarehouseLocationModel,
)
from schemas.warehouse import WarehouseCreate, WarehouseLocationCreate
from services.ledger import to_decimal
from services.orders import get_owned_warehouse

logger = logging.getLogger(__name__)


async def list_warehouses(
    db: AsyncSession,
    organization_id: UUID,
    *,
    page: int = 1,
    limit: int = 20,
) -> Tuple[List[WarehouseModel], int]:
    stmt = select(WarehouseModel).where(WarehouseModel.organization_id == organization_id)
    total = (await db.execute(select(func.count()).select_from(stmt.subquery()))).scalar_one()
    res = await db.execute(
        stmt.order_by(WarehouseModel.created_at.desc()).offset((page - 1) * limit).limit(limit)
    )
    return list(res.scalars().all()), int(total)


async def create_warehouse(db: AsyncSession, organization_id: UUID, payload: WarehouseCreate) -> WarehouseModel:
    warehouse = WarehouseModel(
        organization_id=organization_id,
        name=payload.name,
        location=payload.location,
        capacity=to_decimal(payload.capacity) if payload.capacity is not None else None,
        temperature_controlled=payload.temperature_controlled,
    )
    db.add(warehouse)
    await db.commit()
    await db.refresh(warehouse)
    logger.info("Warehouse %s created for organization %s", warehouse.id, organization_id)
    return warehouse


async def get_warehouse(db: AsyncSession, warehouse_id: UUID, organization_id: UUID) -> WarehouseModel:
    return await get_owned_warehouse(db, warehouse_id, organization_id)


async def list_locations(
    db: AsyncSession,
    warehouse_id: UUID,
    organization_id: UUID,
) -> List[WarehouseLocationModel]:
    await get_owned_warehouse(db, warehouse_id, organization_id)
    res = await db.execute(
        select(WarehouseLocationModel)
        .where(WarehouseLocationModel.warehouse_id == warehouse_id)
        .order_by(WarehouseLocationModel.location_code.asc())
    )
    return list(res.scalars().all())


async def create_location(
    db: AsyncSession,
    warehouse_id: UUID,
    organization_id: UUID,
    payload: WarehouseLocationCreate,
) -> WarehouseLocationModel:
    await get_owned_warehouse(db, warehouse_id, organization_id)
    location = WarehouseLocationModel(
        warehouse_id=warehouse_id,
        location_code=payload.location_code,
        rack_number=payload.rack_number,
        shelf_number=payload.shelf_number,
        capacity=to_decimal(payload.capacity) if payload.capacity is not None else None,
    )
    db.add(location)
    await db.commit()
    await db.refresh(location)
    return location
