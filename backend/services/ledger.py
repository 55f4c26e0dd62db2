"""
Inventory ledger.

This module is the only writer of StockRecord.quantity. Every quantity change
appends exactly one InventoryLog row (change == after - before). Records that
reach zero are deleted instead of being kept at zero.

Callers own the transaction: nothing here commits.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from db.database import (
    InboundOrder as InboundOrderModel,
    InventoryLog as InventoryLogModel,
    OutboundOrder as OutboundOrderModel,
    StockRecord as StockRecordModel,
    Warehouse as WarehouseModel,
)
from schemas.inventory import InventoryFilters, InventoryLogFilters

logger = logging.getLogger(__name__)

AVAILABLE = "available"


def to_decimal(x) -> Decimal:
    if x is None:
        return Decimal("0")
    if isinstance(x, Decimal):
        return x
    return Decimal(str(x))


async def find_available_batch(
    db: AsyncSession,
    *,
    warehouse_id: UUID,
    product_name: str,
    batch_id: Optional[str],
) -> Optional[StockRecordModel]:
    """The available record an inbound item merges into, if any (NULL batch matches NULL batch)."""
    stmt = select(StockRecordModel).where(
        StockRecordModel.warehouse_id == warehouse_id,
        StockRecordModel.product_name == product_name,
        StockRecordModel.status == AVAILABLE,
    )
    if batch_id is None:
        stmt = stmt.where(StockRecordModel.batch_id.is_(None))
    else:
        stmt = stmt.where(StockRecordModel.batch_id == batch_id)
    res = await db.execute(stmt.order_by(StockRecordModel.created_at.asc()).with_for_update())
    return res.scalars().first()


async def list_fifo_batches(
    db: AsyncSession,
    *,
    warehouse_id: UUID,
    product_name: str,
) -> List[StockRecordModel]:
    """Available batches of a product, oldest inbound first; ties keep insertion order."""
    res = await db.execute(
        select(StockRecordModel)
        .where(
            StockRecordModel.warehouse_id == warehouse_id,
            StockRecordModel.product_name == product_name,
            StockRecordModel.status == AVAILABLE,
        )
        .order_by(
            StockRecordModel.inbound_date.asc().nulls_last(),
            StockRecordModel.created_at.asc(),
            StockRecordModel.id.asc(),
        )
        .with_for_update()
    )
    return list(res.scalars().all())


def append_log(
    db: AsyncSession,
    *,
    inventory_id: UUID,
    operation_type: str,
    before: Decimal,
    after: Decimal,
    reference_order_id: Optional[UUID],
    operation_by: Optional[UUID] = None,
    remark: Optional[str] = None,
) -> InventoryLogModel:
    entry = InventoryLogModel(
        inventory_id=inventory_id,
        operation_type=operation_type,
        change_quantity=after - before,
        before_quantity=before,
        after_quantity=after,
        reference_order_id=reference_order_id,
        operation_by=operation_by,
        remark=remark,
    )
    db.add(entry)
    return entry


async def receive_into(
    db: AsyncSession,
    record: StockRecordModel,
    quantity: Decimal,
    *,
    reference_order_id: Optional[UUID],
    operation_by: Optional[UUID] = None,
    remark: Optional[str] = None,
) -> InventoryLogModel:
    before = to_decimal(record.quantity)
    after = before + quantity
    record.quantity = after
    await db.flush()
    return append_log(
        db,
        inventory_id=record.id,
        operation_type="inbound",
        before=before,
        after=after,
        reference_order_id=reference_order_id,
        operation_by=operation_by,
        remark=remark,
    )


async def create_batch(
    db: AsyncSession,
    *,
    warehouse_id: UUID,
    product_name: str,
    quantity: Decimal,
    unit: str,
    location_id: Optional[UUID] = None,
    batch_id: Optional[str] = None,
    expiration_date: Optional[date] = None,
    source_order_id: Optional[UUID] = None,
    inbound_date: Optional[date] = None,
    reference_order_id: Optional[UUID] = None,
    operation_by: Optional[UUID] = None,
    remark: Optional[str] = None,
) -> Tuple[StockRecordModel, InventoryLogModel]:
    record = StockRecordModel(
        warehouse_id=warehouse_id,
        location_id=location_id,
        product_name=product_name,
        batch_id=batch_id,
        source_order_id=source_order_id,
        quantity=quantity,
        unit=unit,
        status=AVAILABLE,
        expiration_date=expiration_date,
        inbound_date=inbound_date or date.today(),
    )
    db.add(record)
    await db.flush()
    entry = append_log(
        db,
        inventory_id=record.id,
        operation_type="inbound",
        before=Decimal("0"),
        after=quantity,
        reference_order_id=reference_order_id,
        operation_by=operation_by,
        remark=remark,
    )
    return record, entry


async def deduct_from(
    db: AsyncSession,
    record: StockRecordModel,
    quantity: Decimal,
    *,
    reference_order_id: Optional[UUID],
    operation_by: Optional[UUID] = None,
    remark: Optional[str] = None,
) -> InventoryLogModel:
    before = to_decimal(record.quantity)
    if quantity > before:
        raise ValueError(f"cannot deduct {quantity} from stock record {record.id} holding {before}")
    after = before - quantity
    inventory_id = record.id

    if after == 0:
        logger.debug("Stock record %s emptied; removing it", inventory_id)
        await db.delete(record)
    else:
        record.quantity = after
    await db.flush()

    return append_log(
        db,
        inventory_id=inventory_id,
        operation_type="outbound",
        before=before,
        after=after,
        reference_order_id=reference_order_id,
        operation_by=operation_by,
        remark=remark,
    )


async def query_inventory(
    db: AsyncSession,
    organization_id: UUID,
    filters: InventoryFilters,
) -> Tuple[List[StockRecordModel], int]:
    stmt = (
        select(StockRecordModel)
        .join(WarehouseModel, StockRecordModel.warehouse_id == WarehouseModel.id)
        .where(WarehouseModel.organization_id == organization_id)
    )
    if filters.warehouse_id:
        stmt = stmt.where(StockRecordModel.warehouse_id == filters.warehouse_id)
    if filters.location_id:
        stmt = stmt.where(StockRecordModel.location_id == filters.location_id)
    if filters.product_name:
        qq = f"%{filters.product_name.lower()}%"
        stmt = stmt.where(func.lower(StockRecordModel.product_name).like(qq))
    if filters.batch_id:
        stmt = stmt.where(StockRecordModel.batch_id == filters.batch_id)
    if filters.status:
        stmt = stmt.where(StockRecordModel.status == filters.status)
    if filters.expiration_date_from:
        stmt = stmt.where(StockRecordModel.expiration_date >= filters.expiration_date_from)
    if filters.expiration_date_to:
        stmt = stmt.where(StockRecordModel.expiration_date <= filters.expiration_date_to)

    total = (await db.execute(select(func.count()).select_from(stmt.subquery()))).scalar_one()

    offset = (filters.page - 1) * filters.limit
    res = await db.execute(
        stmt.options(selectinload(StockRecordModel.warehouse), selectinload(StockRecordModel.location))
        .order_by(StockRecordModel.inbound_date.desc(), StockRecordModel.created_at.desc())
        .offset(offset)
        .limit(filters.limit)
    )
    return list(res.scalars().all()), int(total)


async def list_inventory_logs(
    db: AsyncSession,
    organization_id: UUID,
    filters: InventoryLogFilters,
) -> Tuple[List[InventoryLogModel], int]:
    """
    Audit trail, newest first.

    Log rows carry no warehouse (their stock record may be gone), so they are
    scoped through the inbound/outbound order they reference.
    """
    stmt = select(InventoryLogModel).where(
        or_(
            InventoryLogModel.reference_order_id.in_(
                select(InboundOrderModel.id).where(InboundOrderModel.organization_id == organization_id)
            ),
            InventoryLogModel.reference_order_id.in_(
                select(OutboundOrderModel.id).where(OutboundOrderModel.organization_id == organization_id)
            ),
        )
    )
    if filters.inventory_id:
        stmt = stmt.where(InventoryLogModel.inventory_id == filters.inventory_id)
    if filters.reference_order_id:
        stmt = stmt.where(InventoryLogModel.reference_order_id == filters.reference_order_id)
    if filters.operation_type:
        stmt = stmt.where(InventoryLogModel.operation_type == filters.operation_type)

    total = (await db.execute(select(func.count()).select_from(stmt.subquery()))).scalar_one()
    offset = (filters.page - 1) * filters.limit
    res = await db.execute(
        stmt.order_by(InventoryLogModel.operation_at.desc()).offset(offset).limit(filters.limit)
    )
    return list(res.scalars().all()), int(total)
