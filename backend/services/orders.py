import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.errors import NotFoundError
from db.database import (
    InboundOrder as InboundOrderModel,
    InboundOrderItem as InboundOrderItemModel,
    OutboundOrder as OutboundOrderModel,
    OutboundOrderItem as OutboundOrderItemModel,
    Warehouse as WarehouseModel,
)
from schemas.orders import InboundOrderCreate, OutboundOrderCreate
from services.ledger import to_decimal

logger = logging.getLogger(__name__)


async def next_order_number(
    db: AsyncSession,
    *,
    prefix: str,
    number_column,
    organization_column,
    organization_id: UUID,
    on: Optional[date] = None,
) -> str:
    """
    `{prefix}-YYYYMMDD-NNNN`, NNNN being the organization's count of numbers
    already issued on that day plus one.
    """
    day = (on or date.today()).strftime("%Y%m%d")
    stem = f"{prefix}-{day}-"
    res = await db.execute(
        select(func.count())
        .where(organization_column == organization_id)
        .where(number_column.like(f"{stem}%"))
    )
    count = int(res.scalar_one() or 0)
    return f"{stem}{count + 1:04d}"


async def get_owned_warehouse(db: AsyncSession, warehouse_id: UUID, organization_id: UUID) -> WarehouseModel:
    res = await db.execute(
        select(WarehouseModel).where(
            WarehouseModel.id == warehouse_id,
            WarehouseModel.organization_id == organization_id,
        )
    )
    warehouse = res.scalar_one_or_none()
    if not warehouse:
        raise NotFoundError("Warehouse not found")
    return warehouse


async def get_inbound_order(
    db: AsyncSession,
    order_id: UUID,
    organization_id: UUID,
    *,
    for_update: bool = False,
) -> InboundOrderModel:
    stmt = (
        select(InboundOrderModel)
        .options(selectinload(InboundOrderModel.items), selectinload(InboundOrderModel.warehouse))
        .where(
            InboundOrderModel.id == order_id,
            InboundOrderModel.organization_id == organization_id,
        )
        .execution_options(populate_existing=True)
    )
    if for_update:
        stmt = stmt.with_for_update(of=InboundOrderModel)
    order = (await db.execute(stmt)).scalar_one_or_none()
    if not order:
        raise NotFoundError("Inbound order not found")
    return order


async def get_outbound_order(
    db: AsyncSession,
    order_id: UUID,
    organization_id: UUID,
    *,
    for_update: bool = False,
) -> OutboundOrderModel:
    stmt = (
        select(OutboundOrderModel)
        .options(selectinload(OutboundOrderModel.items), selectinload(OutboundOrderModel.warehouse))
        .where(
            OutboundOrderModel.id == order_id,
            OutboundOrderModel.organization_id == organization_id,
        )
        .execution_options(populate_existing=True)
    )
    if for_update:
        stmt = stmt.with_for_update(of=OutboundOrderModel)
    order = (await db.execute(stmt)).scalar_one_or_none()
    if not order:
        raise NotFoundError("Outbound order not found")
    return order


async def create_inbound_order(
    db: AsyncSession,
    organization_id: UUID,
    user_id: Optional[UUID],
    payload: InboundOrderCreate,
) -> InboundOrderModel:
    await get_owned_warehouse(db, payload.warehouse_id, organization_id)

    number = await next_order_number(
        db,
        prefix="IB",
        number_column=InboundOrderModel.inbound_number,
        organization_column=InboundOrderModel.organization_id,
        organization_id=organization_id,
    )
    total = sum((to_decimal(it.quantity) for it in payload.items), Decimal("0"))
    order = InboundOrderModel(
        organization_id=organization_id,
        purchase_order_id=payload.purchase_order_id,
        inbound_number=number,
        warehouse_id=payload.warehouse_id,
        status="draft",
        total_quantity=total,
        created_by=user_id,
        items=[
            InboundOrderItemModel(
                product_name=it.product_name,
                quantity=to_decimal(it.quantity),
                unit=it.unit,
                location_id=it.location_id,
                batch_id=it.batch_id,
                expiration_date=it.expiration_date,
                remark=it.remark,
            )
            for it in payload.items
        ],
    )
    db.add(order)
    await db.commit()
    logger.info("Inbound order %s created (%s)", order.id, number)
    return await get_inbound_order(db, order.id, organization_id)


async def create_outbound_order(
    db: AsyncSession,
    organization_id: UUID,
    user_id: Optional[UUID],
    payload: OutboundOrderCreate,
) -> OutboundOrderModel:
    await get_owned_warehouse(db, payload.warehouse_id, organization_id)

    number = await next_order_number(
        db,
        prefix="OB",
        number_column=OutboundOrderModel.outbound_number,
        organization_column=OutboundOrderModel.organization_id,
        organization_id=organization_id,
    )
    total = sum((to_decimal(it.requested_quantity) for it in payload.items), Decimal("0"))
    order = OutboundOrderModel(
        organization_id=organization_id,
        outbound_number=number,
        warehouse_id=payload.warehouse_id,
        related_order_id=payload.related_order_id,
        status="draft",
        total_quantity=total,
        created_by=user_id,
        items=[
            OutboundOrderItemModel(
                product_name=it.product_name,
                requested_quantity=to_decimal(it.requested_quantity),
                unit=it.unit,
                batch_id=it.batch_id,
                remark=it.remark,
            )
            for it in payload.items
        ],
    )
    db.add(order)
    await db.commit()
    logger.info("Outbound order %s created (%s)", order.id, number)
    return await get_outbound_order(db, order.id, organization_id)


async def list_inbound_orders(
    db: AsyncSession,
    organization_id: UUID,
    *,
    status_filter: Optional[str] = None,
    page: int = 1,
    limit: int = 20,
) -> Tuple[List[InboundOrderModel], int]:
    stmt = select(InboundOrderModel).where(InboundOrderModel.organization_id == organization_id)
    if status_filter:
        stmt = stmt.where(InboundOrderModel.status == status_filter)

    total = (await db.execute(select(func.count()).select_from(stmt.subquery()))).scalar_one()
    res = await db.execute(
        stmt.options(selectinload(InboundOrderModel.items), selectinload(InboundOrderModel.warehouse))
        .order_by(InboundOrderModel.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(res.scalars().all()), int(total)


async def list_outbound_orders(
    db: AsyncSession,
    organization_id: UUID,
    *,
    status_filter: Optional[str] = None,
    page: int = 1,
    limit: int = 20,
) -> Tuple[List[OutboundOrderModel], int]:
    stmt = select(OutboundOrderModel).where(OutboundOrderModel.organization_id == organization_id)
    if status_filter:
        stmt = stmt.where(OutboundOrderModel.status == status_filter)

    total = (await db.execute(select(func.count()).select_from(stmt.subquery()))).scalar_one()
    res = await db.execute(
        stmt.options(selectinload(OutboundOrderModel.items), selectinload(OutboundOrderModel.warehouse))
        .order_by(OutboundOrderModel.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(res.scalars().all()), int(total)
