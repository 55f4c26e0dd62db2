"""
Inbound confirmation: receive the items of a draft inbound order into stock.

The whole confirmation is one transaction. Stock merges, new batches, log
rows, the status change and any expiration alerts commit together or not at
all.
"""

import logging
from typing import List, Optional, Set
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import AppError, OrderStateError, StorageError, ValidationError
from db.base import utcnow
from db.database import (
    InboundOrder as InboundOrderModel,
    WarehouseLocation as WarehouseLocationModel,
)
from schemas.inventory import InboundConfirmItem
from services.alerts import check_expiration_alerts
from services.ledger import create_batch, find_available_batch, receive_into, to_decimal
from services.orders import get_inbound_order

logger = logging.getLogger(__name__)


async def check_locations(db: AsyncSession, warehouse_id: UUID, location_ids: Set[UUID]) -> None:
    res = await db.execute(
        select(WarehouseLocationModel.id).where(
            WarehouseLocationModel.warehouse_id == warehouse_id,
            WarehouseLocationModel.id.in_(location_ids),
        )
    )
    missing = location_ids - set(res.scalars().all())
    if missing:
        raise ValidationError(
            "Location not in this warehouse: " + ", ".join(sorted(str(m) for m in missing))
        )


async def confirm_inbound_order(
    db: AsyncSession,
    order_id: UUID,
    organization_id: UUID,
    items: List[InboundConfirmItem],
    user_id: Optional[UUID] = None,
) -> InboundOrderModel:
    try:
        order = await get_inbound_order(db, order_id, organization_id, for_update=True)
        if order.status != "draft":
            raise OrderStateError(f"Inbound order {order.inbound_number} is {order.status}, expected draft")

        warehouse_id = order.warehouse_id
        location_ids = {item.location_id for item in items if item.location_id}
        if location_ids:
            await check_locations(db, warehouse_id, location_ids)

        for item in items:
            quantity = to_decimal(item.quantity)
            remark = f"Inbound of {item.product_name}"
            existing = await find_available_batch(
                db,
                warehouse_id=warehouse_id,
                product_name=item.product_name,
                batch_id=item.batch_id,
            )
            if existing:
                await receive_into(
                    db,
                    existing,
                    quantity,
                    reference_order_id=order.id,
                    operation_by=user_id,
                    remark=remark,
                )
            else:
                await create_batch(
                    db,
                    warehouse_id=warehouse_id,
                    product_name=item.product_name,
                    quantity=quantity,
                    unit=item.unit,
                    location_id=item.location_id,
                    batch_id=item.batch_id,
                    expiration_date=item.expiration_date,
                    source_order_id=order.purchase_order_id,
                    reference_order_id=order.id,
                    operation_by=user_id,
                    remark=remark,
                )

        order.status = "confirmed"
        order.confirmed_at = utcnow()
        await check_expiration_alerts(db, warehouse_id)
        await db.commit()
    except AppError as e:
        await db.rollback()
        logger.warning("Inbound order %s rejected: %s", order_id, e.message)
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("[inbound] confirm %s failed", order_id)
        raise StorageError("Failed to confirm inbound order") from e

    logger.info("Inbound order %s confirmed with %d item(s)", order_id, len(items))
    return await get_inbound_order(db, order_id, organization_id)
