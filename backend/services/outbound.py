"""
Outbound confirmation: deduct a draft outbound order from stock, FIFO.

Each product walks its available batches oldest inbound first. Emptied
batches are deleted. A shortfall on any product rolls back the whole order,
including products already deducted.
"""

import logging
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import AppError, InsufficientInventoryError, NoInventoryError, OrderStateError, StorageError
from db.base import utcnow
from db.database import OutboundOrder as OutboundOrderModel
from schemas.inventory import OutboundConfirmItem
from services.ledger import deduct_from, list_fifo_batches, to_decimal
from services.orders import get_outbound_order

logger = logging.getLogger(__name__)


async def deduct_fifo(
    db: AsyncSession,
    *,
    warehouse_id: UUID,
    product_name: str,
    quantity: Decimal,
    reference_order_id: UUID,
    operation_by: Optional[UUID] = None,
) -> None:
    batches = await list_fifo_batches(db, warehouse_id=warehouse_id, product_name=product_name)
    if not batches:
        raise NoInventoryError(product_name)

    available = sum((to_decimal(b.quantity) for b in batches), Decimal("0"))
    remaining = quantity
    for batch in batches:
        if remaining <= 0:
            break
        take = min(remaining, to_decimal(batch.quantity))
        await deduct_from(
            db,
            batch,
            take,
            reference_order_id=reference_order_id,
            operation_by=operation_by,
            remark=f"Outbound of {product_name}",
        )
        remaining -= take

    if remaining > 0:
        raise InsufficientInventoryError(product_name, quantity, available)


async def confirm_outbound_order(
    db: AsyncSession,
    order_id: UUID,
    organization_id: UUID,
    items: List[OutboundConfirmItem],
    user_id: Optional[UUID] = None,
) -> OutboundOrderModel:
    try:
        order = await get_outbound_order(db, order_id, organization_id, for_update=True)
        if order.status != "draft":
            raise OrderStateError(f"Outbound order {order.outbound_number} is {order.status}, expected draft")

        for item in items:
            actual = to_decimal(
                item.actual_quantity if item.actual_quantity is not None else item.requested_quantity
            )
            await deduct_fifo(
                db,
                warehouse_id=order.warehouse_id,
                product_name=item.product_name,
                quantity=actual,
                reference_order_id=order.id,
                operation_by=user_id,
            )
            for line in order.items:
                if line.product_name == item.product_name:
                    line.actual_quantity = actual

        order.status = "confirmed"
        order.confirmed_at = utcnow()
        await db.commit()
    except AppError as e:
        await db.rollback()
        logger.warning("Outbound order %s rejected: %s", order_id, e.message)
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("[outbound] confirm %s failed", order_id)
        raise StorageError("Failed to confirm outbound order") from e

    logger.info("Outbound order %s confirmed with %d item(s)", order_id, len(items))
    return await get_outbound_order(db, order_id, organization_id)
