from typing import Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import current_active_user, current_organization_id
from core.responses import ok, paginated
from db.database import get_async_session, OutboundOrder as OutboundOrderModel
from db.users import User
from schemas.inventory import OutboundConfirmRequest
from schemas.orders import OutboundOrderCreate, OutboundOrderItemRead, OutboundOrderRead
from services.orders import create_outbound_order, get_outbound_order, list_outbound_orders
from services.outbound import confirm_outbound_order

router = APIRouter()


def _serialize_outbound_order(o: OutboundOrderModel) -> OutboundOrderRead:
    wh = getattr(o, "warehouse", None)
    items_out: List[OutboundOrderItemRead] = []
    for it in (o.items or []):
        items_out.append(
            OutboundOrderItemRead(
                id=it.id,
                product_name=it.product_name,
                requested_quantity=float(it.requested_quantity),
                actual_quantity=float(it.actual_quantity) if it.actual_quantity is not None else None,
                unit=it.unit,
                batch_id=it.batch_id,
                remark=it.remark,
            )
        )
    return OutboundOrderRead(
        id=o.id,
        organization_id=o.organization_id,
        outbound_number=o.outbound_number,
        warehouse_id=o.warehouse_id,
        warehouse_name=wh.name if wh else None,
        related_order_id=o.related_order_id,
        status=o.status,
        total_quantity=float(o.total_quantity or 0),
        created_by=o.created_by,
        created_at=o.created_at,
        confirmed_at=o.confirmed_at,
        updated_at=o.updated_at,
        items=items_out,
    )


@router.get("/outbound-orders", response_model=Dict)
async def list_orders(
    status_filter: Optional[str] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_async_session),
    organization_id: UUID = Depends(current_organization_id),
):
    rows, total = await list_outbound_orders(
        db, organization_id, status_filter=status_filter, page=page, limit=limit
    )
    return ok(paginated([_serialize_outbound_order(o) for o in rows], total, page, limit))


@router.post("/outbound-orders", response_model=Dict, status_code=status.HTTP_201_CREATED)
async def create_order(
    payload: OutboundOrderCreate,
    db: AsyncSession = Depends(get_async_session),
    organization_id: UUID = Depends(current_organization_id),
    user: User = Depends(current_active_user),
):
    order = await create_outbound_order(db, organization_id, user.id, payload)
    return ok(_serialize_outbound_order(order), message="Outbound order created", code=201)


@router.get("/outbound-orders/{order_id}", response_model=Dict)
async def get_order(
    order_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    organization_id: UUID = Depends(current_organization_id),
):
    order = await get_outbound_order(db, order_id, organization_id)
    return ok(_serialize_outbound_order(order))


@router.post("/outbound-orders/{order_id}/confirm", response_model=Dict)
async def confirm_order(
    order_id: UUID,
    payload: OutboundConfirmRequest,
    db: AsyncSession = Depends(get_async_session),
    organization_id: UUID = Depends(current_organization_id),
    user: User = Depends(current_active_user),
):
    order = await confirm_outbound_order(db, order_id, organization_id, payload.items, user_id=user.id)
    return ok(_serialize_outbound_order(order), message="Outbound order confirmed")
