from typing import Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import current_active_user, current_organization_id
from core.responses import ok, paginated
from db.database import get_async_session, InboundOrder as InboundOrderModel
from db.users import User
from schemas.inventory import InboundConfirmRequest
from schemas.orders import InboundOrderCreate, InboundOrderItemRead, InboundOrderRead
from services.inbound import confirm_inbound_order
from services.orders import create_inbound_order, get_inbound_order, list_inbound_orders

router = APIRouter()


def _serialize_inbound_order(o: InboundOrderModel) -> InboundOrderRead:
    wh = getattr(o, "warehouse", None)
    items_out: List[InboundOrderItemRead] = []
    for it in (o.items or []):
        items_out.append(
            InboundOrderItemRead(
                id=it.id,
                product_name=it.product_name,
                quantity=float(it.quantity),
                unit=it.unit,
                location_id=it.location_id,
                batch_id=it.batch_id,
                expiration_date=it.expiration_date,
                remark=it.remark,
            )
        )
    return InboundOrderRead(
        id=o.id,
        organization_id=o.organization_id,
        purchase_order_id=o.purchase_order_id,
        inbound_number=o.inbound_number,
        warehouse_id=o.warehouse_id,
        warehouse_name=wh.name if wh else None,
        status=o.status,
        total_quantity=float(o.total_quantity or 0),
        created_by=o.created_by,
        created_at=o.created_at,
        confirmed_at=o.confirmed_at,
        updated_at=o.updated_at,
        items=items_out,
    )


@router.get("/inbound-orders", response_model=Dict)
async def list_orders(
    status_filter: Optional[str] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_async_session),
    organization_id: UUID = Depends(current_organization_id),
):
    rows, total = await list_inbound_orders(
        db, organization_id, status_filter=status_filter, page=page, limit=limit
    )
    return ok(paginated([_serialize_inbound_order(o) for o in rows], total, page, limit))


@router.post("/inbound-orders", response_model=Dict, status_code=status.HTTP_201_CREATED)
async def create_order(
    payload: InboundOrderCreate,
    db: AsyncSession = Depends(get_async_session),
    organization_id: UUID = Depends(current_organization_id),
    user: User = Depends(current_active_user),
):
    order = await create_inbound_order(db, organization_id, user.id, payload)
    return ok(_serialize_inbound_order(order), message="Inbound order created", code=201)


@router.get("/inbound-orders/{order_id}", response_model=Dict)
async def get_order(
    order_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    organization_id: UUID = Depends(current_organization_id),
):
    order = await get_inbound_order(db, order_id, organization_id)
    return ok(_serialize_inbound_order(order))


@router.post("/inbound-orders/{order_id}/confirm", response_model=Dict)
async def confirm_order(
    order_id: UUID,
    payload: InboundConfirmRequest,
    db: AsyncSession = Depends(get_async_session),
    organization_id: UUID = Depends(current_organization_id),
    user: User = Depends(current_active_user),
):
    order = await confirm_inbound_order(db, order_id, organization_id, payload.items, user_id=user.id)
    return ok(_serialize_inbound_order(order), message="Inbound order confirmed")
