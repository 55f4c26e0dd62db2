from typing import Annotated, Dict
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import current_organization_id
from core.responses import ok, paginated
from db.database import (
    get_async_session,
    InventoryAlert as InventoryAlertModel,
    StockRecord as StockRecordModel,
)
from schemas.inventory import AlertFilters, InventoryFilters, InventoryLogFilters
from services.alerts import list_alerts, resolve_alert
from services.ledger import list_inventory_logs, query_inventory

router = APIRouter()


def _serialize_stock(r: StockRecordModel) -> dict:
    out = r.to_schema
    wh = getattr(r, "warehouse", None)
    loc = getattr(r, "location", None)
    out["warehouse_name"] = wh.name if wh else None
    out["location_code"] = loc.location_code if loc else None
    return out


def _serialize_alert(a: InventoryAlertModel) -> dict:
    out = a.to_schema
    wh = getattr(a, "warehouse", None)
    out["warehouse_name"] = wh.name if wh else None
    return out


@router.get("/inventory", response_model=Dict)
async def get_inventory(
    filters: Annotated[InventoryFilters, Query()],
    db: AsyncSession = Depends(get_async_session),
    organization_id: UUID = Depends(current_organization_id),
):
    rows, total = await query_inventory(db, organization_id, filters)
    return ok(paginated([_serialize_stock(r) for r in rows], total, filters.page, filters.limit))


@router.get("/inventory-alerts", response_model=Dict)
async def get_inventory_alerts(
    filters: Annotated[AlertFilters, Query()],
    db: AsyncSession = Depends(get_async_session),
    organization_id: UUID = Depends(current_organization_id),
):
    rows, total = await list_alerts(db, organization_id, filters)
    return ok(paginated([_serialize_alert(a) for a in rows], total, filters.page, filters.limit))


@router.post("/inventory-alerts/{alert_id}/resolve", response_model=Dict)
async def resolve_inventory_alert(
    alert_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    organization_id: UUID = Depends(current_organization_id),
):
    alert = await resolve_alert(db, alert_id, organization_id)
    return ok(_serialize_alert(alert), message="Alert resolved")


@router.get("/inventory-logs", response_model=Dict)
async def get_inventory_logs(
    filters: Annotated[InventoryLogFilters, Query()],
    db: AsyncSession = Depends(get_async_session),
    organization_id: UUID = Depends(current_organization_id),
):
    rows, total = await list_inventory_logs(db, organization_id, filters)
    return ok(paginated([r.to_schema for r in rows], total, filters.page, filters.limit))
