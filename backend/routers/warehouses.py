from typing import Dict
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import current_organization_id
from core.responses import ok, paginated
from db.database import get_async_session
from schemas.warehouse import WarehouseCreate, WarehouseLocationCreate
from services import warehouses as warehouse_service

router = APIRouter()


@router.get("/warehouses", response_model=Dict)
async def list_warehouses(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_async_session),
    organization_id: UUID = Depends(current_organization_id),
):
    rows, total = await warehouse_service.list_warehouses(db, organization_id, page=page, limit=limit)
    return ok(paginated([w.to_schema for w in rows], total, page, limit))


@router.post("/warehouses", response_model=Dict, status_code=status.HTTP_201_CREATED)
async def create_warehouse(
    payload: WarehouseCreate,
    db: AsyncSession = Depends(get_async_session),
    organization_id: UUID = Depends(current_organization_id),
):
    warehouse = await warehouse_service.create_warehouse(db, organization_id, payload)
    return ok(warehouse.to_schema, message="Warehouse created", code=201)


@router.get("/warehouses/{warehouse_id}", response_model=Dict)
async def get_warehouse(
    warehouse_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    organization_id: UUID = Depends(current_organization_id),
):
    warehouse = await warehouse_service.get_warehouse(db, warehouse_id, organization_id)
    return ok(warehouse.to_schema)


@router.get("/warehouses/{warehouse_id}/locations", response_model=Dict)
async def list_locations(
    warehouse_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    organization_id: UUID = Depends(current_organization_id),
):
    rows = await warehouse_service.list_locations(db, warehouse_id, organization_id)
    return ok([loc.to_schema for loc in rows])


@router.post("/warehouses/{warehouse_id}/locations", response_model=Dict, status_code=status.HTTP_201_CREATED)
async def create_location(
    warehouse_id: UUID,
    payload: WarehouseLocationCreate,
    db: AsyncSession = Depends(get_async_session),
    organization_id: UUID = Depends(current_organization_id),
):
    location = await warehouse_service.create_location(db, warehouse_id, organization_id, payload)
    return ok(location.to_schema, message="Location created", code=201)
