"""
Expiration alerting.

Alerts are snapshots: once raised they are not refreshed as days pass, and a
record with an unresolved alert of the same type is skipped.
"""

import logging
from datetime import date, timedelta
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.config import settings
from core.errors import NotFoundError
from db.base import utcnow
from db.database import (
    InventoryAlert as InventoryAlertModel,
    StockRecord as StockRecordModel,
    Warehouse as WarehouseModel,
)
from schemas.inventory import AlertFilters

logger = logging.getLogger(__name__)

EXPIRATION_WARNING = "expiration_warning"


def expiration_alert_level(days_until_expiration: int) -> str:
    return "critical" if days_until_expiration <= settings.expiration_critical_days else "warning"


async def has_unresolved_alert(db: AsyncSession, inventory_id: UUID, alert_type: str) -> bool:
    res = await db.execute(
        select(InventoryAlertModel.id)
        .where(
            InventoryAlertModel.inventory_id == inventory_id,
            InventoryAlertModel.alert_type == alert_type,
            InventoryAlertModel.is_resolved == False,  # noqa: E712
        )
        .limit(1)
    )
    return res.first() is not None


async def check_expiration_alerts(
    db: AsyncSession,
    warehouse_id: UUID,
    today: Optional[date] = None,
) -> List[InventoryAlertModel]:
    """
    Raise expiration alerts for available stock expiring within the warning window.

    - Window: today < expiration_date <= today + EXPIRATION_WARNING_DAYS.
    - critical when EXPIRATION_CRITICAL_DAYS or fewer days remain, warning otherwise.
    - Returns only the alerts created by this call. Does not commit.
    """
    today = today or date.today()
    warning_date = today + timedelta(days=settings.expiration_warning_days)

    res = await db.execute(
        select(StockRecordModel)
        .where(
            StockRecordModel.warehouse_id == warehouse_id,
            StockRecordModel.status == "available",
            StockRecordModel.expiration_date.is_not(None),
            StockRecordModel.expiration_date > today,
            StockRecordModel.expiration_date <= warning_date,
        )
        .order_by(StockRecordModel.expiration_date.asc(), StockRecordModel.created_at.asc())
    )
    expiring = res.scalars().all()

    created: List[InventoryAlertModel] = []
    for record in expiring:
        if await has_unresolved_alert(db, record.id, EXPIRATION_WARNING):
            continue

        days = (record.expiration_date - today).days
        alert = InventoryAlertModel(
            inventory_id=record.id,
            warehouse_id=warehouse_id,
            product_name=record.product_name,
            batch_id=record.batch_id,
            alert_type=EXPIRATION_WARNING,
            alert_level=expiration_alert_level(days),
            days_until_expiration=days,
            current_quantity=record.quantity,
            expiration_date=record.expiration_date,
            is_resolved=False,
        )
        db.add(alert)
        created.append(alert)

    if created:
        await db.flush()
        logger.info("Raised %d expiration alert(s) for warehouse %s", len(created), warehouse_id)
    return created


async def list_alerts(
    db: AsyncSession,
    organization_id: UUID,
    filters: AlertFilters,
) -> Tuple[List[InventoryAlertModel], int]:
    stmt = (
        select(InventoryAlertModel)
        .join(WarehouseModel, InventoryAlertModel.warehouse_id == WarehouseModel.id)
        .where(WarehouseModel.organization_id == organization_id)
    )
    if filters.alert_level:
        stmt = stmt.where(InventoryAlertModel.alert_level == filters.alert_level)
    if filters.is_resolved is not None:
        stmt = stmt.where(InventoryAlertModel.is_resolved == filters.is_resolved)

    total = (await db.execute(select(func.count()).select_from(stmt.subquery()))).scalar_one()
    offset = (filters.page - 1) * filters.limit
    res = await db.execute(
        stmt.options(selectinload(InventoryAlertModel.warehouse))
        .order_by(InventoryAlertModel.created_at.desc())
        .offset(offset)
        .limit(filters.limit)
    )
    return list(res.scalars().all()), int(total)


async def resolve_alert(db: AsyncSession, alert_id: UUID, organization_id: UUID) -> InventoryAlertModel:
    res = await db.execute(
        select(InventoryAlertModel)
        .join(WarehouseModel, InventoryAlertModel.warehouse_id == WarehouseModel.id)
        .options(selectinload(InventoryAlertModel.warehouse))
        .where(
            InventoryAlertModel.id == alert_id,
            WarehouseModel.organization_id == organization_id,
        )
    )
    alert = res.scalar_one_or_none()
    if not alert:
        raise NotFoundError("Alert not found")

    if not alert.is_resolved:
        alert.is_resolved = True
        alert.resolved_at = utcnow()
        await db.commit()
        logger.info("Alert %s resolved", alert_id)
    return alert
