from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


def _strip_required(v: str) -> str:
    v = (v or "").strip()
    if not v:
        raise ValueError("field is required")
    return v


class InboundOrderItemCreate(BaseModel):
    product_name: str
    quantity: float = Field(gt=0, allow_inf_nan=False)
    unit: str
    location_id: Optional[UUID] = None
    batch_id: Optional[str] = None
    expiration_date: Optional[date] = None
    remark: Optional[str] = None

    @field_validator("product_name", "unit")
    @classmethod
    def _required(cls, v: str) -> str:
        return _strip_required(v)


class InboundOrderCreate(BaseModel):
    purchase_order_id: Optional[UUID] = None
    warehouse_id: UUID
    items: List[InboundOrderItemCreate] = Field(min_length=1)


class OutboundOrderItemCreate(BaseModel):
    product_name: str
    requested_quantity: float = Field(gt=0, allow_inf_nan=False)
    unit: str
    batch_id: Optional[str] = None
    remark: Optional[str] = None

    @field_validator("product_name", "unit")
    @classmethod
    def _required(cls, v: str) -> str:
        return _strip_required(v)


class OutboundOrderCreate(BaseModel):
    warehouse_id: UUID
    related_order_id: Optional[UUID] = None
    items: List[OutboundOrderItemCreate] = Field(min_length=1)


class InboundOrderItemRead(BaseModel):
    id: UUID
    product_name: str
    quantity: float
    unit: str
    location_id: Optional[UUID] = None
    batch_id: Optional[str] = None
    expiration_date: Optional[date] = None
    remark: Optional[str] = None


class InboundOrderRead(BaseModel):
    id: UUID
    organization_id: UUID
    purchase_order_id: Optional[UUID] = None
    inbound_number: str
    warehouse_id: UUID
    warehouse_name: Optional[str] = None
    status: str
    total_quantity: float
    created_by: Optional[UUID] = None
    created_at: datetime
    confirmed_at: Optional[datetime] = None
    updated_at: datetime
    items: List[InboundOrderItemRead]


class OutboundOrderItemRead(BaseModel):
    id: UUID
    product_name: str
    requested_quantity: float
    actual_quantity: Optional[float] = None
    unit: str
    batch_id: Optional[str] = None
    remark: Optional[str] = None


class OutboundOrderRead(BaseModel):
    id: UUID
    organization_id: UUID
    outbound_number: str
    warehouse_id: UUID
    warehouse_name: Optional[str] = None
    related_order_id: Optional[UUID] = None
    status: str
    total_quantity: float
    created_by: Optional[UUID] = None
    created_at: datetime
    confirmed_at: Optional[datetime] = None
    updated_at: datetime
    items: List[OutboundOrderItemRead]
