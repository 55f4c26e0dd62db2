from datetime import date
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator


StockStatus = Literal["available", "reserved", "damaged"]
AlertLevel = Literal["critical", "warning", "info"]
OperationType = Literal["inbound", "outbound"]


def _strip_required(v: str) -> str:
    v = (v or "").strip()
    if not v:
        raise ValueError("field is required")
    return v


def _strip_nullable(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    return v or None


class InboundConfirmItem(BaseModel):
    product_name: str
    quantity: float = Field(gt=0, allow_inf_nan=False)
    unit: str
    location_id: Optional[UUID] = None
    batch_id: Optional[str] = None
    expiration_date: Optional[date] = None

    @field_validator("product_name", "unit")
    @classmethod
    def _required(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("batch_id")
    @classmethod
    def _batch(cls, v: Optional[str]) -> Optional[str]:
        return _strip_nullable(v)


class InboundConfirmRequest(BaseModel):
    items: List[InboundConfirmItem]

    @field_validator("items")
    @classmethod
    def _non_empty(cls, v: List[InboundConfirmItem]) -> List[InboundConfirmItem]:
        if not v:
            raise ValueError("items must not be empty")
        return v


class OutboundConfirmItem(BaseModel):
    product_name: str
    requested_quantity: float = Field(gt=0, allow_inf_nan=False)
    actual_quantity: Optional[float] = Field(None, ge=0, allow_inf_nan=False)

    @field_validator("product_name")
    @classmethod
    def _required(cls, v: str) -> str:
        return _strip_required(v)


class OutboundConfirmRequest(BaseModel):
    items: List[OutboundConfirmItem]

    @field_validator("items")
    @classmethod
    def _non_empty(cls, v: List[OutboundConfirmItem]) -> List[OutboundConfirmItem]:
        if not v:
            raise ValueError("items must not be empty")
        return v


class InventoryFilters(BaseModel):
    warehouse_id: Optional[UUID] = None
    location_id: Optional[UUID] = None
    product_name: Optional[str] = None
    batch_id: Optional[str] = None
    status: Optional[StockStatus] = None
    expiration_date_from: Optional[date] = None
    expiration_date_to: Optional[date] = None
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=100)

    @field_validator("product_name", "batch_id")
    @classmethod
    def _strip(cls, v: Optional[str]) -> Optional[str]:
        return _strip_nullable(v)

    @model_validator(mode="after")
    def _date_range(self):
        if (
            self.expiration_date_from
            and self.expiration_date_to
            and self.expiration_date_from > self.expiration_date_to
        ):
            raise ValueError("expiration_date_from must be on or before expiration_date_to")
        return self


class AlertFilters(BaseModel):
    alert_level: Optional[AlertLevel] = None
    is_resolved: Optional[bool] = None
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=100)


class InventoryLogFilters(BaseModel):
    inventory_id: Optional[UUID] = None
    reference_order_id: Optional[UUID] = None
    operation_type: Optional[OperationType] = None
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=100)
