from typing import Optional

from pydantic import BaseModel, field_validator


class WarehouseCreate(BaseModel):
    name: str
    location: Optional[str] = None
    capacity: Optional[float] = None
    temperature_controlled: bool = False

    @field_validator("name")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("field is required")
        return v


class WarehouseLocationCreate(BaseModel):
    location_code: str
    rack_number: Optional[int] = None
    shelf_number: Optional[int] = None
    capacity: Optional[float] = None

    @field_validator("location_code")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("field is required")
        return v
