import uuid
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin, utcnow


class Warehouse(TimestampMixin, Base):
    __tablename__ = "warehouses"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id = Column(Uuid, nullable=False, index=True)
    name = Column(String, nullable=False)
    location = Column(Text, nullable=True)
    capacity = Column(Numeric, nullable=True)
    temperature_controlled = Column(Boolean, nullable=False, default=False)

    locations = relationship("WarehouseLocation", back_populates="warehouse", cascade="all, delete-orphan")

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "organization_id": self.organization_id,
            "name": self.name,
            "location": self.location,
            "capacity": float(self.capacity) if self.capacity is not None else None,
            "temperature_controlled": bool(self.temperature_controlled),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


class WarehouseLocation(Base):
    __tablename__ = "warehouse_locations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    warehouse_id = Column(Uuid, ForeignKey("warehouses.id", ondelete="CASCADE"), nullable=False, index=True)
    location_code = Column(String, nullable=False)
    rack_number = Column(Integer, nullable=True)
    shelf_number = Column(Integer, nullable=True)
    capacity = Column(Numeric, nullable=True)
    current_load = Column(Numeric, nullable=False, default=0)
    is_available = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    warehouse = relationship("Warehouse", back_populates="locations")

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "warehouse_id": self.warehouse_id,
            "location_code": self.location_code,
            "rack_number": self.rack_number,
            "shelf_number": self.shelf_number,
            "capacity": float(self.capacity) if self.capacity is not None else None,
            "current_load": float(self.current_load or 0),
            "is_available": bool(self.is_available),
            "created_at": self.created_at,
        }
