import uuid

from sqlalchemy import Column, Date, ForeignKey, Index, Numeric, String, Text, Uuid, func
from sqlalchemy.orm import relationship

from ..base import Base, TimestampMixin


class StockRecord(TimestampMixin, Base):
    __tablename__ = "inventory"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    warehouse_id = Column(Uuid, ForeignKey("warehouses.id", ondelete="CASCADE"), nullable=False, index=True)
    location_id = Column(Uuid, ForeignKey("warehouse_locations.id", ondelete="SET NULL"), nullable=True, index=True)

    product_name = Column(String, nullable=False, index=True)
    batch_id = Column(String, nullable=True, index=True)
    # Purchase order the batch came in on (opaque, owned by purchasing)
    source_order_id = Column(Uuid, nullable=True)

    quantity = Column(Numeric, nullable=False, default=0)
    unit = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default="available", index=True)  # available|reserved|damaged

    expiration_date = Column(Date, nullable=True, index=True)
    inbound_date = Column(Date, nullable=True, index=True)

    warehouse = relationship("Warehouse")
    location = relationship("WarehouseLocation")

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "warehouse_id": self.warehouse_id,
            "location_id": self.location_id,
            "product_name": self.product_name,
            "batch_id": self.batch_id,
            "source_order_id": self.source_order_id,
            "quantity": float(self.quantity or 0),
            "unit": self.unit,
            "status": self.status,
            "expiration_date": self.expiration_date,
            "inbound_date": self.inbound_date,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


# At most one available record per (warehouse, product, batch); NULL batch counts as its own batch.
Index(
    "ux_inventory_available_batch",
    StockRecord.warehouse_id,
    StockRecord.product_name,
    func.coalesce(StockRecord.batch_id, ""),
    unique=True,
    postgresql_where=StockRecord.status == "available",
    sqlite_where=StockRecord.status == "available",
)
