import uuid

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import relationship

from ..base import Base, utcnow


class InventoryAlert(Base):
    __tablename__ = "inventory_alerts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    # Snapshot of the stock record; it may be deleted later, so no FK
    inventory_id = Column(Uuid, nullable=True, index=True)
    warehouse_id = Column(Uuid, ForeignKey("warehouses.id", ondelete="CASCADE"), nullable=True, index=True)

    product_name = Column(String, nullable=False)
    batch_id = Column(String, nullable=True)

    alert_type = Column(Text, nullable=False, index=True)  # expiration_warning|low_stock
    alert_level = Column(Text, nullable=False, index=True)  # critical|warning|info
    days_until_expiration = Column(Integer, nullable=True)
    current_quantity = Column(Numeric, nullable=False)
    threshold_quantity = Column(Numeric, nullable=True)
    expiration_date = Column(Date, nullable=True)

    is_resolved = Column(Boolean, nullable=False, default=False, index=True)
    resolved_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    warehouse = relationship("Warehouse")

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "inventory_id": self.inventory_id,
            "warehouse_id": self.warehouse_id,
            "product_name": self.product_name,
            "batch_id": self.batch_id,
            "alert_type": self.alert_type,
            "alert_level": self.alert_level,
            "days_until_expiration": self.days_until_expiration,
            "current_quantity": float(self.current_quantity),
            "threshold_quantity": float(self.threshold_quantity) if self.threshold_quantity is not None else None,
            "expiration_date": self.expiration_date,
            "is_resolved": bool(self.is_resolved),
            "resolved_at": self.resolved_at,
            "created_at": self.created_at,
        }
