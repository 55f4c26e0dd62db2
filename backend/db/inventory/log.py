import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, Text, Uuid

from ..base import Base, utcnow


class InventoryLog(Base):
    """Write-once audit row; inventory_id may outlive the stock record it names."""

    __tablename__ = "inventory_logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    inventory_id = Column(Uuid, nullable=True, index=True)

    operation_type = Column(Text, nullable=False, index=True)  # 'inbound' | 'outbound'
    change_quantity = Column(Numeric, nullable=False)
    before_quantity = Column(Numeric, nullable=False)
    after_quantity = Column(Numeric, nullable=False)

    reference_order_id = Column(Uuid, nullable=True, index=True)
    operation_by = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    operation_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    remark = Column(Text, nullable=True)

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "inventory_id": self.inventory_id,
            "operation_type": self.operation_type,
            "change_quantity": float(self.change_quantity),
            "before_quantity": float(self.before_quantity),
            "after_quantity": float(self.after_quantity),
            "reference_order_id": self.reference_order_id,
            "operation_by": self.operation_by,
            "operation_at": self.operation_at,
            "remark": self.remark,
        }
