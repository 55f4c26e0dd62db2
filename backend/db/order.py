import uuid
from sqlalchemy import Column, Date, DateTime, ForeignKey, Numeric, String, Text, Uuid
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin, utcnow


class InboundOrder(TimestampMixin, Base):
    __tablename__ = "inbound_orders"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id = Column(Uuid, nullable=False, index=True)
    purchase_order_id = Column(Uuid, nullable=True, index=True)
    inbound_number = Column(String, nullable=False, index=True)  # IB-YYYYMMDD-NNNN
    warehouse_id = Column(Uuid, ForeignKey("warehouses.id", ondelete="RESTRICT"), nullable=False, index=True)
    status = Column(Text, nullable=False, default="draft", index=True)  # draft|confirmed|completed
    total_quantity = Column(Numeric, nullable=False, default=0)
    created_by = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    confirmed_at = Column(DateTime(timezone=True), nullable=True)

    warehouse = relationship("Warehouse")
    items = relationship(
        "InboundOrderItem",
        back_populates="inbound_order",
        cascade="all, delete-orphan",
        order_by="InboundOrderItem.created_at",
    )


class InboundOrderItem(Base):
    __tablename__ = "inbound_order_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    inbound_order_id = Column(Uuid, ForeignKey("inbound_orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_name = Column(String, nullable=False)
    quantity = Column(Numeric, nullable=False)
    unit = Column(String, nullable=False)
    location_id = Column(Uuid, ForeignKey("warehouse_locations.id", ondelete="SET NULL"), nullable=True)
    batch_id = Column(String, nullable=True)
    expiration_date = Column(Date, nullable=True)
    remark = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    inbound_order = relationship("InboundOrder", back_populates="items")


class OutboundOrder(TimestampMixin, Base):
    __tablename__ = "outbound_orders"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id = Column(Uuid, nullable=False, index=True)
    outbound_number = Column(String, nullable=False, index=True)  # OB-YYYYMMDD-NNNN
    warehouse_id = Column(Uuid, ForeignKey("warehouses.id", ondelete="RESTRICT"), nullable=False, index=True)
    # Shipping/sales order this outbound serves (opaque)
    related_order_id = Column(Uuid, nullable=True, index=True)
    status = Column(Text, nullable=False, default="draft", index=True)
    total_quantity = Column(Numeric, nullable=False, default=0)
    created_by = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    confirmed_at = Column(DateTime(timezone=True), nullable=True)

    warehouse = relationship("Warehouse")
    items = relationship(
        "OutboundOrderItem",
        back_populates="outbound_order",
        cascade="all, delete-orphan",
        order_by="OutboundOrderItem.created_at",
    )


class OutboundOrderItem(Base):
    __tablename__ = "outbound_order_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    outbound_order_id = Column(Uuid, ForeignKey("outbound_orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_name = Column(String, nullable=False)

    requested_quantity = Column(Numeric, nullable=False)
    # Filled in on confirmation
    actual_quantity = Column(Numeric, nullable=True)
    unit = Column(String, nullable=False)
    batch_id = Column(String, nullable=True)
    remark = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    outbound_order = relationship("OutboundOrder", back_populates="items")
