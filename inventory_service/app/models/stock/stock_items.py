# app/models/stock/stock_items.py
import uuid
from sqlalchemy import (Boolean, Column, DateTime, ForeignKey, Integer, Numeric,
                        String, UniqueConstraint, Uuid, func)
from sqlalchemy.orm import relationship
from shared.core.database import Base


class StockItem(Base):
    """Quantity Store row: on-hand quantity and unit cost of one SKU for one admin."""

    __tablename__ = "stock_items"
    __table_args__ = (
        UniqueConstraint("admin_id", "sku", name="uq_stock_items_admin_sku"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    admin_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    sku = Column(String(64), nullable=False)
    item_name = Column(String(200), nullable=False)
    category_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("stock_categories.id", ondelete="SET NULL"),
        nullable=True
    )
    supplier = Column(String(200))
    unit_of_measure = Column(String(16), default="PCS", nullable=False)
    qty_on_hand = Column(Numeric(14, 3), default=0, nullable=False)
    unit_cost = Column(Numeric(14, 2), default=0, nullable=False)
    # exact qty_on_hand * unit_cost: scale 3 + scale 2
    total_value = Column(Numeric(20, 5), default=0, nullable=False)
    warehouse_location = Column(String(128), default="N/A")
    reorder_level = Column(Numeric(14, 3), default=0)
    received_date = Column(DateTime(timezone=True), server_default=func.now())
    expiry_date = Column(DateTime(timezone=True), nullable=True)

    # optimistic lock counter, bumped by every UPDATE
    version = Column(Integer, nullable=False, default=1)

    is_deleted = Column(Boolean, default=False, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __mapper_args__ = {"version_id_col": version}

    category = relationship("StockCategory", back_populates="stocks")
    stock_outs = relationship("StockOut", back_populates="stock")
