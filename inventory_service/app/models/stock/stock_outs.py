# app/models/stock/stock_outs.py
import uuid
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Numeric, String, Uuid, func
from sqlalchemy.orm import relationship
from shared.core.database import Base


class StockOut(Base):
    __tablename__ = "stock_outs"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    stock_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("stock_items.id", ondelete="SET NULL"),
        nullable=True
    )
    transaction_id = Column(String(64), nullable=False, index=True)
    # remaining sold quantity; sales returns decrement it
    quantity = Column(Numeric(14, 3), nullable=False, default=0)
    sold_price = Column(Numeric(14, 2))
    client_name = Column(String(200))
    client_email = Column(String(200))
    client_phone = Column(String(32))
    payment_method = Column(String(16))
    admin_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    employee_id = Column(String(64))
    is_deleted = Column(Boolean, default=False, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    stock = relationship("StockItem", back_populates="stock_outs")
    return_items = relationship("SalesReturnItem", back_populates="stock_out")
