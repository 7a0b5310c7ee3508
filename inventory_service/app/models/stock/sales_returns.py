# app/models/stock/sales_returns.py
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, Text, Uuid
from sqlalchemy.orm import relationship
from shared.core.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class SalesReturn(Base):
    __tablename__ = "sales_returns"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    transaction_id = Column(String(64), nullable=False, index=True)
    credit_note_id = Column(String(64), nullable=False, unique=True)
    reason = Column(Text)
    admin_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    items = relationship(
        "SalesReturnItem",
        back_populates="sales_return",
        order_by="SalesReturnItem.created_at",
        cascade="all, delete-orphan",
    )


class SalesReturnItem(Base):
    __tablename__ = "sales_return_items"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    sales_return_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("sales_returns.id", ondelete="CASCADE"),
        nullable=False
    )
    stock_out_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("stock_outs.id"),
        nullable=False
    )
    quantity = Column(Numeric(14, 3), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    sales_return = relationship("SalesReturn", back_populates="items")
    stock_out = relationship("StockOut", back_populates="return_items")
