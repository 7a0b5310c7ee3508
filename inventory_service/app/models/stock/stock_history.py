# app/models/stock/stock_history.py
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, Text, Uuid, event
from sqlalchemy.orm import relationship
from shared.core.database import Base
from shared.core.exceptions import BusinessRuleViolation


class StockHistory(Base):
    """Movement Ledger row. Append-only."""

    __tablename__ = "stock_history"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    stock_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("stock_items.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    movement_type = Column(String(16), nullable=False, index=True)
    source_type = Column(String(16), nullable=False)
    # sales return id, stock-out id ... whatever produced the movement
    source_id = Column(Uuid(as_uuid=True), nullable=True, index=True)
    qty_before = Column(Numeric(14, 3), nullable=False)
    qty_change = Column(Numeric(14, 3), nullable=False)
    qty_after = Column(Numeric(14, 3), nullable=False)
    unit_price = Column(Numeric(14, 2))
    notes = Column(Text)
    created_by_admin_id = Column(Uuid(as_uuid=True), nullable=True)
    created_by_employee_id = Column(String(64), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True
    )

    stock = relationship("StockItem")


@event.listens_for(StockHistory, "before_update")
def _reject_history_update(mapper, connection, target):
    raise BusinessRuleViolation("Stock history entries cannot be modified")


@event.listens_for(StockHistory, "before_delete")
def _reject_history_delete(mapper, connection, target):
    raise BusinessRuleViolation("Stock history entries cannot be deleted")
