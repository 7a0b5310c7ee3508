# app/crud/stock/stock_history_crud.py
from decimal import Decimal
from typing import List, Optional, Union
from uuid import UUID
from sqlalchemy.orm import Session

from shared.core.exceptions import ValidationError
from ...enum.stock_enum import MovementType, SourceType
from ...models.stock.stock_history import StockHistory
from ...models.stock.stock_items import StockItem


def record_movement(
    db: Session,
    stock_id: UUID,
    movement_type: Union[MovementType, str],
    source_type: Union[SourceType, str],
    qty_before: Decimal,
    qty_change: Decimal,
    qty_after: Decimal,
    unit_price: Optional[Decimal] = None,
    notes: Optional[str] = None,
    admin_id: Optional[UUID] = None,
    employee_id: Optional[str] = None,
    source_id: Optional[UUID] = None,
) -> StockHistory:
    """
    Append one ledger entry. Only presence of the required fields is checked;
    the caller owns the arithmetic. The row is flushed, not committed.
    """
    required = {
        "stock_id": stock_id,
        "movement_type": movement_type,
        "source_type": source_type,
        "qty_before": qty_before,
        "qty_change": qty_change,
        "qty_after": qty_after,
    }
    missing = [name for name, value in required.items() if value is None or value == ""]
    if missing:
        raise ValidationError(
            f"Missing ledger fields: {', '.join(missing)}")
    if not admin_id and not employee_id:
        raise ValidationError("Ledger entry needs an admin or employee actor")

    entry = StockHistory(
        stock_id=stock_id,
        movement_type=MovementType(movement_type).value,
        source_type=SourceType(source_type).value,
        source_id=source_id,
        qty_before=qty_before,
        qty_change=qty_change,
        qty_after=qty_after,
        unit_price=unit_price,
        notes=notes,
        created_by_admin_id=admin_id,
        created_by_employee_id=employee_id,
    )
    db.add(entry)
    db.flush()
    return entry


# ----------------- Queries (newest first, tenant scoped) -----------------

def _history_query(db: Session, admin_id: UUID):
    return (
        db.query(StockHistory)
        .join(StockItem, StockHistory.stock_id == StockItem.id)
        .filter(StockItem.admin_id == admin_id)
    )


def get_stock_history(db: Session, admin_id: UUID) -> List[StockHistory]:
    return _history_query(db, admin_id).order_by(StockHistory.created_at.desc()).all()


def get_stock_history_by_stock(db: Session, admin_id: UUID, stock_id: UUID) -> List[StockHistory]:
    return (
        _history_query(db, admin_id)
        .filter(StockHistory.stock_id == stock_id)
        .order_by(StockHistory.created_at.desc())
        .all()
    )


def get_stock_history_by_source(db: Session, admin_id: UUID, source_id: UUID) -> List[StockHistory]:
    return (
        _history_query(db, admin_id)
        .filter(StockHistory.source_id == source_id)
        .order_by(StockHistory.created_at.desc())
        .all()
    )


def get_stock_history_by_movement(db: Session, admin_id: UUID, movement_type: MovementType) -> List[StockHistory]:
    return (
        _history_query(db, admin_id)
        .filter(StockHistory.movement_type == MovementType(movement_type).value)
        .order_by(StockHistory.created_at.desc())
        .all()
    )
