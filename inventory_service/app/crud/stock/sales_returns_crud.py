# app/crud/stock/sales_returns_crud.py
"""
Sales returns: reverse stock-outs line by line.

Every line of a return batch is an independent unit of work. A line is
applied inside its own SAVEPOINT and committed on success; a line that
fails is rolled back to its savepoint and reported, and the remaining
lines are still processed. Only missing batch-level input (no items, no
tenant) aborts the whole call, before anything is written.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple, Union
from uuid import UUID
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from shared.core.config import settings
from shared.core.exceptions import (AppException, ConcurrencyConflictError,
                                    NotFoundError, ValidationError)
from shared.helpers.reference_generator import generate_reference
from ...enum.stock_enum import MovementType, ReturnRejectionReason, SourceType
from ...models.stock.sales_returns import SalesReturn, SalesReturnItem
from ...models.stock.stock_outs import StockOut
from ...schemas.stock.sales_returns_schemas import SalesReturnCreate, SalesReturnLine
from .stock_history_crud import record_movement
from .stock_items_crud import adjust_quantity, format_quantity, to_decimal, to_quantity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppliedReturnItem:
    stockout_id: UUID
    item_id: UUID


@dataclass(frozen=True)
class RejectedReturnItem:
    stockout_id: UUID
    reason_code: ReturnRejectionReason
    error: str


ReturnItemOutcome = Union[AppliedReturnItem, RejectedReturnItem]


@dataclass(frozen=True)
class ReturnBatchOutcome:
    outcomes: Tuple[ReturnItemOutcome, ...]

    @property
    def applied(self) -> List[AppliedReturnItem]:
        return [o for o in self.outcomes if isinstance(o, AppliedReturnItem)]

    @property
    def rejected(self) -> List[RejectedReturnItem]:
        return [o for o in self.outcomes if isinstance(o, RejectedReturnItem)]


class _LineRejected(Exception):
    def __init__(self, reason_code: ReturnRejectionReason, error: str):
        super().__init__(error)
        self.reason_code = reason_code
        self.error = error


def _default_credit_note_id() -> str:
    return generate_reference(settings.CREDIT_NOTE_PREFIX, settings.CREDIT_NOTE_KIND)


def _sales_return_query(db: Session):
    return db.query(SalesReturn).options(
        selectinload(SalesReturn.items)
        .selectinload(SalesReturnItem.stock_out)
        .selectinload(StockOut.stock)
    )


def _apply_line(
    db: Session,
    sales_return: SalesReturn,
    admin_id: UUID,
    line: SalesReturnLine,
    employee_id: Optional[str],
) -> UUID:
    """Apply one returned line; raises _LineRejected when it cannot be applied."""
    quantity = to_quantity(line.quantity)

    stock_out = (
        db.query(StockOut)
        .filter(StockOut.id == line.stockout_id,
                StockOut.admin_id == admin_id,
                StockOut.is_deleted == False)
        .populate_existing()
        .first()
    )
    if not stock_out:
        raise _LineRejected(ReturnRejectionReason.STOCKOUT_NOT_FOUND, "Invalid stockoutId")

    if quantity <= 0:
        raise _LineRejected(ReturnRejectionReason.INVALID_QUANTITY,
                            "Returned quantity must be greater than zero")

    sold_qty = to_decimal(stock_out.quantity)
    if quantity > sold_qty:
        raise _LineRejected(
            ReturnRejectionReason.QUANTITY_EXCEEDED,
            f"Returned quantity {format_quantity(quantity)} exceeds stockout quantity {format_quantity(sold_qty)}")

    if not stock_out.stock_id:
        raise _LineRejected(ReturnRejectionReason.STOCK_NOT_FOUND, "Related stock not found")

    try:
        adjustment = adjust_quantity(db, admin_id, stock_out.stock_id, quantity)
    except NotFoundError:
        raise _LineRejected(ReturnRejectionReason.STOCK_NOT_FOUND, "Related stock not found")
    except ConcurrencyConflictError as e:
        raise _LineRejected(ReturnRejectionReason.CONCURRENT_UPDATE, e.message)

    record_movement(
        db,
        stock_id=stock_out.stock_id,
        movement_type=MovementType.IN,
        source_type=SourceType.RECEIPT,
        qty_before=adjustment.qty_before,
        qty_change=quantity,
        qty_after=adjustment.qty_after,
        unit_price=adjustment.stock.unit_cost,
        notes=f"Sales return {sales_return.credit_note_id}: {adjustment.stock.item_name} (+{format_quantity(quantity)})",
        admin_id=admin_id,
        employee_id=employee_id,
        source_id=sales_return.id,
    )

    stock_out.quantity = sold_qty - quantity

    return_item = SalesReturnItem(
        sales_return_id=sales_return.id,
        stock_out_id=stock_out.id,
        quantity=quantity,
    )
    db.add(return_item)
    db.flush()
    return return_item.id


def _process_line(
    db: Session,
    sales_return: SalesReturn,
    admin_id: UUID,
    line: SalesReturnLine,
    employee_id: Optional[str],
) -> ReturnItemOutcome:
    try:
        with db.begin_nested():
            item_id = _apply_line(db, sales_return, admin_id, line, employee_id)
        db.commit()
        return AppliedReturnItem(stockout_id=line.stockout_id, item_id=item_id)
    except _LineRejected as e:
        outcome = RejectedReturnItem(
            stockout_id=line.stockout_id, reason_code=e.reason_code, error=e.error)
    except AppException as e:
        outcome = RejectedReturnItem(
            stockout_id=line.stockout_id,
            reason_code=ReturnRejectionReason.OPERATION_FAILED, error=e.message)
    except SQLAlchemyError as e:
        logger.exception("Return line %s failed in the database", line.stockout_id)
        db.rollback()
        outcome = RejectedReturnItem(
            stockout_id=line.stockout_id,
            reason_code=ReturnRejectionReason.OPERATION_FAILED, error=str(e))

    logger.warning("Sales return %s rejected line %s: %s",
                   sales_return.credit_note_id, line.stockout_id, outcome.error)
    return outcome


def create_sales_return(
    db: Session,
    admin_id: Optional[UUID],
    data: SalesReturnCreate,
    employee_id: Optional[str] = None,
    credit_note_generator: Callable[[], str] = _default_credit_note_id,
) -> dict:
    if not data.items:
        raise ValidationError("At least one item must be provided")
    if not admin_id:
        raise ValidationError("Admin ID is missing")

    sales_return = SalesReturn(
        transaction_id=data.transaction_id,
        reason=data.reason,
        credit_note_id=credit_note_generator(),
        created_at=data.created_at or datetime.now(timezone.utc),
        admin_id=admin_id,
    )
    db.add(sales_return)
    db.commit()
    db.refresh(sales_return)

    # strictly sequential: later lines may touch the same stock rows
    batch = ReturnBatchOutcome(outcomes=tuple(
        _process_line(db, sales_return, admin_id, line, employee_id)
        for line in data.items
    ))

    logger.info("Sales return %s processed: %d applied, %d rejected",
                sales_return.credit_note_id, len(batch.applied), len(batch.rejected))

    db.expire_all()
    updated = _sales_return_query(db).filter(SalesReturn.id == sales_return.id).first()

    return {
        "message": "Sales return processed",
        "transaction_id": data.transaction_id,
        "sales_return": updated,
        "success": [
            {"stockout_id": o.stockout_id, "item_id": o.item_id}
            for o in batch.applied
        ],
        "errors": [
            {"stockout_id": o.stockout_id, "error": o.error, "reason_code": o.reason_code.value}
            for o in batch.rejected
        ],
    }


def get_sales_returns(db: Session, admin_id: Optional[UUID]) -> dict:
    if not admin_id:
        raise ValidationError("Admin ID is missing")

    returns = (
        _sales_return_query(db)
        .filter(SalesReturn.admin_id == admin_id)
        .order_by(SalesReturn.created_at.desc())
        .all()
    )
    return {
        "message": "Sales returns retrieved successfully",
        "data": returns,
    }


def get_sales_return(db: Session, admin_id: Optional[UUID], sales_return_id: Optional[UUID]) -> dict:
    if not sales_return_id:
        raise ValidationError("ID is required")

    sales_return = (
        _sales_return_query(db)
        .filter(SalesReturn.id == sales_return_id, SalesReturn.admin_id == admin_id)
        .first()
    )
    if not sales_return:
        raise NotFoundError("Sales return not found")

    return {
        "message": "Sales return retrieved successfully",
        "data": sales_return,
    }
