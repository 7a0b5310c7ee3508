# app/crud/stock/stock_outs_crud.py
import logging
from typing import Callable, List, Optional
from uuid import UUID
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from shared.core.config import settings
from shared.core.exceptions import AppException, NotFoundError, ValidationError
from shared.helpers.reference_generator import generate_reference
from ...enum.stock_enum import MovementType, SourceType
from ...models.stock.stock_outs import StockOut
from ...schemas.stock.stock_outs_schemas import StockOutCreate, StockOutUpdate
from .stock_history_crud import record_movement
from .stock_items_crud import adjust_quantity, format_quantity, to_decimal, to_money, to_quantity

logger = logging.getLogger(__name__)


def _default_transaction_id() -> str:
    return generate_reference(settings.TRANSACTION_PREFIX, settings.TRANSACTION_KIND)


def _stock_out_query(db: Session, admin_id: UUID):
    return (
        db.query(StockOut)
        .options(selectinload(StockOut.stock))
        .filter(StockOut.admin_id == admin_id, StockOut.is_deleted == False)
    )


def create_stock_outs(
    db: Session,
    admin_id: Optional[UUID],
    data: StockOutCreate,
    employee_id: Optional[str] = None,
    transaction_id_generator: Callable[[], str] = _default_transaction_id,
) -> dict:
    """
    Record a sale of one or more stock lines under one transaction id.
    All lines commit together; the first failing line rolls the batch back.
    """
    if not data.sales:
        raise ValidationError("At least one sale is required")
    if not admin_id:
        raise ValidationError("Admin ID is missing")

    transaction_id = transaction_id_generator()
    created: List[StockOut] = []

    try:
        for sale in data.sales:
            quantity = to_quantity(sale.quantity)
            if quantity <= 0:
                raise ValidationError("Sale quantity must be greater than zero")

            adjustment = adjust_quantity(db, admin_id, sale.stock_id, -quantity)
            stock = adjustment.stock
            if to_decimal(stock.unit_cost) <= 0:
                raise ValidationError(
                    f"Unit cost not set for stock \"{stock.item_name}\"")

            stock_out = StockOut(
                stock_id=stock.id,
                transaction_id=transaction_id,
                quantity=quantity,
                sold_price=to_money(sale.sold_price if sale.sold_price is not None else stock.unit_cost),
                client_name=data.client_name,
                client_email=data.client_email,
                client_phone=data.client_phone,
                payment_method=data.payment_method,
                admin_id=admin_id,
                employee_id=employee_id,
            )
            db.add(stock_out)
            db.flush()

            record_movement(
                db,
                stock_id=stock.id,
                movement_type=MovementType.OUT,
                source_type=SourceType.SALE,
                qty_before=adjustment.qty_before,
                qty_change=quantity,
                qty_after=adjustment.qty_after,
                unit_price=stock_out.sold_price,
                notes=f"Sold {format_quantity(quantity)} x {stock.item_name} ({transaction_id})",
                admin_id=admin_id,
                employee_id=employee_id,
                source_id=stock_out.id,
            )
            created.append(stock_out)
        db.commit()
    except AppException:
        db.rollback()
        logger.warning("Stock-out transaction %s rolled back", transaction_id)
        raise

    for stock_out in created:
        db.refresh(stock_out)
    logger.info("Recorded stock-out transaction %s with %d line(s)",
                transaction_id, len(created))

    return {
        "message": "Stock out transaction completed successfully",
        "transaction_id": transaction_id,
        "data": created,
    }


def get_stock_outs(db: Session, admin_id: Optional[UUID]) -> List[StockOut]:
    if not admin_id:
        raise ValidationError("Admin ID is missing")
    return _stock_out_query(db, admin_id).order_by(StockOut.created_at.desc()).all()


def get_stock_out_by_id(db: Session, admin_id: UUID, stock_out_id: UUID) -> StockOut:
    stock_out = _stock_out_query(db, admin_id).filter(StockOut.id == stock_out_id).first()
    if not stock_out:
        raise NotFoundError("StockOut not found")
    return stock_out


def get_stock_outs_by_transaction(db: Session, admin_id: UUID, transaction_id: str) -> List[StockOut]:
    if not transaction_id or not transaction_id.strip():
        raise ValidationError("Transaction ID is required")
    return _stock_out_query(db, admin_id).filter(
        StockOut.transaction_id == transaction_id.strip()).all()


def update_stock_out(db: Session, admin_id: UUID, stock_out_id: UUID, data: StockOutUpdate) -> StockOut:
    # quantity is owned by sales and returns, only the sale details change here
    stock_out = get_stock_out_by_id(db, admin_id, stock_out_id)
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(stock_out, key, value)
    db.commit()
    db.refresh(stock_out)
    return stock_out


def delete_stock_out(
    db: Session,
    admin_id: UUID,
    stock_out_id: UUID,
    employee_id: Optional[str] = None,
) -> bool:
    """Soft delete a stock-out and put its remaining quantity back on the shelf."""
    stock_out = get_stock_out_by_id(db, admin_id, stock_out_id)
    quantity = to_decimal(stock_out.quantity)

    try:
        if stock_out.stock_id and quantity > 0:
            adjustment = adjust_quantity(db, admin_id, stock_out.stock_id, quantity)
            record_movement(
                db,
                stock_id=stock_out.stock_id,
                movement_type=MovementType.IN,
                source_type=SourceType.REVERSAL,
                qty_before=adjustment.qty_before,
                qty_change=quantity,
                qty_after=adjustment.qty_after,
                unit_price=adjustment.stock.unit_cost,
                notes=f"Stock-out {stock_out.transaction_id} cancelled (+{format_quantity(quantity)})",
                admin_id=admin_id,
                employee_id=employee_id,
                source_id=stock_out.id,
            )

        stock_out.is_deleted = True
        stock_out.deleted_at = func.now()
        db.commit()
    except AppException:
        db.rollback()
        raise
    return True
