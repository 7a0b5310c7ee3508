# app/crud/stock/stock_items_crud.py
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional
from uuid import UUID
from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from shared.core.config import settings
from shared.core.exceptions import (BusinessRuleViolation, ConcurrencyConflictError, DuplicateEntryError,
                                    InvalidQuantity, NotFoundError, ValidationError)
from shared.helpers.reference_generator import generate_sku
from ...enum.stock_enum import MovementType, SourceType, UnitOfMeasure
from ...models.stock.stock_categories import StockCategory
from ...models.stock.stock_items import StockItem
from ...schemas.stock.stock_items_schemas import StockItemCreate, StockItemUpdate
from .stock_history_crud import record_movement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StockAdjustment:
    stock: StockItem
    qty_before: Decimal
    qty_after: Decimal

    @property
    def qty_change(self) -> Decimal:
        return abs(self.qty_after - self.qty_before)


def to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


# column scales of qty_on_hand and unit_cost; total_value holds their exact product
QTY_SCALE = Decimal("0.001")
MONEY_SCALE = Decimal("0.01")


def to_quantity(value) -> Decimal:
    return to_decimal(value).quantize(QTY_SCALE, rounding=ROUND_HALF_UP)


def to_money(value) -> Decimal:
    return to_decimal(value).quantize(MONEY_SCALE, rounding=ROUND_HALF_UP)


def format_quantity(value) -> str:
    """Plain number for messages: 4.000 -> "4", 1.250 -> "1.25"."""
    return f"{to_decimal(value).normalize():f}"


def _recompute_total_value(stock: StockItem):
    stock.qty_on_hand = to_quantity(stock.qty_on_hand)
    stock.unit_cost = to_money(stock.unit_cost)
    stock.total_value = stock.qty_on_hand * stock.unit_cost


def _active_stock_query(db: Session, admin_id: UUID):
    return db.query(StockItem).filter(
        StockItem.admin_id == admin_id,
        StockItem.is_deleted == False
    )


def _load_fresh_stock(db: Session, admin_id: UUID, stock_id: UUID) -> Optional[StockItem]:
    # bypass the identity map so every read sees the committed row
    return (
        _active_stock_query(db, admin_id)
        .filter(StockItem.id == stock_id)
        .populate_existing()
        .first()
    )


def _ensure_category(db: Session, admin_id: UUID, category_id: Optional[UUID]):
    if not category_id:
        return
    exists = db.query(StockCategory.id).filter(
        StockCategory.id == category_id,
        StockCategory.admin_id == admin_id,
        StockCategory.is_deleted == False
    ).first()
    if not exists:
        raise ValidationError("Category does not exist")


def _ensure_not_negative(**values):
    for name, value in values.items():
        if value is not None and to_decimal(value) < 0:
            raise ValidationError(f"{name} cannot be negative")


@contextmanager
def _version_guard(db: Session, stock_id: UUID):
    try:
        yield
    except StaleDataError:
        db.rollback()
        logger.warning("Stock %s was changed by another request", stock_id)
        raise ConcurrencyConflictError(
            "Stock item was modified concurrently, please retry")


# ----------------- Reads -----------------

def get_stock_items(db: Session, admin_id: UUID) -> List[StockItem]:
    return _active_stock_query(db, admin_id).order_by(StockItem.created_at.desc()).all()


def get_stock_item_by_id(db: Session, admin_id: UUID, stock_id: UUID) -> StockItem:
    stock = _active_stock_query(db, admin_id).filter(StockItem.id == stock_id).first()
    if not stock:
        raise NotFoundError("Stock item not found")
    return stock


def get_stock_item(db: Session, admin_id: UUID, stock_ref: str) -> StockItem:
    """Look a stock item up by id, falling back to its SKU."""
    try:
        return get_stock_item_by_id(db, admin_id, UUID(str(stock_ref)))
    except ValueError:
        pass

    stock = _active_stock_query(db, admin_id).filter(StockItem.sku == stock_ref).first()
    if not stock:
        raise NotFoundError("Stock item not found")
    return stock


# ----------------- Quantity adjustment -----------------

def adjust_quantity(
    db: Session,
    admin_id: UUID,
    stock_id: UUID,
    delta: Decimal,
    max_retries: Optional[int] = None,
) -> StockAdjustment:
    """
    Add ``delta`` (negative for removals) to the on-hand quantity.

    Runs in a SAVEPOINT against a fresh read. A concurrent writer bumps the
    row version and makes the flush fail with StaleDataError, in which case
    the read-modify-write is retried. Does not commit.
    """
    delta = to_quantity(delta)
    attempts = max_retries or settings.STOCK_UPDATE_MAX_RETRIES

    for attempt in range(1, attempts + 1):
        try:
            with db.begin_nested():
                stock = _load_fresh_stock(db, admin_id, stock_id)
                if not stock:
                    raise NotFoundError("Stock item not found")

                qty_before = to_decimal(stock.qty_on_hand)
                qty_after = qty_before + delta
                if qty_after < 0:
                    raise InvalidQuantity(
                        f"Insufficient stock for \"{stock.item_name}\". "
                        f"Available: {format_quantity(qty_before)}, Requested: {format_quantity(-delta)}")

                stock.qty_on_hand = qty_after
                _recompute_total_value(stock)
                db.flush()
            return StockAdjustment(stock=stock, qty_before=qty_before, qty_after=qty_after)
        except StaleDataError:
            logger.warning(
                "Version conflict adjusting stock %s (attempt %d/%d)",
                stock_id, attempt, attempts)

    raise ConcurrencyConflictError(
        f"Stock {stock_id} kept changing while being adjusted")


def adjust_stock_item(
    db: Session,
    admin_id: UUID,
    stock_id: UUID,
    delta: Decimal,
    notes: Optional[str] = None,
    employee_id: Optional[str] = None,
) -> StockItem:
    if to_quantity(delta) == 0:
        raise ValidationError("Adjustment quantity cannot be zero")

    adjustment = adjust_quantity(db, admin_id, stock_id, delta)
    stock = adjustment.stock
    record_movement(
        db,
        stock_id=stock.id,
        movement_type=MovementType.ADJUSTMENT,
        source_type=SourceType.ADJUSTMENT,
        qty_before=adjustment.qty_before,
        qty_change=adjustment.qty_change,
        qty_after=adjustment.qty_after,
        unit_price=stock.unit_cost,
        notes=notes or (f"Stock adjusted: {stock.item_name} "
                        f"({format_quantity(adjustment.qty_before)} → {format_quantity(adjustment.qty_after)})"),
        admin_id=admin_id,
        employee_id=employee_id,
    )
    db.commit()
    db.refresh(stock)
    logger.info("Adjusted stock %s by %s", stock_id, delta)
    return stock


# ----------------- Create / Update / Delete -----------------

def create_stock_item(
    db: Session,
    admin_id: UUID,
    data: StockItemCreate,
    employee_id: Optional[str] = None,
) -> StockItem:
    if not data.item_name or data.item_name.strip() == "":
        raise ValidationError("Item name is required")
    _ensure_not_negative(quantity=data.qty_on_hand, unit_cost=data.unit_cost,
                         reorder_level=data.reorder_level)
    _ensure_category(db, admin_id, data.category_id)

    item_name = data.item_name.strip()
    added_qty = to_quantity(data.qty_on_hand)

    # Same product name for the same admin merges into the existing row
    existing = _active_stock_query(db, admin_id).filter(
        StockItem.item_name == item_name).first()

    if existing:
        old_qty = to_decimal(existing.qty_on_hand)
        new_qty = old_qty + added_qty
        if data.unit_cost is not None:
            existing.unit_cost = data.unit_cost
        existing.qty_on_hand = new_qty
        _recompute_total_value(existing)
        existing.supplier = data.supplier or existing.supplier
        existing.warehouse_location = data.warehouse_location or existing.warehouse_location
        existing.received_date = data.received_date or existing.received_date
        if data.reorder_level is not None:
            existing.reorder_level = data.reorder_level
        existing.expiry_date = data.expiry_date or existing.expiry_date
        if data.category_id:
            existing.category_id = data.category_id
        stock_id = existing.id
        unit_cost = to_decimal(existing.unit_cost)

        with _version_guard(db, stock_id):
            db.flush()
            record_movement(
                db,
                stock_id=stock_id,
                movement_type=MovementType.IN,
                source_type=SourceType.GRN,
                qty_before=old_qty,
                qty_change=added_qty,
                qty_after=new_qty,
                unit_price=unit_cost,
                notes=f"Stock replenished: {item_name} (+{format_quantity(added_qty)})",
                admin_id=admin_id,
                employee_id=employee_id,
            )
            db.commit()
        db.refresh(existing)
        logger.info("Merged %s units into stock %s", added_qty, existing.id)
        return existing

    sku = (data.sku or "").strip() or generate_sku(item_name)
    duplicate = _active_stock_query(db, admin_id).filter(
        func.lower(StockItem.sku) == sku.lower()).first()
    if duplicate:
        raise DuplicateEntryError(f"SKU '{sku}' already exists")

    db_stock = StockItem(
        admin_id=admin_id,
        sku=sku,
        item_name=item_name,
        category_id=data.category_id,
        supplier=data.supplier,
        unit_of_measure=data.unit_of_measure or UnitOfMeasure.PCS.value,
        qty_on_hand=added_qty,
        unit_cost=to_decimal(data.unit_cost),
        warehouse_location=data.warehouse_location or "N/A",
        reorder_level=to_decimal(data.reorder_level),
        expiry_date=data.expiry_date,
    )
    if data.received_date:
        db_stock.received_date = data.received_date
    _recompute_total_value(db_stock)
    db.add(db_stock)
    db.flush()

    record_movement(
        db,
        stock_id=db_stock.id,
        movement_type=MovementType.IN,
        source_type=SourceType.GRN,
        qty_before=Decimal("0"),
        qty_change=added_qty,
        qty_after=added_qty,
        unit_price=db_stock.unit_cost,
        notes=f"New stock created: {item_name}",
        admin_id=admin_id,
        employee_id=employee_id,
    )
    db.commit()
    db.refresh(db_stock)
    logger.info("Created stock %s (%s)", db_stock.id, sku)
    return db_stock


def update_stock_item(
    db: Session,
    admin_id: UUID,
    stock_id: UUID,
    data: StockItemUpdate,
    employee_id: Optional[str] = None,
) -> StockItem:
    db_stock = get_stock_item_by_id(db, admin_id, stock_id)

    update_data = data.model_dump(exclude_unset=True)
    if "item_name" in update_data:
        if not update_data["item_name"] or update_data["item_name"].strip() == "":
            raise ValidationError("Item name cannot be empty")
        update_data["item_name"] = update_data["item_name"].strip()
    _ensure_not_negative(quantity=update_data.get("qty_on_hand"),
                         unit_cost=update_data.get("unit_cost"),
                         reorder_level=update_data.get("reorder_level"))
    if update_data.get("category_id"):
        _ensure_category(db, admin_id, update_data["category_id"])
    if update_data.get("sku"):
        duplicate = _active_stock_query(db, admin_id).filter(
            func.lower(StockItem.sku) == update_data["sku"].lower(),
            StockItem.id != stock_id
        ).first()
        if duplicate:
            raise DuplicateEntryError(f"SKU '{update_data['sku']}' already exists")

    old_qty = to_decimal(db_stock.qty_on_hand)
    for key, value in update_data.items():
        if value is None and key in ("qty_on_hand", "unit_cost", "sku"):
            continue
        setattr(db_stock, key, value)
    _recompute_total_value(db_stock)
    new_qty = db_stock.qty_on_hand
    unit_cost = db_stock.unit_cost
    item_name = db_stock.item_name

    with _version_guard(db, stock_id):
        db.flush()
        if old_qty != new_qty:
            record_movement(
                db,
                stock_id=stock_id,
                movement_type=MovementType.ADJUSTMENT,
                source_type=SourceType.ADJUSTMENT,
                qty_before=old_qty,
                qty_change=abs(new_qty - old_qty),
                qty_after=new_qty,
                unit_price=unit_cost,
                notes=f"Stock adjusted: {item_name} ({format_quantity(old_qty)} → {format_quantity(new_qty)})",
                admin_id=admin_id,
                employee_id=employee_id,
            )
        db.commit()
    db.refresh(db_stock)
    return db_stock


def delete_stock_item(db: Session, admin_id: UUID, stock_id: UUID) -> bool:
    """Soft delete; refused while the item still holds quantity."""
    db_stock = get_stock_item_by_id(db, admin_id, stock_id)

    if to_decimal(db_stock.qty_on_hand) > 0:
        raise BusinessRuleViolation(
            f"Cannot delete stock. It has {format_quantity(db_stock.qty_on_hand)} quantity. Please adjust quantity to zero first.")

    db_stock.is_deleted = True
    db_stock.deleted_at = func.now()
    with _version_guard(db, stock_id):
        db.commit()
    return True
