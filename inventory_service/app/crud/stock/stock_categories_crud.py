# app/crud/stock/stock_categories_crud.py
from typing import List
from uuid import UUID
from sqlalchemy import func
from sqlalchemy.orm import Session

from shared.core.exceptions import DuplicateEntryError, NotFoundError, ValidationError
from shared.core.schemas import Lookup
from ...models.stock.stock_categories import StockCategory
from ...schemas.stock.stock_categories_schemas import StockCategoryCreate, StockCategoryUpdate


def get_stock_categories(db: Session, admin_id: UUID) -> List[StockCategory]:
    return (
        db.query(StockCategory)
        .filter(StockCategory.admin_id == admin_id, StockCategory.is_deleted == False)
        .order_by(StockCategory.name.asc())
        .all()
    )


def get_stock_category_lookup(db: Session, admin_id: UUID) -> List[Lookup]:
    return [
        Lookup(id=category.id, name=category.name)
        for category in get_stock_categories(db, admin_id)
    ]


def get_stock_category_by_id(db: Session, admin_id: UUID, category_id: UUID) -> StockCategory:
    category = db.query(StockCategory).filter(
        StockCategory.id == category_id,
        StockCategory.admin_id == admin_id,
        StockCategory.is_deleted == False
    ).first()
    if not category:
        raise NotFoundError("Category not found")
    return category


def _ensure_unique_name(db: Session, admin_id: UUID, name: str, exclude_id: UUID = None):
    query = db.query(StockCategory).filter(
        StockCategory.admin_id == admin_id,
        func.lower(StockCategory.name) == name.lower(),
        StockCategory.is_deleted == False
    )
    if exclude_id:
        query = query.filter(StockCategory.id != exclude_id)
    if query.first():
        raise DuplicateEntryError(f"Category '{name}' already exists")


def create_stock_category(db: Session, admin_id: UUID, category: StockCategoryCreate) -> StockCategory:
    if not category.name or category.name.strip() == "":
        raise ValidationError("Category name is required")

    name = category.name.strip()
    _ensure_unique_name(db, admin_id, name)

    db_category = StockCategory(
        admin_id=admin_id, name=name, description=category.description)
    db.add(db_category)
    db.commit()
    db.refresh(db_category)
    return db_category


def update_stock_category(db: Session, admin_id: UUID, category_id: UUID, category: StockCategoryUpdate) -> StockCategory:
    db_category = get_stock_category_by_id(db, admin_id, category_id)

    update_data = category.model_dump(exclude_unset=True)
    if "name" in update_data:
        if not update_data["name"] or update_data["name"].strip() == "":
            raise ValidationError("Category name cannot be empty")
        update_data["name"] = update_data["name"].strip()
        _ensure_unique_name(db, admin_id, update_data["name"], exclude_id=category_id)

    for key, value in update_data.items():
        setattr(db_category, key, value)

    db.commit()
    db.refresh(db_category)
    return db_category


def delete_stock_category(db: Session, admin_id: UUID, category_id: UUID) -> bool:
    db_category = get_stock_category_by_id(db, admin_id, category_id)
    db_category.is_deleted = True
    db.commit()
    return True
