import random
import sys
import uuid
from decimal import Decimal
from faker import Faker
from sqlalchemy.orm import Session

from shared.core.database import InventorySessionLocal, inventory_engine, Base
from inventory_service.app.models import StockItem
from inventory_service.app.crud.stock.stock_categories_crud import create_stock_category
from inventory_service.app.crud.stock.stock_items_crud import create_stock_item
from inventory_service.app.enum.stock_enum import UnitOfMeasure
from inventory_service.app.schemas.stock.stock_categories_schemas import StockCategoryCreate
from inventory_service.app.schemas.stock.stock_items_schemas import StockItemCreate

fake = Faker()

CATEGORY_NAMES = ["Beverages", "Snacks", "Cleaning", "Stationery", "Hardware", "Electronics"]


def seed_data(db: Session, admin_id: uuid.UUID, categories: int = 3, items_per_category: int = 5) -> list:
    """
    Seed demo categories and stock items for one admin. Items go through the
    normal create path so each one gets its opening ledger entry.
    """
    created = []
    for name in random.sample(CATEGORY_NAMES, k=min(categories, len(CATEGORY_NAMES))):
        category = create_stock_category(
            db, admin_id, StockCategoryCreate(name=name, description=fake.sentence()))

        for _ in range(items_per_category):
            # unique suffix keeps same-named items from merging
            item_name = f"{fake.word().title()} {fake.word().title()} {fake.unique.random_int(100, 99999)}"
            stock = create_stock_item(db, admin_id, StockItemCreate(
                item_name=item_name,
                category_id=category.id,
                supplier=fake.company(),
                unit_of_measure=random.choice(list(UnitOfMeasure)).value,
                qty_on_hand=Decimal(random.randint(0, 200)),
                unit_cost=Decimal(str(round(random.uniform(1, 500), 2))),
                reorder_level=Decimal(random.randint(5, 20)),
                warehouse_location=f"Rack-{random.choice(['A', 'B', 'C'])}{random.randint(1, 9)}",
            ))
            created.append(stock)
    return created


if __name__ == "__main__":
    Base.metadata.create_all(bind=inventory_engine)
    admin_id = uuid.UUID(sys.argv[1]) if len(sys.argv) > 1 else uuid.uuid4()
    db: Session = InventorySessionLocal()
    try:
        items = seed_data(db, admin_id)
        total = db.query(StockItem).filter(StockItem.admin_id == admin_id).count()
        print(f"✅ Seeded {len(items)} stock items for admin {admin_id} ({total} in store).")
    except Exception as e:
        db.rollback()
        print(f"❌ Error seeding data: {e}")
        raise
    finally:
        db.close()
