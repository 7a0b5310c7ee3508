import os
import tempfile
import uuid
from decimal import Decimal

# the app builds its engine at import time
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(
    tempfile.gettempdir(), f"inventory_service_test_{os.getpid()}.db")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.orm import sessionmaker

from shared.core.auth import create_access_token
from shared.core.database import Base, build_engine, get_inventory_db
from inventory_service.app.main import app
from inventory_service.app.crud.stock.stock_items_crud import create_stock_item
from inventory_service.app.crud.stock.stock_outs_crud import create_stock_outs
from inventory_service.app.schemas.stock.stock_items_schemas import StockItemCreate
from inventory_service.app.schemas.stock.stock_outs_schemas import StockOutCreate, StockOutLine


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'inventory.db'}")

    # readers must not block the request sessions
    @event.listens_for(engine, "connect")
    def _wal(dbapi_connection, connection_record):
        dbapi_connection.execute("PRAGMA journal_mode=WAL")

    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def admin_id():
    return uuid.uuid4()


@pytest.fixture
def other_admin_id():
    return uuid.uuid4()


def _token_headers(**claims):
    return {"Authorization": f"Bearer {create_access_token(claims)}"}


@pytest.fixture
def admin_headers(admin_id):
    return _token_headers(user_id=str(admin_id), account_type="admin", name="Store Admin")


@pytest.fixture
def employee_headers(admin_id):
    return _token_headers(user_id="emp-001", account_type="employee",
                          admin_id=str(admin_id), name="Counter Clerk")


@pytest.fixture
def other_admin_headers(other_admin_id):
    return _token_headers(user_id=str(other_admin_id), account_type="admin", name="Other Admin")


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_inventory_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_stock(db, admin_id):
    """Create a stock item through the normal create path and return its id."""
    def _make(item_name="Blue Pen", qty="10", unit_cost="2.50", owner=None, **extra):
        stock = create_stock_item(db, owner or admin_id, StockItemCreate(
            item_name=item_name,
            qty_on_hand=Decimal(qty),
            unit_cost=Decimal(unit_cost),
            **extra,
        ))
        stock_id = stock.id
        db.commit()
        return stock_id
    return _make


@pytest.fixture
def make_sale(db, admin_id):
    """Sell ``qty`` of a stock item; returns (transaction_id, [stock_out ids])."""
    def _make(stock_id, qty="3", owner=None):
        result = create_stock_outs(
            db, owner or admin_id,
            StockOutCreate(sales=[StockOutLine(stock_id=stock_id, quantity=Decimal(qty))],
                           client_name="Walk-in", payment_method="CASH"),
        )
        ids = [s.id for s in result["data"]]
        db.commit()
        return result["transaction_id"], ids
    return _make


@pytest.fixture
def fetch(db):
    """Re-read a row in a fresh transaction so committed changes are visible."""
    def _fetch(model, row_id):
        db.rollback()
        return db.get(model, row_id, populate_existing=True)
    return _fetch
