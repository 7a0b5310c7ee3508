import pytest

from shared.core.exceptions import DuplicateEntryError, NotFoundError, ValidationError
from inventory_service.app.crud.stock import stock_categories_crud as crud
from inventory_service.app.schemas.stock.stock_categories_schemas import StockCategoryCreate, StockCategoryUpdate


def test_category_name_is_required_and_unique(db, admin_id, other_admin_id):
    with pytest.raises(ValidationError):
        crud.create_stock_category(db, admin_id, StockCategoryCreate(name="   "))

    crud.create_stock_category(db, admin_id, StockCategoryCreate(name="Drinks"))
    with pytest.raises(DuplicateEntryError):
        crud.create_stock_category(db, admin_id, StockCategoryCreate(name="drinks"))

    # another tenant may reuse the name
    assert crud.create_stock_category(db, other_admin_id, StockCategoryCreate(name="Drinks")).name == "Drinks"


def test_update_and_soft_delete(db, admin_id):
    category = crud.create_stock_category(db, admin_id, StockCategoryCreate(name="Snacks"))

    updated = crud.update_stock_category(db, admin_id, category.id, StockCategoryUpdate(description="Chips"))
    assert updated.name == "Snacks"
    assert updated.description == "Chips"

    crud.delete_stock_category(db, admin_id, category.id)
    with pytest.raises(NotFoundError):
        crud.get_stock_category_by_id(db, admin_id, category.id)
    assert crud.get_stock_category_lookup(db, admin_id) == []


def test_categories_http(client, admin_headers, employee_headers):
    response = client.post("/api/stock-categories/", headers=employee_headers, json={"name": "Tools"})
    assert response.status_code == 200
    category_id = response.json()["id"]

    response = client.get("/api/stock-categories/lookup", headers=admin_headers)
    assert response.json() == [{"id": category_id, "name": "Tools"}]

    response = client.post("/api/stock-items/", headers=admin_headers, json={
        "item_name": "Hammer", "category_id": category_id, "qty_on_hand": 2, "unit_cost": 9})
    assert response.json()["category_id"] == category_id

    response = client.delete(f"/api/stock-categories/{category_id}", headers=employee_headers)
    assert response.status_code == 403
    response = client.delete(f"/api/stock-categories/{category_id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Category deleted successfully"

    response = client.get(f"/api/stock-categories/{category_id}", headers=admin_headers)
    assert response.status_code == 404


def test_duplicate_category_http(client, admin_headers):
    assert client.post("/api/stock-categories/", headers=admin_headers, json={"name": "Paint"}).status_code == 200

    response = client.post("/api/stock-categories/", headers=admin_headers, json={"name": "PAINT"})
    assert response.status_code == 400
    assert response.json()["status_code"] == "204"
    assert response.json()["message"] == "Category 'PAINT' already exists"
