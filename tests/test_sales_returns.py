import uuid
from datetime import datetime, timezone
from decimal import Decimal
from itertools import count

import pytest
from sqlalchemy import event, update

from shared.core.exceptions import NotFoundError, ValidationError
from inventory_service.app.crud.stock import sales_returns_crud as crud
from inventory_service.app.crud.stock.stock_items_crud import adjust_stock_item, delete_stock_item
from inventory_service.app.enum.stock_enum import ReturnRejectionReason
from inventory_service.app.models import SalesReturn, SalesReturnItem, StockHistory, StockItem, StockOut
from inventory_service.app.schemas.stock.sales_returns_schemas import SalesReturnCreate, SalesReturnLine


@pytest.fixture
def credit_notes():
    seq = count(1)
    return lambda: f"CR-NOTE-20261018-{next(seq):06d}"


def _return(transaction_id, *lines, **fields):
    return SalesReturnCreate(
        transaction_id=transaction_id,
        items=[SalesReturnLine(stockout_id=stockout_id, quantity=Decimal(qty)) for stockout_id, qty in lines],
        **fields,
    )


def test_valid_line_restores_stock_and_writes_receipt(db, admin_id, make_stock, make_sale, fetch, credit_notes):
    stock_id = make_stock("Pen", qty="10", unit_cost="2")
    tx, (stock_out_id,) = make_sale(stock_id, qty="4")

    result = crud.create_sales_return(
        db, admin_id, _return(tx, (stock_out_id, "3"), reason="Wrong colour"),
        credit_note_generator=credit_notes)

    assert result["message"] == "Sales return processed"
    assert result["transaction_id"] == tx
    assert result["errors"] == []
    (applied,) = result["success"]
    assert applied["stockout_id"] == stock_out_id

    sales_return = result["sales_return"]
    assert sales_return.credit_note_id == "CR-NOTE-20261018-000001"
    assert sales_return.reason == "Wrong colour"
    (item,) = sales_return.items
    assert item.id == applied["item_id"]
    assert item.quantity == Decimal("3")
    assert item.stock_out.stock.item_name == "Pen"

    assert fetch(StockItem, stock_id).qty_on_hand == Decimal("9")
    assert fetch(StockItem, stock_id).total_value == Decimal("18")
    assert fetch(StockOut, stock_out_id).quantity == Decimal("1")

    entry = (db.query(StockHistory)
             .filter(StockHistory.source_id == sales_return.id).one())
    assert entry.movement_type == "IN"
    assert entry.source_type == "RECEIPT"
    assert entry.qty_before == Decimal("6")
    assert entry.qty_change == Decimal("3")
    assert entry.qty_after == Decimal("9")
    assert "CR-NOTE-20261018-000001" in entry.notes


def test_quantity_is_conserved_across_returns(db, admin_id, make_stock, make_sale, fetch, credit_notes):
    stock_id = make_stock("Cup", qty="20")
    tx, (stock_out_id,) = make_sale(stock_id, qty="7")

    crud.create_sales_return(db, admin_id, _return(tx, (stock_out_id, "2")), credit_note_generator=credit_notes)
    crud.create_sales_return(db, admin_id, _return(tx, (stock_out_id, "4")), credit_note_generator=credit_notes)

    returned = sum(i.quantity for i in db.query(SalesReturnItem)
                   .filter(SalesReturnItem.stock_out_id == stock_out_id))
    assert returned + fetch(StockOut, stock_out_id).quantity == Decimal("7")


def test_every_applied_line_has_consistent_ledger_entry(db, admin_id, make_stock, make_sale, credit_notes):
    cups = make_stock("Cup", qty="20")
    plates = make_stock("Plate", qty="15")
    tx, (cup_out,) = make_sale(cups, qty="5")
    _, (plate_out,) = make_sale(plates, qty="6")

    result = crud.create_sales_return(
        db, admin_id, _return(tx, (cup_out, "5"), (plate_out, "2")), credit_note_generator=credit_notes)
    assert len(result["success"]) == 2

    entries = db.query(StockHistory).filter(StockHistory.source_id == result["sales_return"].id).all()
    assert len(entries) == 2
    for entry in entries:
        assert entry.qty_after == entry.qty_before + entry.qty_change


def test_resubmitting_a_batch_applies_it_again(db, admin_id, make_stock, make_sale, fetch, credit_notes):
    stock_id = make_stock("Mug", qty="10")
    tx, (stock_out_id,) = make_sale(stock_id, qty="6")
    batch = _return(tx, (stock_out_id, "2"))

    first = crud.create_sales_return(db, admin_id, batch, credit_note_generator=credit_notes)
    second = crud.create_sales_return(db, admin_id, batch, credit_note_generator=credit_notes)

    assert first["sales_return"].id != second["sales_return"].id
    assert len(second["success"]) == 1
    assert fetch(StockItem, stock_id).qty_on_hand == Decimal("8")
    assert fetch(StockOut, stock_out_id).quantity == Decimal("2")
    receipts = db.query(StockHistory).filter(StockHistory.source_type == "RECEIPT").count()
    assert receipts == 2


def test_returning_exactly_the_sold_quantity_is_allowed(db, admin_id, make_stock, make_sale, fetch, credit_notes):
    stock_id = make_stock("Bowl", qty="10")
    tx, (stock_out_id,) = make_sale(stock_id, qty="4")

    result = crud.create_sales_return(db, admin_id, _return(tx, (stock_out_id, "4")),
                                      credit_note_generator=credit_notes)
    assert len(result["success"]) == 1
    assert fetch(StockOut, stock_out_id).quantity == 0


def test_returning_one_more_than_sold_is_rejected(db, admin_id, make_stock, make_sale, fetch, credit_notes):
    stock_id = make_stock("Bowl", qty="10")
    tx, (stock_out_id,) = make_sale(stock_id, qty="4")

    result = crud.create_sales_return(db, admin_id, _return(tx, (stock_out_id, "5")),
                                      credit_note_generator=credit_notes)
    assert result["success"] == []
    (error,) = result["errors"]
    assert error["stockout_id"] == stock_out_id
    assert error["reason_code"] == ReturnRejectionReason.QUANTITY_EXCEEDED.value
    assert error["error"] == "Returned quantity 5 exceeds stockout quantity 4"
    assert fetch(StockItem, stock_id).qty_on_hand == Decimal("6")


def test_unknown_stockout_does_not_block_valid_line(db, admin_id, make_stock, make_sale, fetch, credit_notes):
    stock_id = make_stock("Spoon", qty="10")
    tx, (stock_out_id,) = make_sale(stock_id, qty="5")
    missing = uuid.uuid4()

    result = crud.create_sales_return(
        db, admin_id, _return(tx, (missing, "1"), (stock_out_id, "2")), credit_note_generator=credit_notes)

    assert len(result["success"]) == 1
    assert result["success"][0]["stockout_id"] == stock_out_id
    assert result["errors"] == [{
        "stockout_id": missing,
        "error": "Invalid stockoutId",
        "reason_code": "STOCKOUT_NOT_FOUND",
    }]
    assert fetch(StockItem, stock_id).qty_on_hand == Decimal("7")


def test_rejection_reasons(db, admin_id, other_admin_id, make_stock, make_sale, credit_notes):
    stock_id = make_stock("Fork", qty="10")
    tx, (stock_out_id,) = make_sale(stock_id, qty="3")
    foreign_stock = make_stock("Fork", qty="10", owner=other_admin_id)
    _, (foreign_out,) = make_sale(foreign_stock, qty="1", owner=other_admin_id)

    result = crud.create_sales_return(
        db, admin_id, _return(tx, (stock_out_id, "0"), (foreign_out, "1")),
        credit_note_generator=credit_notes)

    reasons = [(e["stockout_id"], e["reason_code"]) for e in result["errors"]]
    assert reasons == [
        (stock_out_id, "INVALID_QUANTITY"),
        (foreign_out, "STOCKOUT_NOT_FOUND"),
    ]


def test_deleted_stock_item_is_reported(db, admin_id, make_stock, make_sale, fetch, credit_notes):
    stock_id = make_stock("Knife", qty="2")
    tx, (stock_out_id,) = make_sale(stock_id, qty="2")
    delete_stock_item(db, admin_id, stock_id)

    result = crud.create_sales_return(db, admin_id, _return(tx, (stock_out_id, "1")),
                                      credit_note_generator=credit_notes)

    (error,) = result["errors"]
    assert error["reason_code"] == "STOCK_NOT_FOUND"
    assert error["error"] == "Related stock not found"
    assert fetch(StockOut, stock_out_id).quantity == Decimal("2")


def test_version_conflict_on_one_line_leaves_others_applied(db, admin_id, make_stock, make_sale, fetch, credit_notes):
    busy = make_stock("Plate", qty="10")
    calm = make_stock("Tray", qty="10")
    tx, (busy_out,) = make_sale(busy, qty="4")
    _, (calm_out,) = make_sale(calm, qty="4")
    table = StockItem.__table__

    @event.listens_for(db, "before_flush")
    def _concurrent_writer(session, flush_context, instances):
        if any(isinstance(o, StockItem) and o.id == busy for o in session.dirty):
            session.execute(update(table).where(table.c.id == busy).values(version=table.c.version + 1))

    try:
        result = crud.create_sales_return(
            db, admin_id, _return(tx, (busy_out, "1"), (calm_out, "2")), credit_note_generator=credit_notes)
    finally:
        event.remove(db, "before_flush", _concurrent_writer)

    assert [e["reason_code"] for e in result["errors"]] == ["CONCURRENT_UPDATE"]
    assert [s["stockout_id"] for s in result["success"]] == [calm_out]
    assert fetch(StockItem, busy).qty_on_hand == Decimal("6")
    assert fetch(StockOut, busy_out).quantity == Decimal("4")
    assert fetch(StockItem, calm).qty_on_hand == Decimal("8")


def test_return_is_kept_when_every_line_fails(db, admin_id, credit_notes):
    result = crud.create_sales_return(db, admin_id, _return("TX-1", (uuid.uuid4(), "1")),
                                      credit_note_generator=credit_notes)
    assert result["success"] == []
    assert len(result["errors"]) == 1
    assert db.query(SalesReturn).count() == 1
    assert result["sales_return"].items == []


def test_batch_level_input_aborts_before_writing(db, admin_id):
    with pytest.raises(ValidationError):
        crud.create_sales_return(db, admin_id, _return("TX-1"))
    with pytest.raises(ValidationError):
        crud.create_sales_return(db, None, _return("TX-1", (uuid.uuid4(), "1")))
    assert db.query(SalesReturn).count() == 0


def test_created_at_can_be_supplied(db, admin_id, make_stock, make_sale, credit_notes):
    stock_id = make_stock("Jug", qty="3")
    tx, (stock_out_id,) = make_sale(stock_id, qty="1")
    when = datetime(2026, 1, 15, 9, 30, tzinfo=timezone.utc)

    result = crud.create_sales_return(db, admin_id, _return(tx, (stock_out_id, "1"), created_at=when),
                                      credit_note_generator=credit_notes)
    assert result["sales_return"].created_at.replace(tzinfo=None) == when.replace(tzinfo=None)


def test_list_for_tenant_without_returns_is_empty(db, admin_id):
    assert crud.get_sales_returns(db, admin_id) == {
        "message": "Sales returns retrieved successfully",
        "data": [],
    }


def test_get_unknown_return_is_not_found(db, admin_id):
    with pytest.raises(NotFoundError):
        crud.get_sales_return(db, admin_id, uuid.uuid4())
    with pytest.raises(ValidationError):
        crud.get_sales_return(db, admin_id, None)


def test_get_is_tenant_scoped(db, admin_id, other_admin_id, make_stock, make_sale, credit_notes):
    stock_id = make_stock("Lid", qty="3")
    tx, (stock_out_id,) = make_sale(stock_id, qty="1")
    created = crud.create_sales_return(db, admin_id, _return(tx, (stock_out_id, "1")),
                                       credit_note_generator=credit_notes)
    return_id = created["sales_return"].id

    assert crud.get_sales_return(db, admin_id, return_id)["data"].id == return_id
    with pytest.raises(NotFoundError):
        crud.get_sales_return(db, other_admin_id, return_id)


# ----------------- HTTP -----------------

def test_sales_return_http_flow(client, admin_headers, employee_headers, make_stock, make_sale):
    stock_id = make_stock("Glass", qty="10", unit_cost="4")
    tx, (stock_out_id,) = make_sale(stock_id, qty="5")
    missing = str(uuid.uuid4())

    response = client.post("/api/sales-returns/", headers=employee_headers, json={
        "transaction_id": tx,
        "reason": "Chipped",
        "items": [
            {"stockout_id": missing, "quantity": 1},
            {"stockout_id": str(stock_out_id), "quantity": 2},
        ],
    })
    assert response.status_code == 200
    body = response.json()
    assert body["sales_return"]["credit_note_id"].startswith("CR-NOTE-")
    assert len(body["success"]) == 1
    assert body["errors"][0]["stockout_id"] == missing
    assert body["errors"][0]["reason_code"] == "STOCKOUT_NOT_FOUND"
    (item,) = body["sales_return"]["items"]
    assert item["stock_out"]["quantity"] == 3
    assert item["stock_out"]["stock"]["qty_on_hand"] == 7
    return_id = body["sales_return"]["id"]

    response = client.get(f"/api/sales-returns/{return_id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["id"] == return_id

    response = client.get("/api/sales-returns/", headers=admin_headers)
    assert [r["id"] for r in response.json()["data"]] == [return_id]

    response = client.get(f"/api/stock-history/source/{return_id}", headers=admin_headers)
    (entry,) = response.json()
    assert entry["created_by_employee_id"] == "emp-001"


def test_sales_return_http_errors(client, admin_headers, other_admin_headers):
    response = client.get("/api/sales-returns/", headers=other_admin_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Sales returns retrieved successfully", "data": []}

    response = client.get(f"/api/sales-returns/{uuid.uuid4()}", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Sales return not found"

    response = client.post("/api/sales-returns/", headers=admin_headers,
                           json={"transaction_id": "TX-1", "items": []})
    assert response.status_code == 400
    assert response.json()["message"] == "At least one item must be provided"
