# app/router/stock/stock_items_router.py
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core.auth import allow_admin, validate_current_token
from shared.core.database import get_inventory_db as get_db
from shared.helpers.json_response_helper import success_response
from shared.core.schemas import UserToken
from shared.utils.app_status_code import AppStatusCode
from ...schemas.stock.stock_items_schemas import (
    StockAdjustRequest, StockItemCreate, StockItemOut, StockItemUpdate)
from ...crud.stock import stock_items_crud as crud

router = APIRouter(prefix="/api/stock-items",
                   tags=["stock_items"], dependencies=[Depends(validate_current_token)])


@router.get("/", response_model=List[StockItemOut])
def read_stock_items(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_stock_items(db, current_user.tenant_id)


@router.get("/{stock_ref}", response_model=StockItemOut)
def read_stock_item(
    stock_ref: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    """Accepts either the stock id or its SKU."""
    return crud.get_stock_item(db, current_user.tenant_id, stock_ref)


@router.post("/", response_model=StockItemOut)
def create_stock_item(
    stock: StockItemCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.create_stock_item(db, current_user.tenant_id, stock, current_user.employee_id)


@router.put("/{stock_id}", response_model=StockItemOut)
def update_stock_item(
    stock_id: UUID,
    stock: StockItemUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.update_stock_item(db, current_user.tenant_id, stock_id, stock, current_user.employee_id)


@router.patch("/{stock_id}/adjust", response_model=StockItemOut)
def adjust_stock_item(
    stock_id: UUID,
    adjustment: StockAdjustRequest,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.adjust_stock_item(
        db, current_user.tenant_id, stock_id, adjustment.delta,
        notes=adjustment.notes, employee_id=current_user.employee_id)

# ---------------- Delete Stock Item (Soft Delete) ----------------


@router.delete("/{stock_id}")
def delete_stock_item(
    stock_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    crud.delete_stock_item(db, current_user.tenant_id, stock_id)
    return success_response(
        data=None,
        message="Stock item deleted successfully",
        status_code=AppStatusCode.OPERATION_SUCCESSFUL
    )
