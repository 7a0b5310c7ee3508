# app/router/stock/stock_outs_router.py
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core.auth import allow_admin, validate_current_token
from shared.core.database import get_inventory_db as get_db
from shared.helpers.json_response_helper import success_response
from shared.core.schemas import UserToken
from shared.utils.app_status_code import AppStatusCode
from ...schemas.stock.stock_outs_schemas import (
    StockOutCreate, StockOutOut, StockOutTransactionOut, StockOutUpdate)
from ...crud.stock import stock_outs_crud as crud

router = APIRouter(prefix="/api/stock-outs",
                   tags=["stock_outs"], dependencies=[Depends(validate_current_token)])


@router.post("/", response_model=StockOutTransactionOut)
def create_stock_outs(
    payload: StockOutCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.create_stock_outs(db, current_user.tenant_id, payload, current_user.employee_id)


@router.get("/", response_model=List[StockOutOut])
def read_stock_outs(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_stock_outs(db, current_user.tenant_id)


@router.get("/transaction/{transaction_id}", response_model=List[StockOutOut])
def read_stock_outs_by_transaction(
    transaction_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_stock_outs_by_transaction(db, current_user.tenant_id, transaction_id)


@router.get("/{stock_out_id}", response_model=StockOutOut)
def read_stock_out(
    stock_out_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_stock_out_by_id(db, current_user.tenant_id, stock_out_id)


@router.put("/{stock_out_id}", response_model=StockOutOut)
def update_stock_out(
    stock_out_id: UUID,
    payload: StockOutUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.update_stock_out(db, current_user.tenant_id, stock_out_id, payload)


@router.delete("/{stock_out_id}")
def delete_stock_out(
    stock_out_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    crud.delete_stock_out(db, current_user.tenant_id, stock_out_id, current_user.employee_id)
    return success_response(
        data=None,
        message="Stock out deleted and quantity restored",
        status_code=AppStatusCode.OPERATION_SUCCESSFUL
    )
