# app/router/stock/sales_returns_router.py
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core.auth import validate_current_token
from shared.core.database import get_inventory_db as get_db
from shared.core.schemas import UserToken
from ...schemas.stock.sales_returns_schemas import (
    SalesReturnCreate, SalesReturnCreateOut, SalesReturnDetailOut, SalesReturnListOut)
from ...crud.stock import sales_returns_crud as crud

router = APIRouter(prefix="/api/sales-returns",
                   tags=["sales_returns"], dependencies=[Depends(validate_current_token)])


@router.post("/", response_model=SalesReturnCreateOut)
def create_sales_return(
    payload: SalesReturnCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    # rejected lines are reported in "errors", the request itself still succeeds
    return crud.create_sales_return(db, current_user.tenant_id, payload, current_user.employee_id)


@router.get("/", response_model=SalesReturnListOut)
def read_sales_returns(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_sales_returns(db, current_user.tenant_id)


@router.get("/{sales_return_id}", response_model=SalesReturnDetailOut)
def read_sales_return(
    sales_return_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_sales_return(db, current_user.tenant_id, sales_return_id)
