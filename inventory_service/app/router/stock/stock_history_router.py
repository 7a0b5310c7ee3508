from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core.auth import validate_current_token
from shared.core.database import get_inventory_db as get_db
from shared.core.schemas import UserToken
from ...enum.stock_enum import MovementType
from ...schemas.stock.stock_history_schemas import StockHistoryOut
from ...crud.stock import stock_history_crud as crud

router = APIRouter(
    prefix="/api/stock-history",
    tags=["stock_history"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("/", response_model=List[StockHistoryOut])
def read_stock_history(db: Session = Depends(get_db), current_user: UserToken = Depends(validate_current_token)):
    return crud.get_stock_history(db, current_user.tenant_id)


@router.get("/stock/{stock_id}", response_model=List[StockHistoryOut])
def read_history_by_stock(
    stock_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_stock_history_by_stock(db, current_user.tenant_id, stock_id)


@router.get("/source/{source_id}", response_model=List[StockHistoryOut])
def read_history_by_source(
    source_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_stock_history_by_source(db, current_user.tenant_id, source_id)


@router.get("/movement/{movement_type}", response_model=List[StockHistoryOut])
def read_history_by_movement(
    movement_type: MovementType,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_stock_history_by_movement(db, current_user.tenant_id, movement_type)
