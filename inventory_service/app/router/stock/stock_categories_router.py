from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core.auth import allow_admin, validate_current_token
from shared.core.database import get_inventory_db as get_db
from shared.helpers.json_response_helper import success_response
from shared.core.schemas import Lookup, UserToken
from shared.utils.app_status_code import AppStatusCode
from ...schemas.stock.stock_categories_schemas import StockCategoryOut, StockCategoryCreate, StockCategoryUpdate
from ...crud.stock import stock_categories_crud as crud

router = APIRouter(
    prefix="/api/stock-categories",
    tags=["stock_categories"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("/", response_model=List[StockCategoryOut])
def read_categories(db: Session = Depends(get_db), current_user: UserToken = Depends(validate_current_token)):
    return crud.get_stock_categories(db, current_user.tenant_id)


# static routes before the parameterized ones
@router.get("/lookup", response_model=List[Lookup])
def stock_category_lookup(db: Session = Depends(get_db), current_user: UserToken = Depends(validate_current_token)):
    return crud.get_stock_category_lookup(db, current_user.tenant_id)


@router.get("/{category_id}", response_model=StockCategoryOut)
def read_category(
    category_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_stock_category_by_id(db, current_user.tenant_id, category_id)


@router.post("/", response_model=StockCategoryOut)
def create_category(
    category: StockCategoryCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.create_stock_category(db, current_user.tenant_id, category)


@router.put("/{category_id}", response_model=StockCategoryOut)
def update_category(
    category_id: UUID,
    category: StockCategoryUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.update_stock_category(db, current_user.tenant_id, category_id, category)

# ---------------- Delete StockCategory (Soft Delete) ----------------


@router.delete("/{category_id}")
def delete_category(
        category_id: UUID,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_admin)):
    crud.delete_stock_category(db, current_user.tenant_id, category_id)
    return success_response(
        data=None,
        message="Category deleted successfully",
        status_code=AppStatusCode.OPERATION_SUCCESSFUL
    )
