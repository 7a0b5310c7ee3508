from decimal import Decimal
from pydantic import BaseModel
from uuid import UUID
from typing import Optional
from datetime import datetime

from ...enum.stock_enum import UnitOfMeasure


class StockItemBase(BaseModel):
    sku: Optional[str] = None
    item_name: str
    category_id: Optional[UUID] = None
    supplier: Optional[str] = None
    unit_of_measure: Optional[UnitOfMeasure] = None
    warehouse_location: Optional[str] = None
    received_date: Optional[datetime] = None
    expiry_date: Optional[datetime] = None

    class Config:
        use_enum_values = True


class StockItemCreate(StockItemBase):
    qty_on_hand: Decimal = Decimal("0")
    unit_cost: Optional[Decimal] = None
    reorder_level: Optional[Decimal] = None


class StockItemUpdate(BaseModel):
    sku: Optional[str] = None
    item_name: Optional[str] = None
    category_id: Optional[UUID] = None
    supplier: Optional[str] = None
    unit_of_measure: Optional[UnitOfMeasure] = None
    qty_on_hand: Optional[Decimal] = None
    unit_cost: Optional[Decimal] = None
    reorder_level: Optional[Decimal] = None
    warehouse_location: Optional[str] = None
    received_date: Optional[datetime] = None
    expiry_date: Optional[datetime] = None

    class Config:
        use_enum_values = True


class StockAdjustRequest(BaseModel):
    # positive restocks, negative removes
    delta: Decimal
    notes: Optional[str] = None


class StockItemOut(BaseModel):
    id: UUID
    admin_id: UUID
    sku: str
    item_name: str
    category_id: Optional[UUID] = None
    supplier: Optional[str] = None
    unit_of_measure: str
    qty_on_hand: float
    unit_cost: float
    total_value: float
    warehouse_location: Optional[str] = None
    reorder_level: Optional[float] = None
    received_date: Optional[datetime] = None
    expiry_date: Optional[datetime] = None
    version: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
