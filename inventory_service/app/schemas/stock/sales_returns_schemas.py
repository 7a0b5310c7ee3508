from decimal import Decimal
from pydantic import BaseModel
from uuid import UUID
from typing import List, Optional
from datetime import datetime

from .stock_outs_schemas import StockOutOut


class SalesReturnLine(BaseModel):
    stockout_id: UUID
    quantity: Decimal


class SalesReturnCreate(BaseModel):
    transaction_id: str
    reason: Optional[str] = None
    created_at: Optional[datetime] = None
    items: List[SalesReturnLine] = []


class SalesReturnItemOut(BaseModel):
    id: UUID
    sales_return_id: UUID
    stock_out_id: UUID
    quantity: float
    created_at: Optional[datetime] = None
    stock_out: Optional[StockOutOut] = None

    class Config:
        from_attributes = True


class SalesReturnOut(BaseModel):
    id: UUID
    transaction_id: str
    credit_note_id: str
    reason: Optional[str] = None
    admin_id: UUID
    created_at: datetime
    items: List[SalesReturnItemOut] = []

    class Config:
        from_attributes = True


class AppliedItemOut(BaseModel):
    stockout_id: UUID
    item_id: UUID


class RejectedItemOut(BaseModel):
    stockout_id: UUID
    error: str
    reason_code: str


class SalesReturnCreateOut(BaseModel):
    message: str
    transaction_id: str
    sales_return: SalesReturnOut
    success: List[AppliedItemOut]
    errors: List[RejectedItemOut]


class SalesReturnListOut(BaseModel):
    message: str
    data: List[SalesReturnOut]


class SalesReturnDetailOut(BaseModel):
    message: str
    data: SalesReturnOut
