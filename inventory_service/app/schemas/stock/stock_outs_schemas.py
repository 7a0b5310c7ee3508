from decimal import Decimal
from pydantic import BaseModel
from uuid import UUID
from typing import List, Optional
from datetime import datetime

from ...enum.stock_enum import PaymentMethod
from .stock_items_schemas import StockItemOut


class StockOutLine(BaseModel):
    stock_id: UUID
    quantity: Decimal
    sold_price: Optional[Decimal] = None


class StockOutCreate(BaseModel):
    sales: List[StockOutLine] = []
    client_name: Optional[str] = None
    client_email: Optional[str] = None
    client_phone: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None

    class Config:
        use_enum_values = True


class StockOutUpdate(BaseModel):
    sold_price: Optional[Decimal] = None
    client_name: Optional[str] = None
    client_email: Optional[str] = None
    client_phone: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None

    class Config:
        use_enum_values = True


class StockOutOut(BaseModel):
    id: UUID
    stock_id: Optional[UUID] = None
    transaction_id: str
    quantity: float
    sold_price: Optional[float] = None
    client_name: Optional[str] = None
    client_email: Optional[str] = None
    client_phone: Optional[str] = None
    payment_method: Optional[str] = None
    admin_id: UUID
    employee_id: Optional[str] = None
    created_at: Optional[datetime] = None
    stock: Optional[StockItemOut] = None

    class Config:
        from_attributes = True


class StockOutTransactionOut(BaseModel):
    message: str
    transaction_id: str
    data: List[StockOutOut]
