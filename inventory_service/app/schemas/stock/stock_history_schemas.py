from pydantic import BaseModel
from uuid import UUID
from typing import Optional
from datetime import datetime


class StockHistoryOut(BaseModel):
    id: UUID
    stock_id: Optional[UUID] = None
    movement_type: str
    source_type: str
    source_id: Optional[UUID] = None
    qty_before: float
    qty_change: float
    qty_after: float
    unit_price: Optional[float] = None
    notes: Optional[str] = None
    created_by_admin_id: Optional[UUID] = None
    created_by_employee_id: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
