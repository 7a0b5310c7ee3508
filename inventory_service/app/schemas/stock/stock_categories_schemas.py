from pydantic import BaseModel
from uuid import UUID
from typing import Optional
from datetime import datetime


class StockCategoryBase(BaseModel):
    name: str
    description: Optional[str] = None


class StockCategoryCreate(StockCategoryBase):
    pass


class StockCategoryUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


class StockCategoryOut(StockCategoryBase):
    id: UUID
    admin_id: UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
