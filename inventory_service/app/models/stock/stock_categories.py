# app/models/stock/stock_categories.py
import uuid
from sqlalchemy import Boolean, Column, DateTime, String, Text, Uuid, func
from sqlalchemy.orm import relationship
from shared.core.database import Base


class StockCategory(Base):
    __tablename__ = "stock_categories"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    admin_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    name = Column(String(128), nullable=False)
    description = Column(Text)
    is_deleted = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    stocks = relationship("StockItem", back_populates="category")
