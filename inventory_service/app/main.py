import logging

from .models.stock import (
    stock_categories, stock_items, stock_outs, sales_returns, stock_history
)
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from shared.core.config import settings
from shared.core.database import inventory_engine, Base
from shared.helpers.exception_handler import setup_exception_handlers

from .router.stock import (
    stock_categories_router,
    stock_items_router,
    stock_history_router,
    stock_outs_router,
    sales_returns_router,
)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(title="Inventory Service API")

# Create all tables
Base.metadata.create_all(bind=inventory_engine)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)


@app.get("/health")
def health_check():
    return {"status": "ok", "service": "inventory"}


# Include routers
app.include_router(stock_categories_router.router)
app.include_router(stock_items_router.router)
app.include_router(stock_history_router.router)
app.include_router(stock_outs_router.router)
app.include_router(sales_returns_router.router)
