"""
Importing this package registers every table on ``Base.metadata``.
"""

from .stock.stock_categories import StockCategory  # noqa: F401
from .stock.stock_items import StockItem  # noqa: F401
from .stock.stock_outs import StockOut  # noqa: F401
from .stock.sales_returns import SalesReturn, SalesReturnItem  # noqa: F401
from .stock.stock_history import StockHistory  # noqa: F401

__all__ = [
    "StockCategory",
    "StockItem",
    "StockOut",
    "SalesReturn",
    "SalesReturnItem",
    "StockHistory",
]
