"""Stock service factory.

Provides get_stock_service() / set_stock_service() to swap implementations.
InMemoryStockService is the default.
"""

from checkout.stock.memory_adapter import InMemoryStockService
from checkout.stock.port import StockService

_current_service: StockService | None = None


def get_stock_service() -> StockService:
    """Return the current stock service. Defaults to InMemoryStockService."""
    global _current_service
    if _current_service is None:
        _current_service = InMemoryStockService()
    return _current_service


def set_stock_service(service: StockService) -> None:
    """Override the active stock service (useful for tests)."""
    global _current_service
    _current_service = service


def reset_stock_service() -> None:
    global _current_service
    _current_service = None
