"""In-memory stock levels for development and testing.

SKUs without a recorded level are treated as unlimited, so carts of
untracked products always pass the stock check.
"""

from checkout.stock.port import StockService, StockShortage


class InMemoryStockService(StockService):
    def __init__(self, levels: dict[str, int] | None = None) -> None:
        self.levels: dict[str, int] = dict(levels or {})
        self.commits: list[dict[str, int]] = []

    def set_level(self, sku: str, quantity: int) -> None:
        self.levels[sku] = quantity

    def shortages(self, cart) -> list[StockShortage]:
        shortages = []
        for product in cart.products:
            available = self.levels.get(product.sku)
            if available is not None and product.quantity > available:
                shortages.append(
                    StockShortage(
                        sku=product.sku,
                        title=product.title,
                        requested=product.quantity,
                        available=available,
                    )
                )
        return shortages

    def commit(self, cart) -> bool:
        if self.shortages(cart):
            return False

        committed = {}
        for product in cart.products:
            if product.sku in self.levels:
                self.levels[product.sku] -= product.quantity
            committed[product.sku] = product.quantity
        self.commits.append(committed)
        return True
