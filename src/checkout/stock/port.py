"""Stock service port (abstract interface)."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class StockShortage:
    sku: str
    title: str
    requested: int
    available: int


class StockService(ABC):
    """Abstract stock service interface."""

    @abstractmethod
    def shortages(self, cart) -> list[StockShortage]:
        """Return one entry per cart line that cannot be served from stock."""
        ...

    @abstractmethod
    def commit(self, cart) -> bool:
        """Decrement stock for every cart line.

        Returns False, leaving stock untouched, if any line can no longer
        be served.
        """
        ...
