"""Shopping-cart checkout: validated order creation through a stoppable stage pipeline."""

__version__ = "0.1.0"
