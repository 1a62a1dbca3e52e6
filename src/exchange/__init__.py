from .base import BaseHttpOrderBookProvider, DataProvider
from .na import CoinbaseExchange, GeminiExchange

__all__ = [
    "DataProvider",
    "BaseHttpOrderBookProvider",
    "CoinbaseExchange",
    "GeminiExchange",
]
