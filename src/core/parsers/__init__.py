from src.core.parsers.base import OrderBookParser, parse_price_level
from src.core.parsers.coinbase import CoinbaseOrderBookParser
from src.core.parsers.gemini import GeminiOrderBookParser

__all__ = [
    "OrderBookParser",
    "parse_price_level",
    "CoinbaseOrderBookParser",
    "GeminiOrderBookParser",
]
