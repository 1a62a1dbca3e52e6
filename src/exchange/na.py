from __future__ import annotations

from typing_extensions import override

from src.config.settings import (
    CoinbaseSettings,
    GeminiSettings,
    HttpSettings,
)
from src.core.parsers import CoinbaseOrderBookParser, GeminiOrderBookParser
from src.core.rate_limiter import RateLimiter
from src.core.types import ExchangeName, Product
from src.exchange.base import BaseHttpOrderBookProvider


class CoinbaseExchange(BaseHttpOrderBookProvider):
    """코인베이스 거래소 오더북 프로바이더 (Level 2 스냅샷)"""

    exchange_name: ExchangeName = "Coinbase"

    def __init__(
        self,
        base_url: str,
        rate_limiter: RateLimiter | None = None,
        timeout: float = 10.0,
        user_agent: str = "order-book-aggregator/1.0",
    ) -> None:
        super().__init__(
            base_url=base_url,
            # 기본값: 2초당 1회
            rate_limiter=rate_limiter or RateLimiter(self.exchange_name, 1, 2.0),
            parser=CoinbaseOrderBookParser(),
            timeout=timeout,
            user_agent=user_agent,
        )

    @classmethod
    def from_settings(cls, settings: CoinbaseSettings, http: HttpSettings) -> CoinbaseExchange:
        return cls(
            base_url=settings.api_base_url,
            rate_limiter=RateLimiter(
                cls.exchange_name,
                settings.rate_limit_max_requests,
                settings.rate_limit_interval_sec,
            ),
            timeout=http.timeout_sec,
            user_agent=http.user_agent,
        )

    @override
    def build_request(self, product_id: Product) -> tuple[str, dict[str, str] | None]:
        return f"products/{product_id.to_coinbase_symbol()}/book", {"level": "2"}


class GeminiExchange(BaseHttpOrderBookProvider):
    """제미니 거래소 오더북 프로바이더"""

    exchange_name: ExchangeName = "Gemini"

    def __init__(
        self,
        base_url: str,
        rate_limiter: RateLimiter | None = None,
        timeout: float = 10.0,
        user_agent: str = "order-book-aggregator/1.0",
    ) -> None:
        super().__init__(
            base_url=base_url,
            rate_limiter=rate_limiter or RateLimiter(self.exchange_name, 1, 2.0),
            parser=GeminiOrderBookParser(),
            timeout=timeout,
            user_agent=user_agent,
        )

    @classmethod
    def from_settings(cls, settings: GeminiSettings, http: HttpSettings) -> GeminiExchange:
        return cls(
            base_url=settings.api_base_url,
            rate_limiter=RateLimiter(
                cls.exchange_name,
                settings.rate_limit_max_requests,
                settings.rate_limit_interval_sec,
            ),
            timeout=http.timeout_sec,
            user_agent=http.user_agent,
        )

    @override
    def build_request(self, product_id: Product) -> tuple[str, dict[str, str] | None]:
        return f"v1/book/{product_id.to_gemini_symbol()}", None
