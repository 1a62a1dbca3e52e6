"""거래소 오더북 프로바이더 공통 모듈.

- DataProvider: Aggregator가 의존하는 유일한 인터페이스 (Protocol)
- BaseHttpOrderBookProvider: aiohttp 세션/요청 제한/응답 해석 공통 구현
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Protocol, runtime_checkable

import aiohttp
import orjson

from src.common.exceptions import (
    ExchangeNetworkError,
    ExchangeStatusError,
    MalformedResponseError,
    RateLimitExceededError,
)
from src.common.log_phases import PHASE_PARSE, PHASE_RATE_LIMIT, PHASE_REQUEST
from src.common.logger import PipelineLogger
from src.core.order_book import OrderBook
from src.core.parsers.base import OrderBookParser
from src.core.rate_limiter import RateLimiter
from src.core.types import PAYLOAD_EXCEPTIONS, TRANSPORT_EXCEPTIONS, Product

logger = PipelineLogger.get_logger("exchange_provider", "exchange")

# 에러 본문은 로그 한 줄에 들어갈 만큼만 보관
_MAX_ERROR_BODY = 512


@runtime_checkable
class DataProvider(Protocol):
    """단일 거래소에서 상품 오더북을 가져오는 능력."""

    def name(self) -> str: ...

    async def fetch_order_book(self, product_id: Product) -> OrderBook: ...


class BaseHttpOrderBookProvider(ABC):
    """REST 오더북 스냅샷 프로바이더 베이스.

    하위 클래스는 거래소 이름, 요청 경로, 파서만 정의합니다.

    Example:
        >>> async with CoinbaseExchange(base_url="https://api.exchange.coinbase.com/") as cb:
        ...     book = await cb.fetch_order_book(Product.BTC_USD)
    """

    exchange_name: str = ""

    def __init__(
        self,
        base_url: str,
        rate_limiter: RateLimiter,
        parser: OrderBookParser,
        timeout: float = 10.0,
        user_agent: str = "order-book-aggregator/1.0",
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.user_agent = user_agent
        self._rate_limiter = rate_limiter
        self._parser = parser
        self._session: aiohttp.ClientSession | None = None

    def name(self) -> str:
        return self.exchange_name

    async def __aenter__(self):
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    @abstractmethod
    def build_request(self, product_id: Product) -> tuple[str, dict[str, str] | None]:
        """(베이스 URL 기준 상대 경로, 쿼리 파라미터) 반환"""

    async def fetch_order_book(self, product_id: Product) -> OrderBook:
        """현재 오더북 스냅샷 조회

        Raises:
            RateLimitExceededError: 요청 윈도우 한도 초과
            ExchangeNetworkError: 전송 계층 실패
            ExchangeStatusError: 2xx가 아닌 응답
            MalformedResponseError: JSON/봉투 해석 실패
        """
        # TODO: 요청 제한/전송 실패 시 지수 백오프 재시도 정책 추가 (현재는 즉시 실패)
        try:
            await self._rate_limiter.check_if_rate_limited()
        except RateLimitExceededError as e:
            logger.debug(
                f"{self.exchange_name} request skipped: {e.message}",
                provider=self.exchange_name,
                phase=PHASE_RATE_LIMIT,
            )
            raise

        path, params = self.build_request(product_id)
        payload = await self._request_json(path, params)

        try:
            book = self._parser.parse(payload)
        except PAYLOAD_EXCEPTIONS as e:
            raise MalformedResponseError(
                exchange_name=self.exchange_name,
                message=f"Unexpected order book shape for {product_id}",
                original_exception=e,
            ) from e

        logger.debug(
            f"{self.exchange_name} order book parsed: {book!r}",
            provider=self.exchange_name,
            phase=PHASE_PARSE,
        )
        return book

    async def close(self) -> None:
        """HTTP 세션을 종료합니다."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _ensure_session(self) -> None:
        """HTTP 세션을 생성하거나 재사용합니다."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers={"User-Agent": self.user_agent, "Accept": "application/json"},
            )

    async def _request_json(self, path: str, params: dict[str, str] | None) -> Any:
        """GET 요청 후 orjson으로 디코딩한 본문 반환"""
        await self._ensure_session()
        assert self._session is not None

        url = f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

        try:
            async with self._session.get(url, params=params) as response:
                body = await response.read()
                status = response.status
        except TRANSPORT_EXCEPTIONS as e:
            raise ExchangeNetworkError(
                exchange_name=self.exchange_name,
                message=f"HTTP request failed: {e.__class__.__name__}: {e}",
                original_exception=e if isinstance(e, Exception) else None,
            ) from e

        if not 200 <= status < 300:
            text = body.decode("utf-8", errors="replace")[:_MAX_ERROR_BODY]
            logger.debug(
                f"{self.exchange_name} responded {status}",
                provider=self.exchange_name,
                phase=PHASE_REQUEST,
                status=status,
            )
            raise ExchangeStatusError(
                exchange_name=self.exchange_name,
                message=f"Failed to fetch order book from {self.exchange_name}: {text}",
                status=status,
            )

        try:
            return orjson.loads(body)
        except orjson.JSONDecodeError as e:
            raise MalformedResponseError(
                exchange_name=self.exchange_name,
                message="Response body is not valid JSON",
                original_exception=e,
            ) from e
