"""파서 공통 Base 클래스 및 유틸리티.

Strategy Pattern으로 각 거래소 REST 응답을 OrderBook으로 변환합니다.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from src.common.logger import PipelineLogger
from src.core.dto.internal.orderbook import PriceLevelDomain
from src.core.order_book import OrderBook
from src.core.types import Side

logger = PipelineLogger.get_logger("orderbook_parser", "core")


def parse_price_level(price_raw: Any, quantity_raw: Any) -> PriceLevelDomain | None:
    """원시 가격/수량 값을 검증된 레벨로 변환.

    Args:
        price_raw: 가격 (보통 문자열, 예: "103123.79")
        quantity_raw: 수량 (보통 문자열, 예: "0.1425")

    Returns:
        유효하면 PriceLevelDomain, 파싱 불가/NaN/무한대/음수면 None

    Examples:
        >>> parse_price_level("103123.79", "0.1425")
        PriceLevelDomain(price=103123.79, quantity=0.1425)
        >>> parse_price_level("nan", "1") is None
        True
    """
    # bool은 int의 하위 타입이지만 가격으로 취급하지 않습니다.
    if isinstance(price_raw, bool) or isinstance(quantity_raw, bool):
        return None
    if not isinstance(price_raw, (str, int, float)) or not isinstance(
        quantity_raw, (str, int, float)
    ):
        return None

    try:
        return PriceLevelDomain(price=float(price_raw), quantity=float(quantity_raw))
    except (ValueError, OverflowError):
        return None


class OrderBookParser(ABC):
    """오더북 응답 파서 인터페이스."""

    exchange_name: str = ""

    @abstractmethod
    def iter_levels(self, payload: Any) -> tuple[list[tuple[Any, Any]], list[tuple[Any, Any]]]:
        """응답에서 (bids, asks) 원시 (가격, 수량) 목록 추출.

        Args:
            payload: orjson으로 디코딩된 응답 본문

        Raises:
            pydantic.ValidationError: 봉투 구조 불일치
        """

    def parse(self, payload: Any) -> OrderBook:
        """응답 본문을 OrderBook으로 변환 (깨진 레벨은 버림).

        Args:
            payload: orjson으로 디코딩된 응답 본문

        Returns:
            파싱된 OrderBook

        Raises:
            pydantic.ValidationError: 봉투 구조 불일치
        """
        raw_bids, raw_asks = self.iter_levels(payload)
        book = OrderBook()
        dropped = 0

        for side, raw_levels in ((Side.BID, raw_bids), (Side.ASK, raw_asks)):
            for price_raw, quantity_raw in raw_levels:
                level = parse_price_level(price_raw, quantity_raw)
                if level is None:
                    dropped += 1
                    continue
                book.add_level(side, level)

        if dropped:
            logger.debug(
                f"{self.exchange_name}: dropped {dropped} malformed levels",
                provider=self.exchange_name,
                dropped=dropped,
            )
        return book
