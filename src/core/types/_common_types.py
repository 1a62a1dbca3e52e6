from __future__ import annotations

from enum import StrEnum
from typing import Final, Literal, TypeAlias, assert_never

# 공통 타입/별칭을 한곳에 모읍니다.
# - 코어 계층 어디서나 재사용 가능한 최소 단위만 정의합니다.
# - 거래소 응답 스키마 세부는 각 파서/DTO 모듈에 두고, 여기에는 기반 타입만 둡니다.

ExchangeName: TypeAlias = Literal["Coinbase", "Gemini"]

AGGREGATED_EXCHANGE: Final[str] = "Aggregated"


class Side(StrEnum):
    """오더북 사이드.

    값은 OrderBook 속성 이름과 동일합니다 (bids / asks).
    """

    BID = "bids"
    ASK = "asks"


class Product(StrEnum):
    """집계 대상 거래쌍.

    값은 "BASE-QUOTE" 형식이며, 거래소별 심볼 표기는 메서드로 변환합니다.
    """

    BTC_USD = "BTC-USD"
    ETH_USD = "ETH-USD"

    @property
    def base_currency(self) -> str:
        return self.value.split("-", 1)[0]

    @property
    def quote_currency(self) -> str:
        return self.value.split("-", 1)[1]

    def to_coinbase_symbol(self) -> str:
        """Coinbase 심볼 ("BTC-USD")"""
        return self.value

    def to_gemini_symbol(self) -> str:
        """Gemini 심볼 ("btcusd")"""
        return f"{self.base_currency}{self.quote_currency}".lower()


def side_label(side: Side) -> str:
    """에러/로그 메시지용 사이드 표기: Enum 분기 완전탐색 보장."""
    match side:
        case Side.BID:
            return "bid side"
        case Side.ASK:
            return "ask side"
        case _:
            assert_never(side)
