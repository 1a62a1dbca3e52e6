"""가격 → 누적 수량 정렬 맵 기반 오더북.

bids/asks 모두 가격 오름차순으로 보관합니다.
- 매수 비용 산정: asks를 오름차순으로 소진 (가장 싼 매도 호가부터)
- 매도 수익 산정: bids를 내림차순으로 소진 (가장 비싼 매수 호가부터)
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from sortedcontainers import SortedDict

from src.common.exceptions import InsufficientLiquidityError
from src.core.dto.internal.orderbook import PriceLevelDomain, validate_level
from src.core.types import Side, side_label


def round_cents(value: float) -> float:
    """소수점 2자리 반올림 (0.5는 0에서 먼 쪽으로).

    내장 round()는 banker's rounding이므로 사용하지 않습니다.
    """
    scaled = Decimal(value * 100.0).to_integral_value(rounding=ROUND_HALF_UP)
    return float(scaled) / 100.0


class OrderBook:
    """통합 가능한 오더북.

    같은 가격에 대한 재삽입은 덮어쓰지 않고 수량을 누적합니다.
    merge()는 멱등이 아니므로 같은 소스를 두 번 병합하면 수량이 두 배가 됩니다.
    """

    __slots__ = ("bids", "asks")

    def __init__(self) -> None:
        self.bids: SortedDict = SortedDict()
        self.asks: SortedDict = SortedDict()

    def __repr__(self) -> str:
        return f"OrderBook(bids={len(self.bids)} levels, asks={len(self.asks)} levels)"

    def is_empty(self) -> bool:
        return not self.bids and not self.asks

    def add_bid(self, price: float, quantity: float) -> None:
        self._add(self.bids, price, quantity)

    def add_ask(self, price: float, quantity: float) -> None:
        self._add(self.asks, price, quantity)

    def add_level(self, side: Side, level: PriceLevelDomain) -> None:
        self._add(self._levels_for(side), level.price, level.quantity)

    def merge(self, other: OrderBook) -> None:
        """other의 모든 레벨을 self에 합산 (other는 변경하지 않음)."""
        for price, quantity in other.bids.items():
            self.bids[price] = self.bids.get(price, 0.0) + quantity
        for price, quantity in other.asks.items():
            self.asks[price] = self.asks.get(price, 0.0) + quantity

    def levels(self, side: Side) -> list[PriceLevelDomain]:
        """소진 순서대로 정렬된 레벨 목록 (asks 오름차순, bids 내림차순)."""
        return [
            PriceLevelDomain(price=price, quantity=quantity)
            for price, quantity in self._walk_order(side)
        ]

    def total_quantity(self, side: Side) -> float:
        return math.fsum(self._levels_for(side).values())

    def calculate_best_buy_offer(self, quantity: float) -> float:
        """quantity 만큼 시장가 매수 시 총 비용 (asks 소진).

        Raises:
            InsufficientLiquidityError: asks 전체로도 수량을 채울 수 없음
        """
        return self._walk(Side.ASK, quantity)

    def calculate_best_sell_offer(self, quantity: float) -> float:
        """quantity 만큼 시장가 매도 시 총 수익 (bids 소진).

        Raises:
            InsufficientLiquidityError: bids 전체로도 수량을 채울 수 없음
        """
        return self._walk(Side.BID, quantity)

    # ========== Private Methods ==========

    @staticmethod
    def _add(levels: SortedDict, price: float, quantity: float) -> None:
        validate_level(price, quantity)
        levels[price] = levels.get(price, 0.0) + quantity

    def _levels_for(self, side: Side) -> SortedDict:
        return self.bids if side is Side.BID else self.asks

    def _walk_order(self, side: Side) -> Iterable[tuple[float, float]]:
        levels = self._levels_for(side)
        prices = reversed(levels) if side is Side.BID else iter(levels)
        return ((price, levels[price]) for price in prices)

    def _walk(self, side: Side, quantity: float) -> float:
        if math.isnan(quantity):
            raise ValueError("requested quantity must not be NaN")
        # 0 이하 수량은 유동성을 소진하지 않고 비용 0으로 처리
        if quantity <= 0:
            return 0.0

        remaining = quantity
        total_cost = 0.0

        for price, available in self._walk_order(side):
            if remaining <= 0:
                break
            filled = min(remaining, available)
            total_cost += filled * price
            remaining -= filled

        if remaining > 0:
            raise InsufficientLiquidityError(
                side=side_label(side),
                requested=quantity,
                available=self.total_quantity(side),
            )

        return round_cents(total_cost)
