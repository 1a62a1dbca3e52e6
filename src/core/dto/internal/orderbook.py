"""오더북 내부 도메인 모델.

내부 처리용 불변 도메인 객체 (dataclass 기반).
"""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(slots=True, frozen=True, eq=True, repr=True, match_args=False, kw_only=True)
class PriceLevelDomain:
    """호가 레벨 도메인 (단일 가격의 누적 수량).

    특징:
    - 불변 객체 (frozen=True)
    - 생성 시 유한/비음수 검증 (NaN은 정렬 불변식을 깨므로 거부)
    """

    price: float
    quantity: float

    def __post_init__(self) -> None:
        validate_level(self.price, self.quantity)


def validate_level(price: float, quantity: float) -> None:
    """가격/수량이 유한한 비음수인지 확인.

    Raises:
        ValueError: NaN, 무한대, 음수
    """
    if not (math.isfinite(price) and price >= 0):
        raise ValueError(f"invalid price level price: {price!r}")
    if not (math.isfinite(quantity) and quantity >= 0):
        raise ValueError(f"invalid price level quantity: {quantity!r}")
