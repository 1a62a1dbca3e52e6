"""거래소 오더북 REST 응답 DTO.

봉투(bids/asks 배열) 구조만 엄격하게 검증하고, 개별 레벨의 숫자 해석은
파서에 맡깁니다. 레벨 하나가 깨졌다고 응답 전체를 버리지 않기 위함입니다.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from src.core.dto.io._base import BaseExchangeResponseDTO


class CoinbaseBookResponseDTO(BaseExchangeResponseDTO):
    """Coinbase Exchange `GET /products/{id}/book?level=2` 응답.

    Example:
        {"bids": [["10101.10", "0.45054140", 3]], "asks": [...], "sequence": 3}
    """

    bids: list[list[Any]] = Field(..., description="[price, size, num_orders]")
    asks: list[list[Any]] = Field(..., description="[price, size, num_orders]")
    sequence: int | None = None


class GeminiBookResponseDTO(BaseExchangeResponseDTO):
    """Gemini `GET /v1/book/{symbol}` 응답.

    Example:
        {"bids": [{"price": "3607.85", "amount": "6.643373", "timestamp": "1547147541"}],
         "asks": [...]}
    """

    bids: list[dict[str, Any]] = Field(..., description="{price, amount, timestamp}")
    asks: list[dict[str, Any]] = Field(..., description="{price, amount, timestamp}")
