"""Gemini 오더북 파서."""

from __future__ import annotations

from typing import Any

from src.core.dto.io.orderbook import GeminiBookResponseDTO
from src.core.parsers.base import OrderBookParser


class GeminiOrderBookParser(OrderBookParser):
    """Gemini v1 REST 오더북 파서.

    - bids/asks: {"price": "...", "amount": "...", "timestamp": "..."} 객체
    - 수량 필드 이름이 size가 아니라 amount
    """

    exchange_name = "Gemini"

    def iter_levels(self, payload: Any) -> tuple[list[tuple[Any, Any]], list[tuple[Any, Any]]]:
        response = GeminiBookResponseDTO.model_validate(payload)
        bids = [(level.get("price"), level.get("amount")) for level in response.bids]
        asks = [(level.get("price"), level.get("amount")) for level in response.asks]
        return bids, asks
