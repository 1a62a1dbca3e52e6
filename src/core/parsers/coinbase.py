"""Coinbase Exchange Level 2 오더북 파서."""

from __future__ import annotations

from typing import Any

from src.core.dto.io.orderbook import CoinbaseBookResponseDTO
from src.core.parsers.base import OrderBookParser


class CoinbaseOrderBookParser(OrderBookParser):
    """Coinbase Exchange API 오더북 파서.

    특징 (Exchange API - 인증 불필요):
    - bids/asks: [price, size, num_orders] 배열, 가격/수량은 문자열
    - 같은 가격은 이미 집계되어 있음 (level=2)
    """

    exchange_name = "Coinbase"

    def iter_levels(self, payload: Any) -> tuple[list[tuple[Any, Any]], list[tuple[Any, Any]]]:
        response = CoinbaseBookResponseDTO.model_validate(payload)
        bids = [(level[0], level[1]) for level in response.bids if len(level) >= 2]
        asks = [(level[0], level[1]) for level in response.asks if len(level) >= 2]
        return bids, asks
