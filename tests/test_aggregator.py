from __future__ import annotations

import asyncio

import pytest

from src.application.aggregator import OrderBookAggregator
from src.common.exceptions import (
    AggregationFailedError,
    AggregatorError,
    ExchangeNetworkError,
    ExchangeStatusError,
    RateLimitExceededError,
)
from src.core.order_book import OrderBook
from src.core.types import Product
from src.exchange.base import DataProvider
from tests.factory_builders import build_order_book


class _FakeProvider:
    """고정 오더북(또는 예외)을 돌려주는 프로바이더"""

    def __init__(
        self,
        name: str,
        *,
        bids: dict[float, float] | None = None,
        asks: dict[float, float] | None = None,
        error: BaseException | None = None,
        delay: float = 0.0,
    ) -> None:
        self._name = name
        self._bids = bids or {}
        self._asks = asks or {}
        self._error = error
        self._delay = delay
        self.calls: list[Product] = []
        self.closed = False
        self.cancelled = False

    def name(self) -> str:
        return self._name

    async def fetch_order_book(self, product_id: Product) -> OrderBook:
        self.calls.append(product_id)
        if self._delay:
            try:
                await asyncio.sleep(self._delay)
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        if self._error is not None:
            raise self._error
        # 호출마다 새 오더북 (누산기 병합이 원본을 건드리지 않도록)
        return build_order_book(bids=self._bids, asks=self._asks)

    async def close(self) -> None:
        self.closed = True


def test_fake_provider_satisfies_protocol() -> None:
    assert isinstance(_FakeProvider("Fake"), DataProvider)


@pytest.mark.asyncio
async def test_merges_all_successful_providers() -> None:
    coinbase = _FakeProvider("Coinbase", bids={100.0: 1.0}, asks={101.0: 1.0})
    gemini = _FakeProvider("Gemini", bids={100.0: 2.0, 99.0: 1.0}, asks={102.0: 0.5})
    aggregator = OrderBookAggregator([coinbase, gemini], Product.BTC_USD)

    book = await aggregator.fetch_and_aggregate_data()

    assert dict(book.bids) == {99.0: 1.0, 100.0: 3.0}
    assert dict(book.asks) == {101.0: 1.0, 102.0: 0.5}
    assert coinbase.calls == [Product.BTC_USD]
    assert gemini.calls == [Product.BTC_USD]
    assert aggregator.last_failures == []


@pytest.mark.asyncio
async def test_partial_failure_returns_surviving_liquidity() -> None:
    failing = _FakeProvider(
        "Coinbase",
        error=ExchangeStatusError(exchange_name="Coinbase", message="boom", status=500),
    )
    healthy = _FakeProvider("Gemini", bids={100.0: 1.0}, asks={101.0: 2.0})
    aggregator = OrderBookAggregator([failing, healthy], Product.BTC_USD)

    book = await aggregator.fetch_and_aggregate_data()

    assert dict(book.bids) == {100.0: 1.0}
    assert dict(book.asks) == {101.0: 2.0}
    assert [f.provider_name for f in aggregator.last_failures] == ["Coinbase"]
    assert isinstance(aggregator.last_failures[0].error, ExchangeStatusError)


@pytest.mark.asyncio
async def test_all_providers_failing_raises_aggregation_failed() -> None:
    aggregator = OrderBookAggregator(
        [
            _FakeProvider(
                "Coinbase",
                error=RateLimitExceededError(exchange_name="Coinbase", message="slow down"),
            ),
            _FakeProvider(
                "Gemini",
                error=ExchangeNetworkError(exchange_name="Gemini", message="unreachable"),
            ),
        ],
        Product.BTC_USD,
    )

    with pytest.raises(AggregationFailedError) as exc_info:
        await aggregator.fetch_and_aggregate_data()

    assert exc_info.value.attempted == 2
    assert isinstance(exc_info.value, AggregatorError)
    assert sorted(f.provider_name for f in aggregator.last_failures) == ["Coinbase", "Gemini"]


@pytest.mark.asyncio
async def test_no_providers_raises_aggregation_failed() -> None:
    aggregator = OrderBookAggregator([], Product.BTC_USD)

    with pytest.raises(AggregationFailedError) as exc_info:
        await aggregator.fetch_and_aggregate_data()

    assert exc_info.value.attempted == 0


@pytest.mark.asyncio
async def test_unexpected_task_crash_counts_as_provider_failure() -> None:
    crashing = _FakeProvider("Broken", error=RuntimeError("task blew up"))
    healthy = _FakeProvider("Gemini", asks={101.0: 1.0})
    aggregator = OrderBookAggregator([crashing, healthy], Product.ETH_USD)

    book = await aggregator.fetch_and_aggregate_data()

    assert dict(book.asks) == {101.0: 1.0}
    assert len(aggregator.last_failures) == 1
    failure = aggregator.last_failures[0]
    assert failure.provider_name == "Broken"
    assert isinstance(failure.error, RuntimeError)


@pytest.mark.asyncio
async def test_waits_for_slow_provider_after_fast_success() -> None:
    fast = _FakeProvider("Fast", asks={101.0: 1.0})
    slow = _FakeProvider("Slow", asks={101.0: 0.5, 105.0: 2.0}, delay=0.05)
    aggregator = OrderBookAggregator([fast, slow], Product.BTC_USD)

    book = await aggregator.fetch_and_aggregate_data()

    assert dict(book.asks) == {101.0: 1.5, 105.0: 2.0}


@pytest.mark.asyncio
async def test_result_does_not_depend_on_completion_order() -> None:
    first = dict(bids={100.0: 1.0}, asks={101.0: 0.25})
    second = dict(bids={100.0: 0.5, 98.0: 3.0}, asks={101.0: 0.75, 103.0: 1.0})

    book_a = await OrderBookAggregator(
        [_FakeProvider("A", delay=0.03, **first), _FakeProvider("B", **second)],
        Product.BTC_USD,
    ).fetch_and_aggregate_data()
    book_b = await OrderBookAggregator(
        [_FakeProvider("A", **first), _FakeProvider("B", delay=0.03, **second)],
        Product.BTC_USD,
    ).fetch_and_aggregate_data()

    assert dict(book_a.bids) == dict(book_b.bids)
    assert dict(book_a.asks) == dict(book_b.asks)


@pytest.mark.asyncio
async def test_duplicate_provider_doubles_liquidity() -> None:
    provider = _FakeProvider("Coinbase", bids={100.0: 1.0}, asks={101.0: 0.5})
    aggregator = OrderBookAggregator([provider, provider], Product.BTC_USD)

    book = await aggregator.fetch_and_aggregate_data()

    assert dict(book.bids) == {100.0: 2.0}
    assert dict(book.asks) == {101.0: 1.0}
    assert len(provider.calls) == 2


@pytest.mark.asyncio
async def test_single_empty_success_yields_empty_book() -> None:
    aggregator = OrderBookAggregator([_FakeProvider("Quiet")], Product.BTC_USD)

    book = await aggregator.fetch_and_aggregate_data()

    assert book.is_empty()


@pytest.mark.asyncio
async def test_aggregated_book_prices_across_exchanges() -> None:
    coinbase = _FakeProvider("Coinbase", asks={103123.79: 0.05})
    gemini = _FakeProvider("Gemini", asks={103123.79: 0.0925, 103126.01: 0.1378704})
    aggregator = OrderBookAggregator([coinbase, gemini], Product.BTC_USD)

    book = await aggregator.fetch_and_aggregate_data()

    assert book.calculate_best_buy_offer(0.1) == 10312.38


@pytest.mark.asyncio
async def test_cancelled_provider_task_counts_as_provider_failure() -> None:
    cancelled = _FakeProvider("Coinbase", error=asyncio.CancelledError())
    healthy = _FakeProvider("Gemini", asks={101.0: 1.0})
    aggregator = OrderBookAggregator([cancelled, healthy], Product.BTC_USD)

    book = await aggregator.fetch_and_aggregate_data()

    assert dict(book.asks) == {101.0: 1.0}
    assert [f.provider_name for f in aggregator.last_failures] == ["Coinbase"]
    assert isinstance(aggregator.last_failures[0].error, asyncio.CancelledError)


@pytest.mark.asyncio
async def test_only_cancelled_providers_raise_aggregation_failed() -> None:
    aggregator = OrderBookAggregator(
        [_FakeProvider("Coinbase", error=asyncio.CancelledError())], Product.BTC_USD
    )

    with pytest.raises(AggregationFailedError) as exc_info:
        await aggregator.fetch_and_aggregate_data()

    assert exc_info.value.attempted == 1


@pytest.mark.asyncio
async def test_outer_cancellation_propagates_and_cancels_provider_tasks() -> None:
    slow = _FakeProvider("Slow", asks={101.0: 1.0}, delay=10.0)
    aggregator = OrderBookAggregator([slow], Product.BTC_USD)

    outer = asyncio.create_task(aggregator.fetch_and_aggregate_data())
    await asyncio.sleep(0.01)
    outer.cancel()

    with pytest.raises(asyncio.CancelledError):
        await outer

    # 내부 태스크가 취소를 처리할 기회
    await asyncio.sleep(0.01)
    assert slow.calls == [Product.BTC_USD]
    assert slow.cancelled is True
