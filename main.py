"""애플리케이션 진입점

여러 거래소의 오더북을 집계해 시장가 매수/매도 예상 금액을 출력합니다.

Usage:
    python main.py                          # BTC-USD, 10.0 BTC
    python main.py --qty 2.5 --product ETH-USD
"""

from __future__ import annotations

import argparse
import asyncio
import math
import sys
from typing import Sequence

from src.common.exceptions import AggregatorError
from src.common.log_phases import PHASE_PRICING, PHASE_SHUTDOWN, PHASE_STARTUP
from src.common.logger import PipelineLogger
from src.config.containers import ApplicationContainer
from src.config.settings import app_settings
from src.core.types import Product

logger = PipelineLogger.get_logger("main", "app")


def _quantity(value: str) -> float:
    quantity = float(value)
    if math.isnan(quantity):
        raise argparse.ArgumentTypeError("quantity must be a number")
    return quantity


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="order-book-aggregator",
        description="Order Book Aggregator",
    )
    parser.add_argument(
        "--qty",
        type=_quantity,
        default=10.0,
        help="order quantity in base currency (default: 10.0)",
    )
    parser.add_argument(
        "--product",
        type=Product,
        default=Product.BTC_USD,
        choices=list(Product),
        help="trading pair (default: BTC-USD)",
    )
    return parser.parse_args(argv)


async def run(
    argv: Sequence[str] | None = None,
    container: ApplicationContainer | None = None,
) -> int:
    """집계 → 가격 산정 → 결과 출력. 종료 코드를 반환합니다."""
    args = parse_args(argv)
    container = container or ApplicationContainer()
    product: Product = args.product
    quantity: float = args.qty
    logger.debug(
        f"start: product={product}, qty={quantity}",
        phase=PHASE_STARTUP,
        environment=app_settings.environment,
    )

    try:
        aggregator = container.aggregator(product_id=product)
        aggregated_book = await aggregator.fetch_and_aggregate_data()

        best_buy_price = aggregated_book.calculate_best_buy_offer(quantity)
        print(f"To buy  {quantity} {product.base_currency} : ${best_buy_price:.2f}")

        best_sell_price = aggregated_book.calculate_best_sell_offer(quantity)
        print(f"To sell {quantity} {product.base_currency} : ${best_sell_price:.2f}")
    except AggregatorError as e:
        logger.error(f"Error: {e}", phase=PHASE_PRICING, error_type=e.__class__.__name__)
        return 1
    finally:
        for provider in container.data_providers():
            await provider.close()
        logger.debug("HTTP 세션 정리 완료", phase=PHASE_SHUTDOWN)

    return 0


def main() -> None:
    try:
        exit_code = asyncio.run(run())
    except KeyboardInterrupt:
        print("\n프로그램이 종료되었습니다.", file=sys.stderr)
        exit_code = 130
    finally:
        # 데몬 리스너 스레드에 남은 로그를 종료 전에 flush
        PipelineLogger.shutdown()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
