"""멀티 거래소 오더북 집계기

흐름 (호출 1회 기준):
    dispatched  : 프로바이더마다 태스크 1개 생성
    collecting  : 완료 순서대로 결과 수집, 성공은 병합하고 실패는 기록만
    succeeded   : 1개 이상 성공 → 통합 OrderBook 반환
    failed      : 전부 실패 → AggregationFailedError

재시도/백오프는 이 계층의 책임이 아닙니다 (프로바이더 쪽 관심사).
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass

from src.common.exceptions import AggregationFailedError, DataProviderError
from src.common.log_phases import (
    PHASE_COLLECTING,
    PHASE_DISPATCHED,
    PHASE_FAILED,
    PHASE_SUCCEEDED,
)
from src.common.logger import PipelineLogger
from src.core.order_book import OrderBook
from src.core.types import AGGREGATED_EXCHANGE, Product
from src.exchange.base import DataProvider

logger = PipelineLogger.get_logger("aggregator", "app")


@dataclass(slots=True, frozen=True)
class ProviderFailure:
    """실패한 프로바이더 1건 (진단용)"""

    provider_name: str
    error: BaseException


class OrderBookAggregator:
    """프로바이더 목록을 동시에 조회해 하나의 OrderBook으로 병합

    책임:
    - 프로바이더별 동시 조회 (모든 태스크 완료까지 대기, 조기 취소 없음)
    - 성공 결과 병합 (첫 성공이 누산기가 됨)
    - 부분 실패 허용, 전부 실패 시에만 예외

    같은 프로바이더를 두 번 넣으면 유동성이 두 번 합산됩니다 (중복 제거 없음).
    """

    def __init__(self, data_providers: Sequence[DataProvider], product_id: Product) -> None:
        self.data_providers = list(data_providers)
        self.product_id = product_id
        self.last_failures: list[ProviderFailure] = []

    async def fetch_and_aggregate_data(self) -> OrderBook:
        """모든 프로바이더에서 오더북을 받아 병합

        Returns:
            성공한 프로바이더들의 유동성만 담은 통합 OrderBook

        Raises:
            AggregationFailedError: 성공한 프로바이더가 하나도 없음
        """
        provider_names: dict[asyncio.Task[OrderBook], str] = {}
        for provider in self.data_providers:
            name = provider.name()
            task = asyncio.create_task(
                provider.fetch_order_book(self.product_id),
                name=f"orderbook-{name}-{self.product_id}",
            )
            provider_names[task] = name

        attempted = len(provider_names)
        logger.info(
            f"{attempted}개 프로바이더 조회 시작: {self.product_id}",
            phase=PHASE_DISPATCHED,
            product=str(self.product_id),
        )

        aggregated_book: OrderBook | None = None
        succeeded = 0
        failures: list[ProviderFailure] = []
        pending: set[asyncio.Task[OrderBook]] = set(provider_names)

        try:
            # 완료 순서대로 수집 (병합 순서는 가격별 합계에 영향 없음)
            while pending:
                done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
                for task in done:
                    provider_name = provider_names[task]
                    # 취소로 끝난 태스크도 해당 프로바이더 실패로 취급
                    if task.cancelled():
                        failures.append(ProviderFailure(provider_name, asyncio.CancelledError()))
                        await logger.awarning(
                            f"Task for {provider_name} was cancelled",
                            phase=PHASE_COLLECTING,
                            provider=provider_name,
                        )
                        continue
                    try:
                        book = task.result()
                    except DataProviderError as e:
                        failures.append(ProviderFailure(provider_name, e))
                        await logger.awarning(
                            f"Failed to fetch data from {provider_name}: {e.message}",
                            phase=PHASE_COLLECTING,
                            extra=e.to_dict(),
                        )
                        continue
                    except Exception as e:
                        # 태스크 자체의 비정상 종료도 프로바이더 실패로 취급
                        failures.append(ProviderFailure(provider_name, e))
                        await logger.awarning(
                            f"Task join error from {provider_name}: {e.__class__.__name__}: {e}",
                            phase=PHASE_COLLECTING,
                            provider=provider_name,
                            exc_info=e,
                        )
                        continue

                    succeeded += 1
                    if aggregated_book is None:
                        aggregated_book = book
                    else:
                        aggregated_book.merge(book)
        finally:
            # 바깥 호출이 취소되면 남은 프로바이더 태스크도 정리
            for task in pending:
                task.cancel()

        self.last_failures = failures

        if aggregated_book is None:
            logger.error(
                f"모든 프로바이더 실패 ({len(failures)}/{attempted})",
                phase=PHASE_FAILED,
                product=str(self.product_id),
            )
            raise AggregationFailedError(attempted=attempted)

        logger.info(
            f"{AGGREGATED_EXCHANGE} order book ready: {succeeded}/{attempted} providers, "
            f"{aggregated_book!r}",
            phase=PHASE_SUCCEEDED,
            product=str(self.product_id),
            failed=[failure.provider_name for failure in failures],
        )
        return aggregated_book
