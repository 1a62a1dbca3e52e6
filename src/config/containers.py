"""
Dependency Injection Containers

이 모듈은 애플리케이션의 모든 의존성을 관리하는 DI 컨테이너를 정의합니다.

주요 패턴:
- Object Provider: settings.py 싱글톤 주입
- Singleton Provider: 거래소 프로바이더 (HTTP 세션/요청 제한기 상태 공유)
- Factory Provider: 상품별 Aggregator (product_id는 호출 시 주입)

사용 예시:
    container = ApplicationContainer()
    aggregator = container.aggregator(product_id=Product.BTC_USD)
    book = await aggregator.fetch_and_aggregate_data()
"""

from dependency_injector import containers, providers

from src.application.aggregator import OrderBookAggregator
from src.config.settings import (
    coinbase_settings,
    gemini_settings,
    http_settings,
)
from src.exchange.na import CoinbaseExchange, GeminiExchange


class ApplicationContainer(containers.DeclarativeContainer):
    """최상위 컨테이너"""

    coinbase_config = providers.Object(coinbase_settings)
    gemini_config = providers.Object(gemini_settings)
    http_config = providers.Object(http_settings)

    coinbase = providers.Singleton(
        CoinbaseExchange.from_settings,
        settings=coinbase_config,
        http=http_config,
    )
    gemini = providers.Singleton(
        GeminiExchange.from_settings,
        settings=gemini_config,
        http=http_config,
    )

    # 집계 대상 프로바이더 목록 (순서 = 디스패치 순서)
    data_providers = providers.List(coinbase, gemini)

    aggregator = providers.Factory(
        OrderBookAggregator,
        data_providers=data_providers,
    )
