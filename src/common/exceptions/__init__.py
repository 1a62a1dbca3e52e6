from src.common.exceptions.base import (
    AggregationFailedError,
    AggregatorError,
    DataProviderError,
    ExchangeNetworkError,
    ExchangeStatusError,
    InsufficientLiquidityError,
    MalformedResponseError,
    RateLimitExceededError,
)

__all__ = [
    "AggregatorError",
    "AggregationFailedError",
    "InsufficientLiquidityError",
    "DataProviderError",
    "RateLimitExceededError",
    "ExchangeNetworkError",
    "ExchangeStatusError",
    "MalformedResponseError",
]
