from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from src.core.types import ErrorCode


# ========================================
# 집계/가격 산정 예외 (호출자에게 전파)
# ========================================


class AggregatorError(Exception):
    """집계 파이프라인 최상위 예외.

    CLI 계층은 이 타입만 잡아서 종료 코드를 결정합니다.
    """


class AggregationFailedError(AggregatorError):
    """모든 프로바이더가 실패해 통합 오더북을 만들 수 없을 때"""

    def __init__(self, attempted: int) -> None:
        self.attempted = attempted
        super().__init__(
            f"Failed to aggregate order books: 0 of {attempted} providers succeeded"
        )


class InsufficientLiquidityError(AggregatorError):
    """요청 수량을 채울 유동성이 부족할 때 (부분 결과 없음)"""

    def __init__(self, side: str, requested: float, available: float) -> None:
        self.side = side
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient liquidity on {side}: requested {requested}, "
            f"only {available} available"
        )


# ========================================
# 프로바이더 예외 (Aggregator 내부에서 복구)
# ========================================


@dataclass(eq=False)
class DataProviderError(Exception):
    """거래소 프로바이더 기본 예외 클래스

    운영/관측 판단을 위한 구조화 필드를 포함하며, `to_dict()`는
    로그 직렬화 시 일관된 스키마를 제공합니다.
    """

    exchange_name: str
    message: str
    original_exception: Exception | None = None

    error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR
    retryable: bool = False

    def __str__(self) -> str:
        return f"[{self.exchange_name}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """예외 정보를 로그 extra 데이터로 변환"""
        result: dict[str, Any] = {
            "provider": self.exchange_name,
            "error": self.message,
            "error_type": self.__class__.__name__,
            "error_code": self.error_code.value,
            "retryable": self.retryable,
        }

        if self.original_exception:
            result["original_error"] = str(self.original_exception)
            result["original_error_type"] = self.original_exception.__class__.__name__

        return result


@dataclass(eq=False)
class RateLimitExceededError(DataProviderError):
    """요청 윈도우 한도 초과"""

    error_code: ErrorCode = ErrorCode.RATE_LIMITED
    retryable: bool = True


@dataclass(eq=False)
class ExchangeNetworkError(DataProviderError):
    """전송 계층 실패 (연결 거부, 타임아웃 등)"""

    error_code: ErrorCode = ErrorCode.NETWORK_ERROR
    retryable: bool = True


@dataclass(eq=False)
class ExchangeStatusError(DataProviderError):
    """2xx가 아닌 HTTP 응답"""

    error_code: ErrorCode = ErrorCode.HTTP_STATUS
    status: int = 0

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["status"] = self.status
        return result


@dataclass(eq=False)
class MalformedResponseError(DataProviderError):
    """응답 본문을 오더북으로 해석할 수 없음"""

    error_code: ErrorCode = ErrorCode.MALFORMED_RESPONSE
