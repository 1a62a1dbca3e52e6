"""트라이/캐치 블록에서 사용할 예외 타입 정의 모듈.

광범위한 Exception 사용을 지양하고, 의도한 예외만 명시적으로 처리하기 위해 사용합니다.
"""

import asyncio
from enum import StrEnum
from typing import Final

import aiohttp
import orjson
from pydantic import ValidationError


class ErrorCode(StrEnum):
    """프로바이더 에러 코드 분류"""

    RATE_LIMITED = "rate_limited"
    NETWORK_ERROR = "network_error"
    HTTP_STATUS = "http_status"
    MALFORMED_RESPONSE = "malformed_response"
    UNKNOWN_ERROR = "unknown_error"


# ----------------------------------------------------------------------------
# Exception Constants
# ----------------------------------------------------------------------------

# 1. 네트워크/전송 관련 예외
# - aiohttp.ClientError: 연결 실패, 응답 수신 중단 등
# - asyncio.TimeoutError: ClientTimeout 초과
TRANSPORT_EXCEPTIONS: Final[tuple[type[BaseException], ...]] = (
    aiohttp.ClientError,
    asyncio.TimeoutError,
)

# 2. 응답 본문 해석 예외
# - orjson.JSONDecodeError: JSON 문법 오류
# - ValidationError: 응답 봉투(bids/asks) 구조 불일치
PAYLOAD_EXCEPTIONS: Final[tuple[type[BaseException], ...]] = (
    orjson.JSONDecodeError,
    ValidationError,
)
