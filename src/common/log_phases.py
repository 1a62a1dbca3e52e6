"""로그 phase 태그 상수 (인라인 문자열 금지)."""

from __future__ import annotations

from typing import Final

# Aggregator 상태 전이
PHASE_DISPATCHED: Final[str] = "dispatched"
PHASE_COLLECTING: Final[str] = "collecting"
PHASE_SUCCEEDED: Final[str] = "succeeded"
PHASE_FAILED: Final[str] = "failed"

# 프로바이더 요청 단계
PHASE_RATE_LIMIT: Final[str] = "rate_limit"
PHASE_REQUEST: Final[str] = "request"
PHASE_PARSE: Final[str] = "parse"

# 프로세스 진입점
PHASE_STARTUP: Final[str] = "startup"
PHASE_PRICING: Final[str] = "pricing"
PHASE_SHUTDOWN: Final[str] = "shutdown"
