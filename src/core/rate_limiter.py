from __future__ import annotations

import asyncio
import time
from typing import Callable

from src.common.exceptions import RateLimitExceededError


class RateLimiter:
    """고정 윈도우 요청 제한기.

    윈도우(interval_sec) 동안 최대 max_requests 건만 통과시킵니다.
    마지막 리셋 이후 interval_sec가 지나면 요청 활동과 무관하게 카운터를 리셋합니다.

    Example:
        >>> limiter = RateLimiter("Coinbase", max_requests=1, interval_sec=2.0)
        >>> await limiter.check_if_rate_limited()  # 통과
        >>> await limiter.check_if_rate_limited()  # RateLimitExceededError
    """

    def __init__(
        self,
        name: str,
        max_requests: int,
        interval_sec: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests < 1:
            raise ValueError(f"max_requests must be >= 1, got {max_requests}")
        if interval_sec <= 0:
            raise ValueError(f"interval_sec must be > 0, got {interval_sec}")

        self.name = name
        self.max_requests = max_requests
        self.interval_sec = interval_sec
        self._clock = clock
        self._requests_made = 0
        self._last_reset = clock()
        self._lock = asyncio.Lock()

    @property
    def requests_made(self) -> int:
        return self._requests_made

    async def check_if_rate_limited(self) -> None:
        """토큰 1개 소비. 윈도우 한도를 넘으면 예외.

        확인과 증가는 락 안에서 원자적으로 수행됩니다.

        Raises:
            RateLimitExceededError: 현재 윈도우의 토큰 소진
        """
        async with self._lock:
            now = self._clock()
            if now - self._last_reset >= self.interval_sec:
                self._requests_made = 0
                self._last_reset = now

            if self._requests_made >= self.max_requests:
                retry_after = self.interval_sec - (now - self._last_reset)
                raise RateLimitExceededError(
                    exchange_name=self.name,
                    message=(
                        f"Rate limit exceeded ({self.max_requests} per "
                        f"{self.interval_sec}s), retry in {retry_after:.2f}s"
                    ),
                )

            self._requests_made += 1
