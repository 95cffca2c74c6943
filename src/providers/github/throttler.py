"""Client-side admission gate for the GitHub code search API.

GitHub allows 30 search requests per rolling minute. The throttler keeps
the timestamps of recent admissions and suspends the caller until the
oldest one leaves the window. It waits instead of failing.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from typing import Awaitable, Callable, Deque, Optional

from core.cache import Clock
from core.limits import SEARCH_RATE_BUFFER_SECONDS, SEARCH_RATE_LIMIT, SEARCH_RATE_WINDOW_SECONDS

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class GitHubSearchThrottler:
    def __init__(
        self,
        *,
        limit: int = SEARCH_RATE_LIMIT,
        window_seconds: float = SEARCH_RATE_WINDOW_SECONDS,
        buffer_seconds: float = SEARCH_RATE_BUFFER_SECONDS,
        clock: Optional[Clock] = None,
        sleep: Optional[Sleep] = None,
    ) -> None:
        self._limit = max(1, int(limit))
        self._window = float(window_seconds)
        self._buffer = float(buffer_seconds)
        self._clock: Clock = clock or time.monotonic
        self._sleep: Sleep = sleep or asyncio.sleep
        self._requests: Deque[float] = deque()

    def _prune(self, now: float) -> None:
        while self._requests and now - self._requests[0] >= self._window:
            self._requests.popleft()

    async def admit(self) -> None:
        while True:
            now = self._clock()
            self._prune(now)
            if len(self._requests) < self._limit:
                break

            # Re-check after waking: other callers may have been admitted meanwhile.
            delay = self._window - (now - self._requests[0]) + self._buffer
            logger.info("GitHub search rate limit reached, waiting %.1fs", delay)
            await self._sleep(delay)

        self._requests.append(self._clock())

    def __len__(self) -> int:
        return len(self._requests)
