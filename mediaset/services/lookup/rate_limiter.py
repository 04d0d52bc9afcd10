"""Async request gate enforcing per-provider pacing and request budgets."""

from __future__ import annotations

import asyncio
import time
from collections import deque
from typing import Awaitable, Callable, Deque, Optional

from mediaset import logging_manager as log_mgr

from .errors import RateLimitedError

logger = log_mgr.get_logger().getChild("services.lookup.rate_limiter")

_MINUTE = 60.0
_DAY = 24 * 60 * 60.0


class RateLimiter:
    """Serialize requests through a single permit and space them out.

    Every holder waits for the permit, then for whatever remains of
    ``min_interval_seconds`` since the previous request finished. Optional
    per-minute and per-day budgets are enforced while the permit is held. A
    limiter is meant to be shared by every client instance that talks to the
    same provider.

    Use it as an async context manager around exactly one outbound request.
    Cancelling a waiting task releases nothing it does not hold and leaves
    the last-request timestamp untouched.
    """

    def __init__(
        self,
        min_interval_seconds: float = 1.0,
        *,
        name: str = "provider",
        max_per_minute: Optional[int] = None,
        max_per_day: Optional[int] = None,
        max_wait_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.name = name
        self.min_interval_seconds = max(0.0, float(min_interval_seconds))
        self.max_per_minute = max_per_minute
        self.max_per_day = max_per_day
        self.max_wait_seconds = max_wait_seconds
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._last_request: Optional[float] = None
        self._recent: Deque[float] = deque()
        self._day_started: Optional[float] = None
        self._day_count = 0

    @property
    def last_request(self) -> Optional[float]:
        return self._last_request

    async def acquire(self) -> None:
        await self._lock.acquire()
        try:
            await self._wait_for_slot()
        except BaseException:
            self._lock.release()
            raise

    def release(self) -> None:
        self._last_request = self._clock()
        self._lock.release()

    async def __aenter__(self) -> "RateLimiter":
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.release()

    async def _wait_for_slot(self) -> None:
        now = self._clock()
        self._check_daily_budget(now)
        now = await self._wait_for_minute_budget(now)

        if self._last_request is not None:
            remaining = self.min_interval_seconds - (now - self._last_request)
            if remaining > 0:
                logger.debug(
                    "Delaying %s request by %.3fs",
                    self.name,
                    remaining,
                    extra={"event": "lookup.rate_limit.delay", "provider": self.name},
                )
                await self._sleep(remaining)
                now = self._clock()

        if self.max_per_minute:
            self._recent.append(now)
        self._day_count += 1

    def _check_daily_budget(self, now: float) -> None:
        if self.max_per_day is None:
            return
        if self._day_started is None or now - self._day_started >= _DAY:
            self._day_started = now
            self._day_count = 0
        if self._day_count >= self.max_per_day:
            retry_after = _DAY - (now - self._day_started)
            logger.warning(
                "%s daily request budget of %s exhausted",
                self.name,
                self.max_per_day,
                extra={"event": "lookup.rate_limit.daily_exhausted", "provider": self.name},
            )
            raise RateLimitedError(
                self.name,
                retry_after=retry_after,
                message=f"{self.name} daily request budget exhausted",
            )

    async def _wait_for_minute_budget(self, now: float) -> float:
        if not self.max_per_minute:
            return now
        self._prune(now)
        if len(self._recent) < self.max_per_minute:
            return now

        wait = _MINUTE - (now - self._recent[0])
        if self.max_wait_seconds is not None and wait > self.max_wait_seconds:
            raise RateLimitedError(
                self.name,
                retry_after=wait,
                message=f"{self.name} per-minute request budget exhausted",
            )
        logger.info(
            "%s per-minute budget reached; pausing %.1fs",
            self.name,
            wait,
            extra={"event": "lookup.rate_limit.minute_pause", "provider": self.name},
        )
        await self._sleep(wait)
        now = self._clock()
        self._prune(now)
        return now

    def _prune(self, now: float) -> None:
        while self._recent and now - self._recent[0] >= _MINUTE:
            self._recent.popleft()


__all__ = ["RateLimiter"]
