import asyncio
import logging
import time
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class RateLimitConfig:
    # Notion allows an average of three requests per second per integration.
    requests_per_second: float = 3.0
    burst_size: int = 10
    retry_after_default: int = 1


class TokenBucketRateLimiter:
    def __init__(self, config: RateLimitConfig | None = None):
        self.config = config or RateLimitConfig()
        self._tokens: float = float(self.config.burst_size)
        self._last_update: float = time.monotonic()
        self._lock = asyncio.Lock()

    @property
    def available_tokens(self) -> float:
        return self._tokens

    async def acquire(self, cost: int = 1) -> None:
        async with self._lock:
            await self._wait_for_tokens(cost)
            self._tokens -= cost

    async def _wait_for_tokens(self, cost: int) -> None:
        while True:
            self._refill()
            if self._tokens >= cost:
                return
            tokens_needed = cost - self._tokens
            wait_time = tokens_needed / self.config.requests_per_second
            logger.debug(f"Rate limiter waiting {wait_time:.2f}s for {cost} token(s)")
            await asyncio.sleep(wait_time)

    def _refill(self) -> None:
        now = time.monotonic()
        elapsed = now - self._last_update
        self._last_update = now
        new_tokens = elapsed * self.config.requests_per_second
        self._tokens = min(self._tokens + new_tokens, float(self.config.burst_size))

    async def wait_for_retry(self, retry_after: int | None = None) -> None:
        wait_time = retry_after if retry_after is not None else self.config.retry_after_default
        await asyncio.sleep(wait_time)
