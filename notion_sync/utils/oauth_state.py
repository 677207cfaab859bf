import asyncio
import hmac
import secrets
import time
from collections.abc import Callable
from dataclasses import dataclass

STATE_EXPIRY_SECONDS = 600  # 10 minutes


@dataclass(frozen=True)
class PendingAuthorization:
    user_id: str
    state: str
    redirect_uri: str
    expires_at: float


class PendingStateStore:
    """One outstanding authorization attempt per user, keyed by user id.

    Issuing a new state replaces any earlier attempt for the same user.
    Consuming removes the entry whether or not the state matches.
    """

    def __init__(
        self,
        ttl_seconds: int = STATE_EXPIRY_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._pending: dict[str, PendingAuthorization] = {}
        self._lock = asyncio.Lock()

    async def issue(self, user_id: str, redirect_uri: str) -> PendingAuthorization:
        pending = PendingAuthorization(
            user_id=user_id,
            state=secrets.token_urlsafe(32),
            redirect_uri=redirect_uri,
            expires_at=self._clock() + self._ttl_seconds,
        )
        async with self._lock:
            self._purge_expired()
            self._pending[user_id] = pending
        return pending

    async def consume(
        self, user_id: str, state: str | None
    ) -> PendingAuthorization | None:
        async with self._lock:
            pending = self._pending.pop(user_id, None)

        if pending is None or not state:
            return None
        if not hmac.compare_digest(pending.state.encode(), state.encode()):
            return None
        if self._clock() > pending.expires_at:
            return None
        return pending

    async def discard(self, user_id: str) -> None:
        async with self._lock:
            self._pending.pop(user_id, None)

    async def has_pending(self, user_id: str) -> bool:
        async with self._lock:
            pending = self._pending.get(user_id)
            return pending is not None and self._clock() <= pending.expires_at

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [uid for uid, p in self._pending.items() if now > p.expires_at]
        for uid in expired:
            del self._pending[uid]
