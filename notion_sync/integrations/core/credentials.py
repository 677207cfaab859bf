import asyncio
import logging
import time
from collections.abc import Callable
from datetime import datetime, timezone

from notion_sync.integrations.core.interfaces import ICredentialsManager, ITokenStore
from notion_sync.integrations.core.types import AuthContext
from notion_sync.oauth.exceptions import GrantExpiredError, GrantNotFoundError
from notion_sync.oauth.types import AccessGrant

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL_SECONDS = 60.0


class CredentialsManager(ICredentialsManager):
    """Per-user access grants, read through a short-lived cache over the token store.

    Each user has their own lock, so a slow store read for one user never
    holds up another. Cached grants are re-read from the store after
    ``cache_ttl_seconds`` to pick up writes made by other processes.

    Notion tokens cannot be refreshed; an expired grant means the user has
    to authorize again.
    """

    def __init__(
        self,
        token_store: ITokenStore,
        cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._token_store = token_store
        self._cache_ttl_seconds = cache_ttl_seconds
        self._clock = clock
        self._cache: dict[str, tuple[float, AccessGrant]] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock_for(self, user_id: str) -> asyncio.Lock:
        return self._locks.setdefault(user_id, asyncio.Lock())

    def _cached(self, user_id: str) -> AccessGrant | None:
        entry = self._cache.get(user_id)
        if entry is None:
            return None
        cached_at, grant = entry
        if self._clock() - cached_at >= self._cache_ttl_seconds:
            del self._cache[user_id]
            return None
        return grant

    async def find_grant(self, user_id: str) -> AccessGrant | None:
        """Stored grant for ``user_id`` regardless of expiry, or None."""
        async with self._lock_for(user_id):
            grant = self._cached(user_id)
            if grant is None:
                grant = await self._token_store.get(user_id)
                if grant is not None:
                    self._cache[user_id] = (self._clock(), grant)
            return grant

    async def get_grant(self, user_id: str) -> AccessGrant:
        grant = await self.find_grant(user_id)
        if grant is None:
            raise GrantNotFoundError(user_id)
        if grant.is_expired_at(datetime.now(timezone.utc)):
            logger.info(f"Notion grant for user {user_id} expired at {grant.expires_at}")
            raise GrantExpiredError(user_id)
        return grant

    async def get_valid_credentials(self, user_id: str) -> AuthContext:
        grant = await self.get_grant(user_id)
        return grant.auth_context

    async def store_grant(self, user_id: str, grant: AccessGrant) -> None:
        async with self._lock_for(user_id):
            await self._token_store.save(user_id, grant)
            self._cache[user_id] = (self._clock(), grant)
        logger.info(
            f"Stored Notion grant for user {user_id} (workspace {grant.workspace_id})"
        )

    async def revoke(self, user_id: str) -> None:
        async with self._lock_for(user_id):
            self._cache.pop(user_id, None)
            await self._token_store.delete(user_id)
        logger.info(f"Removed Notion grant for user {user_id}")
