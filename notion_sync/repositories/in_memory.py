import asyncio

from notion_sync.integrations.core.interfaces import ISnapshotStore, ITokenStore
from notion_sync.models.snapshot import WorkspaceSnapshot
from notion_sync.oauth.types import AccessGrant


class InMemoryTokenStore(ITokenStore):
    def __init__(self):
        self._grants: dict[str, AccessGrant] = {}
        self._lock = asyncio.Lock()

    async def save(self, user_id: str, grant: AccessGrant) -> None:
        async with self._lock:
            self._grants[user_id] = grant

    async def get(self, user_id: str) -> AccessGrant | None:
        async with self._lock:
            return self._grants.get(user_id)

    async def delete(self, user_id: str) -> None:
        async with self._lock:
            self._grants.pop(user_id, None)


class InMemorySnapshotStore(ISnapshotStore):
    def __init__(self):
        self._snapshots: dict[str, WorkspaceSnapshot] = {}
        self._lock = asyncio.Lock()

    async def store(self, user_id: str, snapshot: WorkspaceSnapshot) -> None:
        async with self._lock:
            self._snapshots[user_id] = snapshot

    async def get(self, user_id: str) -> WorkspaceSnapshot | None:
        async with self._lock:
            return self._snapshots.get(user_id)

    async def remove(self, user_id: str) -> None:
        async with self._lock:
            self._snapshots.pop(user_id, None)
