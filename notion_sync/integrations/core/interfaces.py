from abc import ABC, abstractmethod

from notion_sync.integrations.core.types import AuthContext
from notion_sync.models.blocks import Block
from notion_sync.models.database import DatabaseRow, DatabaseSchema
from notion_sync.models.page import PageRecord
from notion_sync.models.pagination import PaginatedEnvelope
from notion_sync.models.query import DatabaseQuery
from notion_sync.models.snapshot import WorkspaceSnapshot
from notion_sync.oauth.types import AccessGrant


class ITokenStore(ABC):
    @abstractmethod
    async def save(self, user_id: str, grant: AccessGrant) -> None:
        pass

    @abstractmethod
    async def get(self, user_id: str) -> AccessGrant | None:
        pass

    @abstractmethod
    async def delete(self, user_id: str) -> None:
        pass


class ISnapshotStore(ABC):
    @abstractmethod
    async def store(self, user_id: str, snapshot: WorkspaceSnapshot) -> None:
        pass

    @abstractmethod
    async def get(self, user_id: str) -> WorkspaceSnapshot | None:
        pass

    @abstractmethod
    async def remove(self, user_id: str) -> None:
        pass


class ICredentialsManager(ABC):
    @abstractmethod
    async def get_grant(self, user_id: str) -> AccessGrant:
        pass

    @abstractmethod
    async def get_valid_credentials(self, user_id: str) -> AuthContext:
        pass

    @abstractmethod
    async def store_grant(self, user_id: str, grant: AccessGrant) -> None:
        pass

    @abstractmethod
    async def revoke(self, user_id: str) -> None:
        pass


class INotionProvider(ABC):
    @abstractmethod
    async def list_databases(self, auth_context: AuthContext) -> list[DatabaseSchema]:
        pass

    @abstractmethod
    async def search_pages(self, auth_context: AuthContext) -> list[PageRecord]:
        pass

    @abstractmethod
    async def query_database(
        self,
        database_id: str,
        auth_context: AuthContext,
        query: DatabaseQuery | None = None,
    ) -> PaginatedEnvelope[DatabaseRow]:
        pass

    @abstractmethod
    async def query_database_rows(
        self,
        database_id: str,
        auth_context: AuthContext,
        query: DatabaseQuery | None = None,
    ) -> list[DatabaseRow]:
        pass

    @abstractmethod
    async def list_block_children(
        self, block_id: str, auth_context: AuthContext
    ) -> list[Block]:
        pass
