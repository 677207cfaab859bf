import asyncio
import logging
import time
from datetime import datetime, timezone

from notion_sync.constants.enums import SyncStatus
from notion_sync.integrations.core.credentials import CredentialsManager
from notion_sync.integrations.core.interfaces import INotionProvider, ISnapshotStore
from notion_sync.integrations.core.types import AuthContext
from notion_sync.models.database import DatabaseSchema
from notion_sync.models.page import PageRecord
from notion_sync.models.snapshot import DatabaseSnapshot, WorkspaceInfo, WorkspaceSnapshot
from notion_sync.oauth.types import AccessGrant
from notion_sync.services.block_tree_service import BlockTreeService
from notion_sync.utils.concurrency import run_all

logger = logging.getLogger(__name__)


class WorkspaceCrawlService:
    """Builds a full snapshot of the workspace a user has authorized.

    A crawl either completes and replaces the user's stored snapshot, or fails
    with the first error any remote call raised and leaves the store alone.
    """

    def __init__(
        self,
        provider: INotionProvider,
        credentials_manager: CredentialsManager,
        snapshot_store: ISnapshotStore,
        block_tree_service: BlockTreeService,
        max_concurrency: int = 8,
        block_depth: int = 1,
    ):
        self._provider = provider
        self._credentials_manager = credentials_manager
        self._snapshot_store = snapshot_store
        self._block_tree = block_tree_service
        self._max_concurrency = max(1, max_concurrency)
        self._block_depth = max(1, block_depth)

    async def crawl(self, user_id: str) -> WorkspaceSnapshot:
        grant = await self._credentials_manager.get_grant(user_id)
        auth_context = grant.auth_context
        semaphore = asyncio.Semaphore(self._max_concurrency)
        started = time.perf_counter()
        logger.info(f"Starting workspace crawl for user {user_id}")

        databases = await self._provider.list_databases(auth_context)
        database_snapshots = await run_all(
            [self._database_job(db, auth_context) for db in databases], semaphore
        )
        logger.debug(f"Crawled rows of {len(database_snapshots)} databases")

        pages = await self._provider.search_pages(auth_context)
        page_records = await run_all(
            [self._page_job(page, auth_context) for page in pages], semaphore
        )
        logger.debug(f"Crawled blocks of {len(page_records)} pages")

        snapshot = WorkspaceSnapshot(
            user_id=user_id,
            workspace=self._workspace_info(grant),
            databases=database_snapshots,
            pages=page_records,
            synced_at=datetime.now(timezone.utc),
            sync_status=SyncStatus.SUCCESS,
        )
        await self._snapshot_store.store(user_id, snapshot)

        logger.info(
            f"Crawl completed for user {user_id}: {len(database_snapshots)} databases, "
            f"{snapshot.row_count} rows, {len(page_records)} pages "
            f"in {time.perf_counter() - started:.2f}s"
        )
        return snapshot

    async def get_snapshot(self, user_id: str) -> WorkspaceSnapshot | None:
        return await self._snapshot_store.get(user_id)

    async def delete_snapshot(self, user_id: str) -> None:
        await self._snapshot_store.remove(user_id)

    def _database_job(self, database: DatabaseSchema, auth_context: AuthContext):
        async def job() -> DatabaseSnapshot:
            rows = await self._provider.query_database_rows(database.id, auth_context)
            return DatabaseSnapshot(database=database, rows=rows)

        return job

    def _page_job(self, page: PageRecord, auth_context: AuthContext):
        async def job() -> PageRecord:
            if self._block_depth == 1:
                blocks = await self._block_tree.children(page.id, auth_context)
            else:
                blocks = await self._block_tree.expand(
                    page.id, auth_context, max_depth=self._block_depth
                )
            return page.with_blocks(blocks)

        return job

    @staticmethod
    def _workspace_info(grant: AccessGrant) -> WorkspaceInfo:
        return WorkspaceInfo(
            id=grant.workspace_id,
            name=grant.workspace_name or "",
            icon=grant.workspace_icon,
            bot_id=grant.bot_id,
        )
