import logging
from dataclasses import dataclass

from notion_sync.constants.enums import TokenStoreBackend
from notion_sync.core.settings import Settings
from notion_sync.database import PostgreSQLConnection
from notion_sync.integrations.core.client import ApiClient
from notion_sync.integrations.core.credentials import CredentialsManager
from notion_sync.integrations.core.exceptions import ConfigurationError
from notion_sync.integrations.core.interfaces import ISnapshotStore, ITokenStore
from notion_sync.integrations.core.rate_limiter import (
    RateLimitConfig,
    TokenBucketRateLimiter,
)
from notion_sync.integrations.providers.notion.provider import NotionProvider
from notion_sync.oauth.providers.notion import NotionOAuthProvider
from notion_sync.oauth.service import OAuthService
from notion_sync.oauth.types import OAuthConfig
from notion_sync.repositories.in_memory import InMemorySnapshotStore, InMemoryTokenStore
from notion_sync.repositories.token_repository import PostgresTokenStore
from notion_sync.services.block_tree_service import BlockTreeService
from notion_sync.services.workspace_crawl_service import WorkspaceCrawlService
from notion_sync.utils.crypto import TokenCipher
from notion_sync.utils.oauth_state import PendingStateStore

logger = logging.getLogger(__name__)


def get_oauth_config(settings: Settings) -> OAuthConfig:
    if not settings.notion_client_id or not settings.notion_client_secret:
        raise ConfigurationError("NOTION_CLIENT_ID and NOTION_CLIENT_SECRET must be set")
    return OAuthConfig(
        client_id=settings.notion_client_id,
        client_secret=settings.notion_client_secret,
        redirect_uri=settings.notion_redirect_uri,
        owner=settings.notion_oauth_owner,
        state_ttl_seconds=settings.oauth_state_ttl_seconds,
    )


def get_api_client(settings: Settings, max_retries: int | None = None) -> ApiClient:
    rate_limiter = TokenBucketRateLimiter(
        RateLimitConfig(
            requests_per_second=settings.notion_requests_per_second,
            burst_size=settings.notion_burst_size,
        )
    )
    return ApiClient(
        rate_limiter=rate_limiter,
        timeout=settings.http_timeout_seconds,
        max_retries=settings.http_max_retries if max_retries is None else max_retries,
        default_headers={"Notion-Version": settings.notion_version},
    )


def get_db_connection(settings: Settings) -> PostgreSQLConnection:
    return PostgreSQLConnection(
        host=settings.database_host,
        port=settings.database_port,
        user=settings.database_user,
        password=settings.database_password,
        database=settings.database_name,
        min_size=settings.database_pool_min_size,
        max_size=settings.database_pool_max_size,
    )


def get_token_store(
    settings: Settings, db: PostgreSQLConnection | None = None
) -> ITokenStore:
    backend = TokenStoreBackend(settings.token_store_backend)
    if backend is TokenStoreBackend.MEMORY:
        return InMemoryTokenStore()

    if not settings.encryption_key:
        raise ConfigurationError("ENCRYPTION_KEY is required for the postgres token store")
    return PostgresTokenStore(
        db or get_db_connection(settings), TokenCipher(settings.encryption_key)
    )


@dataclass
class NotionSyncContainer:
    settings: Settings
    token_store: ITokenStore
    snapshot_store: ISnapshotStore
    credentials_manager: CredentialsManager
    oauth_service: OAuthService
    provider: NotionProvider
    block_tree_service: BlockTreeService
    crawl_service: WorkspaceCrawlService
    oauth_api_client: ApiClient
    db_connection: PostgreSQLConnection | None = None

    async def close(self) -> None:
        await self.provider.close()
        await self.oauth_api_client.close()
        if self.db_connection is not None:
            await self.db_connection.close()


def build_container(settings: Settings) -> NotionSyncContainer:
    db_connection = None
    if TokenStoreBackend(settings.token_store_backend) is TokenStoreBackend.POSTGRES:
        db_connection = get_db_connection(settings)

    token_store = get_token_store(settings, db_connection)
    credentials_manager = CredentialsManager(token_store)

    oauth_config = get_oauth_config(settings)
    # A code can only be exchanged once, so the token call is never retried.
    oauth_api_client = get_api_client(settings, max_retries=1)
    oauth_service = OAuthService(
        oauth_config,
        NotionOAuthProvider(oauth_api_client),
        credentials_manager,
        PendingStateStore(settings.oauth_state_ttl_seconds),
    )

    provider = NotionProvider(
        get_api_client(settings),
        base_url=settings.notion_api_base_url,
        page_size=settings.notion_page_size,
        notion_version=settings.notion_version,
    )
    block_tree_service = BlockTreeService(
        provider, max_concurrency=settings.crawl_max_concurrency
    )
    snapshot_store = InMemorySnapshotStore()
    crawl_service = WorkspaceCrawlService(
        provider,
        credentials_manager,
        snapshot_store,
        block_tree_service,
        max_concurrency=settings.crawl_max_concurrency,
        block_depth=settings.crawl_block_depth,
    )

    logger.debug(
        f"Built container with token store backend '{settings.token_store_backend}'"
    )
    return NotionSyncContainer(
        settings=settings,
        token_store=token_store,
        snapshot_store=snapshot_store,
        credentials_manager=credentials_manager,
        oauth_service=oauth_service,
        provider=provider,
        block_tree_service=block_tree_service,
        crawl_service=crawl_service,
        oauth_api_client=oauth_api_client,
        db_connection=db_connection,
    )
