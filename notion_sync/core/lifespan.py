import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from notion_sync.core.dependencies import NotionSyncContainer, build_container
from notion_sync.core.logging import setup_logging
from notion_sync.core.settings import Settings, settings as default_settings
from notion_sync.repositories.token_repository import PostgresTokenStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(
    settings: Settings | None = None,
) -> AsyncGenerator[NotionSyncContainer, None]:
    settings = settings or default_settings
    setup_logging("DEBUG" if settings.debug else settings.log_level)
    logger.info(f"{settings.app_name} {settings.app_version} startup initiated")

    container = build_container(settings)
    try:
        if container.db_connection is not None:
            await container.db_connection.connect()
        if isinstance(container.token_store, PostgresTokenStore):
            await container.token_store.ensure_schema()
        yield container
    finally:
        logger.info("Shutdown initiated")
        await container.close()
