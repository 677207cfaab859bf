import logging

import asyncpg

from notion_sync.core.exceptions import AppException

logger = logging.getLogger(__name__)


class DatabaseUnavailableError(AppException):
    def __init__(self, message: str):
        super().__init__(
            code="DATABASE_UNAVAILABLE",
            message=message,
            status_code=503,
        )


class PostgreSQLConnection:

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        database: str,
        min_size: int = 1,
        max_size: int = 10,
    ):
        self.pool: asyncpg.Pool | None = None
        self.database = database
        self.config = {
            "host": host,
            "port": port,
            "user": user,
            "password": password,
            "database": database,
            "min_size": min_size,
            "max_size": max_size,
        }
        logger.debug(
            f"PostgreSQL connection config initialized for database: {self.database}"
        )

    async def connect(self) -> None:
        if self.pool is not None:
            logger.debug(
                f"PostgreSQL connection pool already exists for: {self.database}"
            )
            return

        try:
            logger.info(f"Connecting to PostgreSQL database: {self.database}")
            self.pool = await asyncpg.create_pool(**self.config)
            logger.info(
                f"PostgreSQL connection pool created successfully: {self.database}"
            )
        except (OSError, asyncpg.PostgresError) as e:
            logger.error(
                f"Failed to create PostgreSQL connection pool for {self.database}: {e}"
            )
            self.pool = None
            raise DatabaseUnavailableError(f"Database connection failed: {e}") from e

    async def close(self) -> None:
        if self.pool is None:
            logger.debug(f"No active connection pool to close for: {self.database}")
            return

        logger.info(f"Closing PostgreSQL connection pool: {self.database}")
        try:
            await self.pool.close()
        finally:
            self.pool = None
        logger.info(f"PostgreSQL connection pool closed: {self.database}")

    def get_connection(self) -> asyncpg.pool.PoolAcquireContext:
        if self.pool is None:
            logger.error(f"Connection pool not initialized for {self.database}")
            raise DatabaseUnavailableError(
                "Database connection pool is not initialized. Call connect() first."
            )
        return self.pool.acquire()
