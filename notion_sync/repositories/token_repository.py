import json
import logging
from typing import Any

from notion_sync.database import PostgreSQLConnection
from notion_sync.integrations.core.interfaces import ITokenStore
from notion_sync.models.notion_token import NotionToken
from notion_sync.oauth.types import AccessGrant
from notion_sync.utils.crypto import TokenCipher

from .base_repository import BaseRepository

logger = logging.getLogger(__name__)

CREATE_NOTION_TOKENS_TABLE = """
    CREATE TABLE IF NOT EXISTS notion_tokens (
        user_id TEXT PRIMARY KEY,
        access_token TEXT NOT NULL,
        token_type TEXT NOT NULL DEFAULT 'bearer',
        bot_id TEXT NOT NULL,
        workspace_id TEXT NOT NULL,
        workspace_name TEXT,
        workspace_icon TEXT,
        owner JSONB,
        duplicated_template_id TEXT,
        expires_at TIMESTAMPTZ,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
"""


class NotionTokenRepository(BaseRepository[NotionToken]):
    key_column = "user_id"

    def __init__(self, conn):
        super().__init__(conn, NotionToken, table_name="notion_tokens")

    def _to_model(self, row: Any) -> NotionToken:
        data = dict(row)
        if isinstance(data.get("owner"), str):
            data["owner"] = json.loads(data["owner"])
        return NotionToken.model_validate(data)

    async def create_table(self) -> None:
        await self.conn.execute(CREATE_NOTION_TOKENS_TABLE)

    async def upsert(self, token: NotionToken) -> NotionToken:
        query = """
            INSERT INTO notion_tokens (
                user_id, access_token, token_type, bot_id, workspace_id,
                workspace_name, workspace_icon, owner, duplicated_template_id,
                expires_at
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
            ON CONFLICT (user_id)
            DO UPDATE SET
                access_token = EXCLUDED.access_token,
                token_type = EXCLUDED.token_type,
                bot_id = EXCLUDED.bot_id,
                workspace_id = EXCLUDED.workspace_id,
                workspace_name = EXCLUDED.workspace_name,
                workspace_icon = EXCLUDED.workspace_icon,
                owner = EXCLUDED.owner,
                duplicated_template_id = EXCLUDED.duplicated_template_id,
                expires_at = EXCLUDED.expires_at,
                updated_at = NOW()
            RETURNING *
        """
        row = await self.conn.fetchrow(
            query,
            token.user_id,
            token.access_token,
            token.token_type,
            token.bot_id,
            token.workspace_id,
            token.workspace_name,
            token.workspace_icon,
            json.dumps(token.owner) if token.owner is not None else None,
            token.duplicated_template_id,
            token.expires_at,
        )
        return self._to_model(row)


class PostgresTokenStore(ITokenStore):
    """Token store backed by the ``notion_tokens`` table.

    Access tokens are Fernet-encrypted before they reach the database.
    """

    def __init__(self, db: PostgreSQLConnection, cipher: TokenCipher):
        self._db = db
        self._cipher = cipher

    async def ensure_schema(self) -> None:
        async with self._db.get_connection() as conn:
            await NotionTokenRepository(conn).create_table()
        logger.info("Ensured notion_tokens table exists")

    async def save(self, user_id: str, grant: AccessGrant) -> None:
        token = NotionToken(
            user_id=user_id,
            access_token=self._cipher.encrypt(grant.access_token),
            token_type=grant.token_type,
            bot_id=grant.bot_id,
            workspace_id=grant.workspace_id,
            workspace_name=grant.workspace_name,
            workspace_icon=grant.workspace_icon,
            owner=grant.owner,
            duplicated_template_id=grant.duplicated_template_id,
            expires_at=grant.expires_at,
        )
        async with self._db.get_connection() as conn:
            await NotionTokenRepository(conn).upsert(token)
        logger.debug(f"Persisted Notion token for user {user_id}")

    async def get(self, user_id: str) -> AccessGrant | None:
        async with self._db.get_connection() as conn:
            token = await NotionTokenRepository(conn).find_by_key(user_id)
        if token is None:
            return None
        return AccessGrant(
            access_token=self._cipher.decrypt(token.access_token),
            token_type=token.token_type,
            bot_id=token.bot_id,
            workspace_id=token.workspace_id,
            workspace_name=token.workspace_name,
            workspace_icon=token.workspace_icon,
            owner=token.owner,
            duplicated_template_id=token.duplicated_template_id,
            expires_at=token.expires_at,
        )

    async def delete(self, user_id: str) -> None:
        async with self._db.get_connection() as conn:
            deleted = await NotionTokenRepository(conn).delete_by_key(user_id)
        logger.debug(f"Deleted Notion token for user {user_id}: {deleted}")
