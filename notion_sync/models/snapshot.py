from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from notion_sync.constants.enums import SyncStatus
from notion_sync.models.database import DatabaseRow, DatabaseSchema
from notion_sync.models.page import PageRecord

SNAPSHOT_VERSION = "1.0"


class WorkspaceInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    icon: str | None = None
    bot_id: str


class DatabaseSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    database: DatabaseSchema
    rows: list[DatabaseRow] = Field(default_factory=list)


class WorkspaceSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str
    workspace: WorkspaceInfo
    databases: list[DatabaseSnapshot] = Field(default_factory=list)
    pages: list[PageRecord] = Field(default_factory=list)
    synced_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    sync_status: SyncStatus = SyncStatus.SUCCESS
    version: str = SNAPSHOT_VERSION

    @property
    def row_count(self) -> int:
        return sum(len(database.rows) for database in self.databases)
