from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class NotionToken(BaseModel):
    """Row of the ``notion_tokens`` table; ``access_token`` is encrypted."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    access_token: str
    token_type: str = "bearer"
    bot_id: str
    workspace_id: str
    workspace_name: str | None = None
    workspace_icon: str | None = None
    owner: dict[str, Any] | None = None
    duplicated_template_id: str | None = None
    expires_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
