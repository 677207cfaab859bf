from datetime import datetime, timedelta, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from notion_sync.integrations.core.types import AuthContext

NOTION_AUTHORIZATION_URL = "https://api.notion.com/v1/oauth/authorize"
NOTION_TOKEN_URL = "https://api.notion.com/v1/oauth/token"


class OAuthConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    client_id: str
    client_secret: str
    redirect_uri: str
    authorization_url: str = NOTION_AUTHORIZATION_URL
    token_url: str = NOTION_TOKEN_URL
    owner: str | None = "user"
    state_ttl_seconds: int = 600


class AccessGrant(BaseModel):
    """Credentials issued by one successful authorization.

    A grant never changes after it is issued; re-authorizing produces a new
    grant that replaces the stored one.
    """

    model_config = ConfigDict(frozen=True)

    access_token: str = Field(min_length=1)
    token_type: str = "bearer"
    bot_id: str
    workspace_id: str
    workspace_name: str | None = None
    workspace_icon: str | None = None
    owner: dict[str, Any] | None = None
    duplicated_template_id: str | None = None
    expires_at: datetime | None = None

    def is_expired_at(self, moment: datetime) -> bool:
        return self.expires_at is not None and moment > self.expires_at

    @property
    def is_expired(self) -> bool:
        return self.is_expired_at(datetime.now(timezone.utc))

    @property
    def auth_context(self) -> AuthContext:
        return AuthContext(
            access_token=self.access_token,
            token_type="Bearer",
            expires_at=self.expires_at,
        )

    def __repr__(self) -> str:
        return (
            f"AccessGrant(workspace_id={self.workspace_id!r}, bot_id={self.bot_id!r}, "
            f"expires_at={self.expires_at!r})"
        )

    __str__ = __repr__


class NotionTokenResponse(BaseModel):
    """Body returned by the token endpoint on a successful exchange."""

    model_config = ConfigDict(extra="ignore")

    access_token: str = Field(min_length=1)
    token_type: str = "bearer"
    bot_id: str
    workspace_id: str
    workspace_name: str | None = None
    workspace_icon: str | None = None
    owner: dict[str, Any] | None = None
    duplicated_template_id: str | None = None
    expires_in: int | None = None

    def to_grant(self, issued_at: datetime | None = None) -> AccessGrant:
        expires_at = None
        if self.expires_in is not None:
            issued_at = issued_at or datetime.now(timezone.utc)
            expires_at = issued_at + timedelta(seconds=self.expires_in)

        return AccessGrant(
            access_token=self.access_token,
            token_type=self.token_type,
            bot_id=self.bot_id,
            workspace_id=self.workspace_id,
            workspace_name=self.workspace_name,
            workspace_icon=self.workspace_icon,
            owner=self.owner,
            duplicated_template_id=self.duplicated_template_id,
            expires_at=expires_at,
        )
