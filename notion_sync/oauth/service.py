import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

from notion_sync.constants.enums import AuthorizationPhase
from notion_sync.integrations.core.credentials import CredentialsManager
from notion_sync.oauth.exceptions import (
    MissingAuthorizationCodeError,
    OAuthAuthorizationDeniedError,
    OAuthStateMismatchError,
)
from notion_sync.oauth.providers.notion import NotionOAuthProvider
from notion_sync.oauth.types import AccessGrant, OAuthConfig
from notion_sync.utils.oauth_state import PendingStateStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthorizationRequest:
    url: str
    state: str


def _mask(value: str, visible: int = 4) -> str:
    if len(value) <= visible:
        return "*" * len(value)
    return f"{value[:visible]}{'*' * (len(value) - visible)}"


def _mask_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.netloc:
        return _mask(url)
    return f"{parts.scheme}://{parts.netloc}/***" if parts.path.strip("/") else url


class OAuthService:
    """Drives a user from NO_GRANT through PENDING_AUTHORIZATION to AUTHORIZED.

    The callback's ``state`` is checked against the one issued for that user
    before any code exchange happens. The pending state is dropped on every
    outcome, and only a successful exchange stores a grant.
    """

    def __init__(
        self,
        config: OAuthConfig,
        oauth_provider: NotionOAuthProvider,
        credentials_manager: CredentialsManager,
        state_store: PendingStateStore | None = None,
    ):
        self._config = config
        self._oauth_provider = oauth_provider
        self._credentials_manager = credentials_manager
        self._state_store = state_store or PendingStateStore(config.state_ttl_seconds)

    def authorization_url(
        self,
        redirect_uri: str,
        state: str | None = None,
        owner: str | None = None,
    ) -> str:
        return self._oauth_provider.build_authorization_url(
            self._config, redirect_uri, state=state, owner=owner
        )

    async def exchange_code(
        self, code: str, redirect_uri: str | None = None
    ) -> AccessGrant:
        return await self._oauth_provider.exchange_code(
            self._config, code, redirect_uri or self._config.redirect_uri
        )

    async def begin_authorization(
        self, user_id: str, redirect_uri: str | None = None
    ) -> AuthorizationRequest:
        redirect_uri = redirect_uri or self._config.redirect_uri
        pending = await self._state_store.issue(user_id, redirect_uri)
        url = self.authorization_url(
            redirect_uri, state=pending.state, owner=self._config.owner
        )
        logger.info(f"Started Notion authorization for user {user_id}")
        return AuthorizationRequest(url=url, state=pending.state)

    async def complete_authorization(
        self,
        user_id: str,
        code: str | None,
        state: str | None,
        error: str | None = None,
        error_description: str | None = None,
    ) -> AccessGrant:
        pending = await self._state_store.consume(user_id, state)

        if error:
            logger.warning(f"Notion authorization denied for user {user_id}: {error}")
            raise OAuthAuthorizationDeniedError(error, error_description)
        if pending is None:
            logger.warning(f"Rejected Notion callback for user {user_id}: state mismatch")
            raise OAuthStateMismatchError()
        if not code:
            raise MissingAuthorizationCodeError()

        grant = await self._oauth_provider.exchange_code(
            self._config, code, pending.redirect_uri
        )
        await self._credentials_manager.store_grant(user_id, grant)
        logger.info(
            f"Notion authorization completed for user {user_id} "
            f"(workspace {grant.workspace_name or grant.workspace_id})"
        )
        return grant

    async def authorization_phase(self, user_id: str) -> AuthorizationPhase:
        grant = await self._credentials_manager.find_grant(user_id)
        if grant is not None and not grant.is_expired:
            return AuthorizationPhase.AUTHORIZED
        if await self._state_store.has_pending(user_id):
            return AuthorizationPhase.PENDING_AUTHORIZATION
        return AuthorizationPhase.NO_GRANT

    async def disconnect(self, user_id: str) -> None:
        await self._state_store.discard(user_id)
        await self._credentials_manager.revoke(user_id)

    def describe(self) -> dict[str, Any]:
        return {
            "client_id": _mask(self._config.client_id),
            "client_secret": "***" if self._config.client_secret else "",
            "redirect_uri": _mask_url(self._config.redirect_uri),
            "authorization_url": self._config.authorization_url,
            "token_url": self._config.token_url,
            "owner": self._config.owner,
        }
