import base64
import logging
from urllib.parse import quote, urlencode

from pydantic import ValidationError

from notion_sync.integrations.core.client import ApiClient
from notion_sync.integrations.core.exceptions import ResponseDecodeError, TransportError
from notion_sync.integrations.core.types import AuthContext, HttpMethod, RequestDefinition
from notion_sync.oauth.exceptions import InvalidTokenResponseError
from notion_sync.oauth.types import AccessGrant, NotionTokenResponse, OAuthConfig

logger = logging.getLogger(__name__)


class NotionOAuthProvider:
    def __init__(self, api_client: ApiClient):
        self._api_client = api_client

    def build_authorization_url(
        self,
        config: OAuthConfig,
        redirect_uri: str,
        state: str | None = None,
        owner: str | None = None,
    ) -> str:
        params = {
            "client_id": config.client_id,
            "redirect_uri": redirect_uri,
            "response_type": "code",
        }
        if state is not None:
            params["state"] = state
        if owner is not None:
            params["owner"] = owner
        return f"{config.authorization_url}?{urlencode(params, quote_via=quote)}"

    async def exchange_code(
        self, config: OAuthConfig, code: str, redirect_uri: str
    ) -> AccessGrant:
        """Trade an authorization code for an access grant.

        Non-2xx answers surface as ``NotionApiError`` (structured body) or
        ``ApiRequestError``; a request that never gets an answer raises
        ``InvalidTokenResponseError``.
        """
        request = RequestDefinition(
            method=HttpMethod.POST,
            url=config.token_url,
            body={
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": redirect_uri,
            },
        )

        logger.debug("Exchanging authorization code with the Notion token endpoint")
        try:
            data = await self._api_client.execute_json(
                request, self._basic_auth(config)
            )
        except TransportError as e:
            logger.error(f"Notion token exchange failed in transport: {e}")
            raise InvalidTokenResponseError(str(e)) from e

        try:
            token_response = NotionTokenResponse.model_validate(data)
        except ValidationError as e:
            raise ResponseDecodeError("Invalid token response", _redact(data)) from e

        logger.info(
            f"Token exchange successful for workspace {token_response.workspace_id}"
        )
        return token_response.to_grant()

    @staticmethod
    def _basic_auth(config: OAuthConfig) -> AuthContext:
        credentials = f"{config.client_id}:{config.client_secret}".encode()
        return AuthContext(
            access_token=base64.b64encode(credentials).decode(),
            token_type="Basic",
        )


def _redact(data: object) -> object:
    if isinstance(data, dict) and "access_token" in data:
        return {**data, "access_token": "***"}
    return data
