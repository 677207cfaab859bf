from notion_sync.constants.auth_errors import AUTH_ERROR_MESSAGES, AuthErrorCode
from notion_sync.core.exceptions import AuthenticationException


class OAuthException(AuthenticationException):
    def __init__(self, error_code: AuthErrorCode, message: str | None = None):
        super().__init__(error_code.value, message or AUTH_ERROR_MESSAGES[error_code])
        self.error_code = error_code


class OAuthStateMismatchError(OAuthException):
    def __init__(self, reason: str = "unknown or mismatched state"):
        super().__init__(AuthErrorCode.INVALID_OAUTH_STATE)
        self.reason = reason


class MissingAuthorizationCodeError(OAuthException):
    def __init__(self):
        super().__init__(AuthErrorCode.MISSING_AUTHORIZATION_CODE)


class OAuthAuthorizationDeniedError(OAuthException):
    """The provider redirected back with an ``error`` instead of a code."""

    def __init__(self, error: str, description: str | None = None):
        message = f"{AUTH_ERROR_MESSAGES[AuthErrorCode.OAUTH_ERROR]} ({error})"
        if description:
            message += f": {description}"
        super().__init__(AuthErrorCode.OAUTH_ERROR, message)
        self.error = error
        self.description = description


class InvalidTokenResponseError(OAuthException):
    def __init__(self, detail: str | None = None):
        message = AUTH_ERROR_MESSAGES[AuthErrorCode.OAUTH_INVALID_RESPONSE]
        if detail:
            message += f" {detail}"
        super().__init__(AuthErrorCode.OAUTH_INVALID_RESPONSE, message)
        self.detail = detail


class GrantNotFoundError(OAuthException):
    def __init__(self, user_id: str):
        super().__init__(AuthErrorCode.GRANT_NOT_FOUND)
        self.user_id = user_id


class GrantExpiredError(OAuthException):
    def __init__(self, user_id: str):
        super().__init__(AuthErrorCode.GRANT_EXPIRED)
        self.user_id = user_id
