from enum import Enum


class AuthErrorCode(str, Enum):
    INVALID_OAUTH_STATE = "INVALID_OAUTH_STATE"
    OAUTH_ERROR = "OAUTH_ERROR"
    MISSING_AUTHORIZATION_CODE = "MISSING_AUTHORIZATION_CODE"
    OAUTH_INVALID_RESPONSE = "OAUTH_INVALID_RESPONSE"

    GRANT_NOT_FOUND = "GRANT_NOT_FOUND"
    GRANT_EXPIRED = "GRANT_EXPIRED"


AUTH_ERROR_MESSAGES: dict[AuthErrorCode, str] = {
    AuthErrorCode.INVALID_OAUTH_STATE: "Invalid OAuth state. Please try again.",
    AuthErrorCode.OAUTH_ERROR: "Notion authorization was not granted.",
    AuthErrorCode.MISSING_AUTHORIZATION_CODE: "Authorization code missing from callback.",
    AuthErrorCode.OAUTH_INVALID_RESPONSE: "Invalid response from the Notion token endpoint.",
    AuthErrorCode.GRANT_NOT_FOUND: "User is not connected to Notion.",
    AuthErrorCode.GRANT_EXPIRED: "Notion access token has expired. Please reconnect.",
}
