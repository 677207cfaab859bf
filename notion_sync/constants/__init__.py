from notion_sync.constants.auth_errors import AUTH_ERROR_MESSAGES, AuthErrorCode
from notion_sync.constants.enums import (
    AuthorizationPhase,
    SearchObjectType,
    SortDirection,
    SortTimestamp,
    SyncStatus,
    TokenStoreBackend,
)

__all__ = [
    "AuthorizationPhase",
    "SearchObjectType",
    "SortDirection",
    "SortTimestamp",
    "SyncStatus",
    "TokenStoreBackend",
    "AuthErrorCode",
    "AUTH_ERROR_MESSAGES",
]
