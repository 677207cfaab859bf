from enum import Enum


class SyncStatus(str, Enum):
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"


class AuthorizationPhase(str, Enum):
    NO_GRANT = "no_grant"
    PENDING_AUTHORIZATION = "pending_authorization"
    AUTHORIZED = "authorized"


class SearchObjectType(str, Enum):
    DATABASE = "database"
    PAGE = "page"


class SortDirection(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


class SortTimestamp(str, Enum):
    CREATED_TIME = "created_time"
    LAST_EDITED_TIME = "last_edited_time"


class TokenStoreBackend(str, Enum):
    MEMORY = "memory"
    POSTGRES = "postgres"
