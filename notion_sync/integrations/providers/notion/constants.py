NOTION_API_BASE = "https://api.notion.com/v1"
NOTION_API_VERSION = "2022-06-28"

NOTION_SEARCH_ENDPOINT = "/search"
NOTION_DATABASE_QUERY_ENDPOINT = "/databases/{database_id}/query"
NOTION_BLOCK_CHILDREN_ENDPOINT = "/blocks/{block_id}/children"

NOTION_DEFAULT_PAGE_SIZE = 100
NOTION_MAX_PAGE_SIZE = 100
