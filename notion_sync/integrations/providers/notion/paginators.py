from notion_sync.integrations.core.pagination import CursorPagination
from notion_sync.integrations.providers.notion.constants import NOTION_DEFAULT_PAGE_SIZE


class NotionSearchPaginator(CursorPagination):
    def __init__(self, page_size: int = NOTION_DEFAULT_PAGE_SIZE):
        super().__init__(cursor_in_body=True, default_page_size=page_size)


class NotionDatabaseQueryPaginator(CursorPagination):
    def __init__(self, page_size: int = NOTION_DEFAULT_PAGE_SIZE):
        super().__init__(cursor_in_body=True, default_page_size=page_size)


class NotionBlockChildrenPaginator(CursorPagination):
    def __init__(self, page_size: int = NOTION_DEFAULT_PAGE_SIZE):
        super().__init__(cursor_in_body=False, default_page_size=page_size)
