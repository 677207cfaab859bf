import re
from typing import Any, Generic, Type, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


class BaseRepository(Generic[T]):
    key_column = "id"

    def __init__(self, conn, model_cls: Type[T], table_name: str | None = None):
        self.conn = conn
        self.model_cls = model_cls
        self._table_name = table_name or self._get_table_name()

    def _get_table_name(self) -> str:
        # NotionToken -> notion_token
        name = self.model_cls.__name__
        s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
        return re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1).lower()

    def _to_model(self, row: Any) -> T:
        return self.model_cls.model_validate(dict(row))

    async def find_by_key(self, key: Any) -> T | None:
        query = f"SELECT * FROM {self._table_name} WHERE {self.key_column} = $1"
        row = await self.conn.fetchrow(query, key)
        return self._to_model(row) if row else None

    async def delete_by_key(self, key: Any) -> bool:
        query = f"DELETE FROM {self._table_name} WHERE {self.key_column} = $1"
        result = await self.conn.execute(query, key)
        return result == "DELETE 1"
