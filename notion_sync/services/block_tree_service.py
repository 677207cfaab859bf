import asyncio
import logging

from notion_sync.integrations.core.interfaces import INotionProvider
from notion_sync.integrations.core.types import AuthContext
from notion_sync.models.blocks import Block
from notion_sync.utils.concurrency import first_error

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 4


class BlockTreeService:
    def __init__(
        self,
        provider: INotionProvider,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ):
        self._provider = provider
        self._max_concurrency = max(1, max_concurrency)

    async def children(self, block_id: str, auth_context: AuthContext) -> list[Block]:
        """Direct children of ``block_id``, all pages fetched, unexpanded."""
        return await self._provider.list_block_children(block_id, auth_context)

    async def expand(
        self,
        block_id: str,
        auth_context: AuthContext,
        max_depth: int | None = None,
        max_concurrency: int | None = None,
    ) -> list[Block]:
        """Fetch the subtree under ``block_id`` and return its top level.

        ``max_depth`` counts levels below ``block_id``: 1 returns the direct
        children only, ``None`` walks the whole tree. Every block whose
        children were fetched gets them attached; blocks past the depth limit
        keep ``children=None``.

        Nodes are fetched by a bounded pool of workers draining a shared
        queue, and the tree is assembled once all fetches are done. The first
        failed fetch cancels the rest and is raised as is.
        """
        if max_depth is not None and max_depth < 1:
            return []

        worker_count = max(1, max_concurrency or self._max_concurrency)
        queue: asyncio.Queue[tuple[str, int]] = asyncio.Queue()
        fetched: dict[str, tuple[int, list[Block]]] = {}
        visited = {block_id}
        queue.put_nowait((block_id, 1))

        async def worker() -> None:
            while True:
                parent_id, depth = await queue.get()
                try:
                    blocks = await self._provider.list_block_children(
                        parent_id, auth_context
                    )
                    fetched[parent_id] = (depth, blocks)
                    if max_depth is not None and depth >= max_depth:
                        continue
                    for block in blocks:
                        if block.has_children and block.id not in visited:
                            visited.add(block.id)
                            queue.put_nowait((block.id, depth + 1))
                finally:
                    queue.task_done()

        try:
            async with asyncio.TaskGroup() as tg:
                workers = [tg.create_task(worker()) for _ in range(worker_count)]
                await queue.join()
                for task in workers:
                    task.cancel()
        except ExceptionGroup as eg:
            raise first_error(eg) from None

        logger.debug(f"Expanded {len(fetched)} block(s) under {block_id}")
        return self._assemble(block_id, fetched)

    @staticmethod
    def _assemble(
        root_id: str, fetched: dict[str, tuple[int, list[Block]]]
    ) -> list[Block]:
        built: dict[str, list[Block]] = {}
        deepest_first = sorted(fetched.items(), key=lambda item: item[1][0], reverse=True)
        for parent_id, (_, blocks) in deepest_first:
            built[parent_id] = [
                block.with_children(built[block.id]) if block.id in built else block
                for block in blocks
            ]
        return built.get(root_id, [])
