import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

T = TypeVar("T")


def first_error(group: BaseExceptionGroup) -> BaseException:
    error: BaseException = group
    while isinstance(error, BaseExceptionGroup):
        error = error.exceptions[0]
    return error


async def run_all(
    jobs: Sequence[Callable[[], Awaitable[T]]],
    semaphore: asyncio.Semaphore,
) -> list[T]:
    """Run every job concurrently, at most ``semaphore``'s worth at a time.

    Results come back in job order. The first failure cancels the jobs still
    in flight and is re-raised as is, not wrapped in an exception group.
    """

    async def bounded(job: Callable[[], Awaitable[T]]) -> T:
        async with semaphore:
            return await job()

    try:
        async with asyncio.TaskGroup() as tg:
            tasks = [tg.create_task(bounded(job)) for job in jobs]
    except ExceptionGroup as eg:
        raise first_error(eg) from None

    return [task.result() for task in tasks]
