"""Small asyncio helpers shared across features."""

import asyncio
import logging
from typing import Any, Awaitable, Optional, TypeVar

logger = logging.getLogger("MindfulJournal.Async")

T = TypeVar("T")


async def race_with_timeout(
    *operations: Awaitable[T],
    timeout: float,
    default: Optional[T] = None,
) -> Optional[T]:
    """
    Return the result of whichever operation finishes first.

    If none finishes within ``timeout`` seconds, ``default`` is returned
    instead. An operation that finishes first by raising propagates its
    exception. Operations still running when the race is decided are
    cancelled. When several finish in the same loop iteration the first one
    in argument order wins.
    """
    if not operations:
        raise ValueError("race_with_timeout needs at least one operation")

    tasks = [asyncio.ensure_future(op) for op in operations]
    try:
        done, _ = await asyncio.wait(
            tasks,
            timeout=timeout,
            return_when=asyncio.FIRST_COMPLETED,
        )
        if not done:
            logger.debug("No operation finished within %.3fs", timeout)
            return default

        winner = next(task for task in tasks if task in done)
        for task in done:
            if task is not winner:
                _consume_result(task)
        return winner.result()
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()


def _consume_result(task: "asyncio.Future[Any]") -> None:
    # Retrieve the outcome of a losing task so asyncio does not warn about it
    if not task.cancelled() and task.exception() is not None:
        logger.debug("Discarded error from losing operation: %s", task.exception())
