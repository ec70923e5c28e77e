"""Structured fan-out helpers for asyncio."""

import asyncio
from collections.abc import Awaitable, Sequence
from typing import Any


async def gather_or_cancel(*aws: Awaitable[Any]) -> list[Any]:
    """Run awaitables concurrently and join them all.

    Unlike ``asyncio.gather``, the first failure cancels every sibling
    still running before it propagates, and a cancelled caller cancels
    all children.

    Args:
        *aws: Coroutines or futures to run.

    Returns:
        Results in argument order.

    Raises:
        Exception: The first failure observed. When several tasks fail in
            the same scheduling step, the one earliest in argument order.
    """
    if not aws:
        return []

    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    except asyncio.CancelledError:
        await _cancel_all(tasks)
        raise

    failed = _first_failed(tasks, done)
    if failed is not None:
        await _cancel_all(tasks)
        raise failed.exception()  # type: ignore[misc]

    return [task.result() for task in tasks]


def _first_failed(
    tasks: Sequence[asyncio.Future[Any]],
    done: set[asyncio.Future[Any]],
) -> asyncio.Future[Any] | None:
    for task in tasks:
        if task in done and not task.cancelled() and task.exception() is not None:
            return task
    return None


async def _cancel_all(tasks: Sequence[asyncio.Future[Any]]) -> None:
    """Cancel unfinished tasks and collect every outcome, failures included."""
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)
