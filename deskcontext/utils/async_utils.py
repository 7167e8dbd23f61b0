"""Async utility functions."""

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Optional, Set

from deskcontext.utils.logging_utils import get_logger

logger = get_logger("async_utils")


def fire_and_forget(coro, pending: Optional[Set[asyncio.Task]] = None):
    """Schedule a coroutine fire-and-forget, works from sync or async context.

    If a running event loop exists, the coroutine becomes a task on it. The task is
    kept in ``pending`` until it finishes so it cannot be garbage collected early.
    Otherwise, falls back to asyncio.run().
    """
    coro_name = getattr(coro, "__qualname__", None) or getattr(coro, "__name__", "unknown")
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        asyncio.run(coro)
        return None

    task = loop.create_task(coro)
    if pending is not None:
        pending.add(task)

    def _on_done(t: asyncio.Task):
        if pending is not None:
            pending.discard(t)
        if t.cancelled():
            return
        exc = t.exception()
        if exc:
            logger.opt(exception=exc).error("fire_and_forget task failed: {}", coro_name)

    task.add_done_callback(_on_done)
    return task


async def call_hook(hook: Optional[Callable[[], Any]]) -> None:
    """Invoke an optional sync or async callback."""
    if hook is None:
        return
    result = hook()
    if inspect.isawaitable(result):
        await result


async def settle_all(*aws: Awaitable) -> list:
    """Run awaitables concurrently and collect every outcome, exceptions included."""
    return list(await asyncio.gather(*aws, return_exceptions=True))
