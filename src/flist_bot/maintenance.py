"""
Fixed-interval background jobs.

A job is a zero-argument coroutine function such as
``FListClient.renew_ticket``. :func:`startup` runs it once right away, then
keeps re-running it every ``interval`` seconds in its own task. Failures are
logged and never stop the schedule, since the F-List API is expected to
blip now and then. :func:`shutdown` cancels the task.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

Job = Callable[[], Awaitable[object]]


async def run_once(task_fn: Job, name: str = "job") -> bool:
    """Await ``task_fn`` once; log and swallow its failure. Returns success."""
    try:
        result = await task_fn()
    except Exception as exc:
        logger.error("Job '%s' failed: %s", name, exc)
        return False
    logger.debug("Job '%s' finished: %r", name, result)
    return True


async def startup(
    task_fn: Job,
    interval: float,
    name: str = "job",
    *,
    immediate: bool = True,
) -> asyncio.Task | None:
    """
    Run ``task_fn`` now (unless ``immediate=False``) and every ``interval`` seconds after.

    An ``interval`` of 0 or less means run-once: no task is created and
    ``None`` is returned.
    """
    if immediate:
        await run_once(task_fn, name)

    if interval <= 0:
        logger.info("Job '%s' has no interval; not scheduling", name)
        return None

    async def _periodic() -> None:
        while True:
            await asyncio.sleep(interval)
            await run_once(task_fn, name)

    logger.info("Job '%s' scheduled every %ss", name, interval)
    return asyncio.create_task(_periodic(), name=name)


async def shutdown(task: asyncio.Task | None) -> None:
    """Cancel a task from :func:`startup` and wait for it to unwind."""
    if not task:
        return

    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
