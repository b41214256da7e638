"""Fork-join fan-out of row fills over worker threads, using anyio task groups."""

from __future__ import annotations

import functools
from collections.abc import Callable, Sequence

import anyio
import anyio.to_thread

__all__ = ['fan_out', 'run_fan_out']


async def fan_out(tasks: Sequence[Callable[[], None]], max_workers: int) -> None:
    """Run every task on a worker thread and return once all have finished.

    Tasks share nothing: each one fills a single row with the engine it
    exclusively owns, so no locking happens between them. If a task fails, tasks
    still waiting for a worker are cancelled and the failures are re-raised as
    an ExceptionGroup once the running tasks have finished.

    Args:
        tasks: Zero-argument callables, one per row.
        max_workers: Maximum number of tasks running at once.
    """
    if not tasks:
        return
    limiter = anyio.CapacityLimiter(max_workers)
    async with anyio.create_task_group() as tg:
        for task in tasks:
            tg.start_soon(functools.partial(anyio.to_thread.run_sync, task, limiter=limiter))


def run_fan_out(tasks: Sequence[Callable[[], None]], max_workers: int) -> None:
    """Blocking form of `fan_out` for callers outside an event loop."""
    if not tasks:
        return
    anyio.run(fan_out, tasks, max_workers)
