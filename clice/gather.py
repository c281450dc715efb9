"""Run several awaitables together and wait for all of them."""

from __future__ import annotations

import itertools
import os
from typing import Any, Awaitable, Callable, Iterable, Optional

from .sync import Event
from .tasks import Task, run_pending


async def _gather(awaitables: tuple) -> tuple:
    count = len(awaitables)
    if count == 0:
        return ()
    event = Event()
    finished = 0

    async def run_one(awaitable: Awaitable[Any]) -> Any:
        nonlocal finished
        try:
            return await awaitable
        finally:
            finished += 1
            if finished == count:
                event.set()

    tasks = [Task(run_one(awaitable)) for awaitable in awaitables]
    for task in tasks:
        task.schedule()

    await event
    return tuple(task.result() for task in tasks)


def gather(*args) -> Task[tuple]:
    """Return a task that runs all awaitables at once and yields their results in order."""
    return Task(_gather(args))


def run(*args) -> tuple:
    """Run the awaitables together on the event loop and return their results."""
    core = gather(*args)
    core.schedule()
    run_pending()
    if not core.done():
        raise RuntimeError("run: tasks did not finish")
    return core.result()


async def _gather_each(
    values: Iterable[Any],
    coroutine: Callable[[Any], Awaitable[bool]],
    concurrency: int,
) -> bool:
    iterator = iter(values)
    event = Event()
    tasks: list[Task[None]] = []
    active = 0
    failed = False
    error: Optional[BaseException] = None

    async def worker(first: Any) -> None:
        nonlocal active, failed, error
        value = first
        while True:
            try:
                ok = await coroutine(value)
            except Exception as exc:
                ok = False
                if error is None:
                    error = exc
            if not ok:
                if not failed:
                    failed = True
                    for task in tasks:
                        task.cancel()
                        task.dispose()
                    event.set()
                return
            try:
                value = next(iterator)
            except StopIteration:
                break
        active -= 1
        if active == 0:
            event.set()

    for value in itertools.islice(iterator, concurrency):
        tasks.append(Task(worker(value)))
    if not tasks:
        return True
    active = len(tasks)
    for task in tasks:
        task.schedule()

    await event
    if error is not None:
        raise error
    return not failed


def gather_each(
    values: Iterable[Any],
    coroutine: Callable[[Any], Awaitable[bool]],
    concurrency: Optional[int] = None,
) -> Task[bool]:
    """Run ``coroutine`` on every value with bounded concurrency.

    The task yields True if every call returned a true value. The first false
    result cancels all remaining work and the task yields False.
    """
    if concurrency is None:
        concurrency = os.cpu_count() or 1
    if concurrency < 1:
        raise ValueError("concurrency must be at least 1")
    return Task(_gather_each(values, coroutine, concurrency))