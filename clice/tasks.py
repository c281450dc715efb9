"""Cooperative tasks driven by a single-threaded event loop.

A :class:`Task` wraps a coroutine that starts suspended. Scheduling it puts it
on the loop, and :func:`run_pending` drives the loop until no task, timer or
thread-pool job is left.

An awaitable used inside a task suspends the task by yielding a callable. The
loop calls that callable with a zero-argument function which, when invoked,
puts the task back on the loop. :func:`sleep`, :func:`submit` and awaiting a
:class:`Task` are built on that protocol, and other primitives may use it too.

Cancelling a task marks it and every task it is currently awaiting. The next
time any of them would be resumed, the chain is unwound instead: no further
code runs in it, and disposable tasks on the way are destroyed.
"""

from __future__ import annotations

import heapq
import itertools
import queue
import time
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Callable, Generator, Generic, Optional, TypeVar

T = TypeVar("T")

_UNSET: Any = object()

_THREAD_POOL_SIZE = 4


@dataclass(order=True)
class _Timer:
    deadline: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class _Loop:
    """The default event loop: ready queue, timers and a thread pool."""

    def __init__(self) -> None:
        self.ready: deque[Callable[[], None]] = deque()
        self.timers: list[_Timer] = []
        self.seq = itertools.count()
        self.completed: queue.SimpleQueue[Callable[[], None]] = queue.SimpleQueue()
        self.inflight = 0
        self.executor: Optional[ThreadPoolExecutor] = None
        self.current: Optional[Task[Any]] = None
        self.running = False

    def call_soon(self, callback: Callable[[], None]) -> None:
        self.ready.append(callback)

    def call_later(self, delay: float, callback: Callable[[], None]) -> _Timer:
        timer = _Timer(time.monotonic() + delay, next(self.seq), callback)
        heapq.heappush(self.timers, timer)
        return timer

    def run_in_thread(self, work: Callable[[], Any], resume: Callable[[], None]):
        if self.executor is None:
            self.executor = ThreadPoolExecutor(max_workers=_THREAD_POOL_SIZE)
        future = self.executor.submit(work)
        self.inflight += 1
        future.add_done_callback(lambda _: self.completed.put(resume))
        return future

    def _collect_completed(self, timeout: Optional[float]) -> None:
        if timeout != 0:
            try:
                resume = self.completed.get(timeout=timeout)
            except queue.Empty:
                return
            self.inflight -= 1
            resume()
        while True:
            try:
                resume = self.completed.get_nowait()
            except queue.Empty:
                return
            self.inflight -= 1
            resume()

    def _fire_due_timers(self) -> None:
        now = time.monotonic()
        while self.timers and self.timers[0].deadline <= now:
            timer = heapq.heappop(self.timers)
            if not timer.cancelled:
                timer.callback()

    def _drop_cancelled_timers(self) -> None:
        while self.timers and self.timers[0].cancelled:
            heapq.heappop(self.timers)

    def run(self) -> None:
        if self.running:
            raise RuntimeError("the event loop is already running")
        self.running = True
        try:
            while True:
                self._collect_completed(0)
                self._fire_due_timers()
                if self.ready:
                    for _ in range(len(self.ready)):
                        self.ready.popleft()()
                    continue
                self._drop_cancelled_timers()
                if not self.timers and not self.inflight:
                    return
                timeout = None
                if self.timers:
                    timeout = max(0.0, self.timers[0].deadline - time.monotonic())
                if self.inflight:
                    self._collect_completed(timeout)
                elif timeout:
                    time.sleep(timeout)
        finally:
            self.running = False


_loop = _Loop()


class Task(Generic[T]):
    """A coroutine run by the event loop; it does nothing until scheduled or awaited."""

    def __init__(self, coroutine) -> None:
        if not (hasattr(coroutine, "send") and hasattr(coroutine, "close")):
            raise TypeError(f"Task needs a coroutine, got {type(coroutine).__name__}")
        self._coro = coroutine
        self._started = False
        self._queued = False
        self._done = False
        self._closed = False
        self._cancelled = False
        self._disposable = False
        self._value: Any = _UNSET
        self._error: Optional[BaseException] = None
        # The task waiting for this one to finish.
        self._continuation: Optional[Task[Any]] = None
        # The task this one is currently waiting for.
        self._next: Optional[Task[Any]] = None

    def __del__(self) -> None:
        coro = getattr(self, "_coro", None)
        if coro is not None and not self._started and not self._closed:
            coro.close()

    def schedule(self) -> None:
        """Put the task on the event loop."""
        self._wake()

    def cancel(self) -> None:
        """Cancel the task and every task it is awaiting; they will not resume."""
        task: Optional[Task[Any]] = self
        while task is not None:
            task._cancelled = True
            task = task._next

    def dispose(self) -> None:
        """Let the task be destroyed as soon as it finishes or is cancelled."""
        self._disposable = True
        if self._done:
            self._destroy()

    def done(self) -> bool:
        return self._done

    def cancelled(self) -> bool:
        return self._cancelled

    def result(self) -> T:
        """Return the coroutine's value, or raise what it raised."""
        if self._disposable:
            raise RuntimeError("task was disposed")
        if not self._done:
            raise RuntimeError("task is not done")
        if self._error is not None:
            raise self._error
        return self._value

    def __await__(self) -> Generator[Any, None, T]:
        if not self._done:
            waiter = _loop.current
            if waiter is None:
                raise RuntimeError("a Task can only be awaited from inside another Task")
            if waiter is self:
                raise RuntimeError("a Task cannot await itself")
            if self._continuation is not None:
                raise RuntimeError("task is already awaited")

            def start(resume: Callable[[], None]) -> None:
                self._continuation = waiter
                waiter._next = self
                if not self._started:
                    self._wake()

            try:
                yield start
            except GeneratorExit:
                self._continuation = None
                if not self._done:
                    self._destroy()
                raise
        if self._error is not None:
            raise self._error
        return self._value

    def _wake(self) -> None:
        if self._closed or self._done or self._queued:
            return
        self._queued = True
        _loop.call_soon(self._run)

    def _run(self) -> None:
        self._queued = False
        if self._closed or self._done:
            return
        if self._cancelled:
            task: Optional[Task[Any]] = self
            while task is not None and task._cancelled:
                continuation = task._continuation
                if task._disposable:
                    task._destroy()
                task = continuation
            return
        self._step()

    def _step(self) -> None:
        previous = _loop.current
        _loop.current = self
        self._started = True
        try:
            request = self._coro.send(None)
        except StopIteration as stop:
            _loop.current = previous
            self._finish(stop.value, None)
            return
        except Exception as exc:
            _loop.current = previous
            self._finish(_UNSET, exc)
            return
        _loop.current = previous
        if not callable(request):
            self._coro.close()
            self._finish(
                _UNSET, TypeError(f"task yielded a non-callable {type(request).__name__}")
            )
            return
        request(self._wake)

    def _finish(self, value: Any, error: Optional[BaseException]) -> None:
        self._done = True
        self._value = value
        self._error = error
        continuation = self._continuation
        if continuation is not None:
            continuation._next = None
            continuation._wake()
        if self._disposable:
            self._destroy()
            if error is not None and continuation is None:
                raise error

    def _destroy(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._coro.close()


class _Sleep:
    """Awaitable that resumes the task after a delay."""

    def __init__(self, seconds: float) -> None:
        self._seconds = seconds

    def __await__(self) -> Generator[Any, None, None]:
        timer: Optional[_Timer] = None

        def start(resume: Callable[[], None]) -> None:
            nonlocal timer
            timer = _loop.call_later(self._seconds, resume)

        try:
            yield start
        except GeneratorExit:
            if timer is not None:
                timer.cancel()
            raise


class _ThreadWork:
    """Awaitable that runs a callable in the thread pool."""

    def __init__(self, work: Callable[[], Any]) -> None:
        self._work = work

    def __await__(self) -> Generator[Any, None, Any]:
        future = None

        def start(resume: Callable[[], None]) -> None:
            nonlocal future
            future = _loop.run_in_thread(self._work, resume)

        try:
            yield start
        except GeneratorExit:
            if future is not None:
                future.cancel()
            raise
        return future.result()


def sleep(milliseconds) -> _Sleep:
    """Return an awaitable that suspends the current task for the given time."""
    if isinstance(milliseconds, timedelta):
        seconds = milliseconds.total_seconds()
    else:
        seconds = milliseconds / 1000
    if seconds < 0:
        raise ValueError("sleep duration must not be negative")
    return _Sleep(seconds)


async def _run_in_thread(work: Callable[[], T]) -> T:
    return await _ThreadWork(work)


def submit(work: Callable[[], T]) -> Task[T]:
    """Return a task that runs ``work`` in the thread pool and yields its result."""
    if not callable(work):
        raise TypeError("submit needs a callable")
    return Task(_run_in_thread(work))


def run_pending() -> None:
    """Run the event loop until no scheduled task, timer or thread job remains."""
    _loop.run()