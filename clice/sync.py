"""Event and lock primitives for tasks running on the event loop."""

from __future__ import annotations

from collections import deque
from typing import Any, Callable, Generator, Optional


class Event:
    """A flag that tasks can wait on until it is set."""

    def __init__(self) -> None:
        self._ready = False
        self._waiters: list[Callable[[], None]] = []

    def set(self) -> None:
        """Set the flag and wake every task waiting for it."""
        self._ready = True
        waiters, self._waiters = self._waiters, []
        for resume in waiters:
            resume()

    def clear(self) -> None:
        """Reset the flag and forget the tasks waiting for it."""
        self._ready = False
        self._waiters.clear()

    def is_set(self) -> bool:
        return self._ready

    def __await__(self) -> Generator[Any, None, None]:
        if self._ready:
            return
        registered: Optional[Callable[[], None]] = None

        def start(resume: Callable[[], None]) -> None:
            nonlocal registered
            registered = resume
            self._waiters.append(resume)

        try:
            yield start
        except GeneratorExit:
            if registered is not None and registered in self._waiters:
                self._waiters.remove(registered)
            raise


class _Waiter:
    __slots__ = ("resume", "granted")

    def __init__(self) -> None:
        self.resume: Optional[Callable[[], None]] = None
        self.granted = False


class _LockWait:
    """Awaitable that suspends a task until the lock is handed to it."""

    def __init__(self, lock: Lock, waiter: _Waiter) -> None:
        self._lock = lock
        self._waiter = waiter

    def __await__(self) -> Generator[Any, None, None]:
        waiter = self._waiter
        lock = self._lock

        def start(resume: Callable[[], None]) -> None:
            waiter.resume = resume
            lock._waiters.append(waiter)

        try:
            yield start
        except GeneratorExit:
            if waiter.granted:
                lock._release()
            elif waiter in lock._waiters:
                lock._waiters.remove(waiter)
            raise


class Lock:
    """A mutual-exclusion lock handed to waiting tasks in arrival order."""

    def __init__(self) -> None:
        self._locked = False
        self._waiters: deque[_Waiter] = deque()

    def locked(self) -> bool:
        return self._locked

    async def try_lock(self) -> Guard:
        """Acquire the lock, waiting if it is held, and return its guard."""
        if self._locked:
            await _LockWait(self, _Waiter())
        else:
            self._locked = True
        return Guard(self)

    def _release(self) -> None:
        if self._waiters:
            waiter = self._waiters.popleft()
            waiter.granted = True
            if waiter.resume is not None:
                waiter.resume()
        else:
            self._locked = False


class Guard:
    """Holds a :class:`Lock` until released or garbage-collected."""

    def __init__(self, lock: Lock) -> None:
        if not lock.locked():
            raise RuntimeError("a guard needs a held lock")
        self._lock: Optional[Lock] = lock

    def release(self) -> None:
        """Release the lock; releasing twice does nothing."""
        lock, self._lock = self._lock, None
        if lock is not None:
            lock._release()

    def __enter__(self) -> Guard:
        return self

    def __exit__(self, *args) -> None:
        self.release()

    def __del__(self) -> None:
        if getattr(self, "_lock", None) is not None:
            self.release()