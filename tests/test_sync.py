import pytest

from clice.gather import run
from clice.sync import Event, Guard, Lock
from clice.tasks import Task, run_pending, sleep


def test_event_wakes_waiters_in_order():
    event = Event()
    state = {"x": 0}

    async def task1():
        assert state["x"] == 0
        await event
        assert state["x"] == 1
        state["x"] = 2
        return "task1"

    async def task2():
        assert state["x"] == 0
        await event
        assert state["x"] == 2
        state["x"] = 3
        return "task2"

    async def main():
        state["x"] = 1
        event.set()
        return "main"

    assert run(task1(), task2(), main()) == ("task1", "task2", "main")
    assert state["x"] == 3


def test_event_clear_sequence():
    event = Event()
    state = {"x": 0}

    async def task1():
        assert state["x"] == 0
        await event
        assert state["x"] == 1
        state["x"] = 2
        return state["x"]

    async def task2():
        assert state["x"] == 0
        await event
        assert state["x"] == 2
        state["x"] = 3
        return state["x"]

    async def main():
        state["x"] = 1
        event.set()
        return state["x"]

    assert run(task1(), task2(), main()) == (2, 3, 1)
    assert state["x"] == 3


def test_event_set_flag_and_clear():
    event = Event()
    assert event.is_set() is False
    event.set()
    assert event.is_set() is True
    event.clear()
    assert event.is_set() is False


def test_awaiting_set_event_returns_immediately():
    event = Event()
    event.set()

    async def main():
        await event
        return "through"

    assert run(main()) == ("through",)


def test_clear_drops_waiters():
    event = Event()
    hits = []

    async def waiter():
        await event
        hits.append(1)

    task = Task(waiter())
    task.schedule()
    run_pending()
    event.clear()
    event.set()
    run_pending()
    assert hits == []
    assert task.done() is False


def test_lock_serialises_tasks():
    lock = Lock()
    state = {"x": 0}

    async def task1():
        with await lock.try_lock():
            await sleep(5)
            assert state["x"] == 0
            await sleep(10)
            assert state["x"] == 0
            await sleep(5)
            state["x"] = 1

    async def task2():
        with await lock.try_lock():
            await sleep(5)
            assert state["x"] == 1
            await sleep(5)
            assert state["x"] == 1
            await sleep(10)
            state["x"] = 2

    async def task3():
        with await lock.try_lock():
            await sleep(10)
            assert state["x"] == 2
            await sleep(5)
            assert state["x"] == 2
            await sleep(5)

    run(task1(), task2(), task3())
    assert state["x"] == 2
    assert lock.locked() is False


def test_lock_state_and_release_idempotent():
    lock = Lock()

    async def main():
        return await lock.try_lock()

    (guard,) = run(main())
    assert lock.locked() is True
    guard.release()
    assert lock.locked() is False
    guard.release()
    assert lock.locked() is False


def test_guard_requires_held_lock():
    with pytest.raises(RuntimeError):
        Guard(Lock())


def test_lock_handoff_order():
    lock = Lock()
    order = []

    async def worker(name):
        with await lock.try_lock():
            order.append(name + "-in")
            await sleep(2)
            order.append(name + "-out")
        return name

    assert run(worker("a"), worker("b"), worker("c")) == ("a", "b", "c")
    assert order == ["a-in", "a-out", "b-in", "b-out", "c-in", "c-out"]
    assert lock.locked() is False