import threading
import time

import pytest

from imulive.threadpool import ThreadPoolContainer


def test_offer_future_returns_result():
    with ThreadPoolContainer(2) as pool:
        future = pool.offer_future(lambda a, b: a + b, 2, 3)
        assert future.result(timeout=5) == 5


def test_offer_future_kwargs():
    with ThreadPoolContainer(1) as pool:
        future = pool.offer_future(lambda value, scale=1: value * scale, 4, scale=3)
        assert future.result(timeout=5) == 12


def test_invalid_max_threads():
    with pytest.raises(ValueError):
        ThreadPoolContainer(0)


def test_concurrency_never_exceeds_limit():
    lock = threading.Lock()
    state = {"running": 0, "peak": 0}

    def task():
        with lock:
            state["running"] += 1
            state["peak"] = max(state["peak"], state["running"])
        time.sleep(0.01)
        with lock:
            state["running"] -= 1

    with ThreadPoolContainer(3) as pool:
        for _ in range(15):
            pool.offer_future(task)
            assert pool.pending <= 3
    assert state["peak"] <= 3
    assert state["running"] == 0


def test_wait_for_finish_runs_everything():
    results = []
    lock = threading.Lock()

    def task(i):
        time.sleep(0.005)
        with lock:
            results.append(i)

    pool = ThreadPoolContainer(2)
    for i in range(8):
        pool.offer_future(task, i)
    pool.wait_for_finish()
    assert pool.pending == 0
    assert sorted(results) == list(range(8))
    pool.shutdown()


def test_full_pool_blocks_until_slot_frees():
    release = threading.Event()
    pool = ThreadPoolContainer(1)
    first = pool.offer_future(release.wait)
    started = threading.Event()
    second_holder = {}

    def offer_second():
        second_holder["future"] = pool.offer_future(lambda: "done")
        started.set()

    offering = threading.Thread(target=offer_second)
    offering.start()
    assert not started.wait(0.1)
    release.set()
    offering.join(timeout=5)
    assert first.done()
    assert second_holder["future"].result(timeout=5) == "done"
    pool.shutdown()


def test_failed_task_does_not_block_wait():
    def fail():
        raise RuntimeError("boom")

    pool = ThreadPoolContainer(2)
    future = pool.offer_future(fail)
    pool.wait_for_finish()
    assert pool.pending == 0
    with pytest.raises(RuntimeError):
        future.result()
    pool.shutdown()