import threading

from rps_game.scheduler import ManualScheduler, ThreadingScheduler


def test_manual_runs_in_time_order():
    scheduler = ManualScheduler()
    calls = []
    scheduler.call_later(2.0, lambda: calls.append("b"))
    scheduler.call_later(1.0, lambda: calls.append("a"))
    scheduler.call_later(2.0, lambda: calls.append("c"))

    assert scheduler.advance(1.5) == 1
    assert calls == ["a"]
    assert scheduler.advance(0.5) == 2
    assert calls == ["a", "b", "c"]
    assert scheduler.now == 2.0


def test_callbacks_scheduled_while_advancing_run_in_window():
    scheduler = ManualScheduler()
    calls = []

    def chain():
        calls.append(scheduler.now)
        if len(calls) < 5:
            scheduler.call_later(1.0, chain)

    scheduler.call_later(1.0, chain)
    scheduler.advance(3.0)
    assert calls == [1.0, 2.0, 3.0]
    scheduler.run_until_idle()
    assert calls == [1.0, 2.0, 3.0, 4.0, 5.0]


def test_cancel_is_idempotent():
    scheduler = ManualScheduler()
    calls = []
    handle = scheduler.call_later(1.0, lambda: calls.append(1))
    handle.cancel()
    handle.cancel()
    assert not handle.active
    assert scheduler.advance(5) == 0
    assert calls == []
    assert scheduler.pending() == []


def test_cancel_after_fire_is_noop():
    scheduler = ManualScheduler()
    calls = []
    handle = scheduler.call_later(0.5, lambda: calls.append(1))
    scheduler.advance(1)
    handle.cancel()
    assert calls == [1]
    assert "fired" in repr(handle)


def test_threading_scheduler_fires_under_lock():
    scheduler = ThreadingScheduler()
    done = threading.Event()

    with scheduler.lock:
        scheduler.call_later(0.01, done.set)
        assert not done.wait(0.2)
    assert done.wait(2)


def test_threading_scheduler_cancel():
    scheduler = ThreadingScheduler()
    fired = threading.Event()
    handle = scheduler.call_later(0.05, fired.set)
    handle.cancel()
    handle.cancel()
    assert not fired.wait(0.2)
