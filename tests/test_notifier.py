import asyncio
import threading

from tfgraph import ThreadingScheduler, UpdateNotifier

from .utils import FakeClock, FakeScheduler


def make_notifier(window: float = 0.1):
    scheduler = FakeScheduler(FakeClock(0.0))
    notifier = UpdateNotifier(coalesce_window=window, scheduler=scheduler)
    calls = []
    notifier.on_change(lambda: calls.append(scheduler.clock.now))
    return notifier, scheduler, calls


def test_first_change_is_signalled_immediately():
    notifier, scheduler, calls = make_notifier()
    notifier.notify_changed()
    assert calls == [0.0]
    assert scheduler.num_active == 1


def test_burst_is_coalesced_into_leading_and_trailing_signal():
    notifier, scheduler, calls = make_notifier()
    for _ in range(50):
        notifier.notify_changed()
        scheduler.advance(0.001)
    assert len(calls) == 1
    assert notifier.has_pending

    scheduler.advance(0.2)
    assert calls == [0.0, 0.1]
    assert not notifier.has_pending


def test_at_most_one_signal_per_window_under_sustained_load():
    notifier, scheduler, calls = make_notifier()
    for _ in range(1000):
        notifier.notify_changed()
        scheduler.advance(0.001)
    scheduler.advance(1.0)
    assert len(calls) == 11
    gaps = [b - a for a, b in zip(calls[:-1], calls[1:])]
    assert all(gap >= 0.1 - 1e-9 for gap in gaps)


def test_quiet_window_sends_no_trailing_signal():
    notifier, scheduler, calls = make_notifier()
    notifier.notify_changed()
    scheduler.advance(1.0)
    assert calls == [0.0]

    # Window has closed, so the next change is signalled right away.
    scheduler.advance(5.0)
    notifier.notify_changed()
    assert calls == [0.0, 6.0]


def test_flush_sends_pending_signal_now():
    notifier, scheduler, calls = make_notifier()
    notifier.notify_changed()
    notifier.notify_changed()
    notifier.flush()
    assert len(calls) == 2

    # Nothing left for the trailing edge.
    scheduler.advance(1.0)
    assert len(calls) == 2


def test_close_cancels_window_and_ignores_later_changes():
    notifier, scheduler, calls = make_notifier()
    notifier.notify_changed()
    notifier.notify_changed()
    notifier.close()
    assert scheduler.num_active == 0

    scheduler.advance(1.0)
    notifier.notify_changed()
    assert calls == [0.0]


def test_zero_window_signals_every_change():
    notifier, scheduler, calls = make_notifier(window=0.0)
    for _ in range(5):
        notifier.notify_changed()
    assert len(calls) == 5
    assert scheduler.timers == []


def test_remove_change_callback():
    notifier, scheduler, calls = make_notifier(window=0.0)
    other = []

    @notifier.on_change
    def callback() -> None:
        other.append(None)

    notifier.notify_changed()
    notifier.remove_change_callback(callback)
    notifier.notify_changed()
    assert len(calls) == 2
    assert len(other) == 1

    notifier.remove_change_callback("all")
    notifier.notify_changed()
    assert len(calls) == 2


def test_failing_callback_does_not_stop_others(capsys):
    notifier, scheduler, calls = make_notifier(window=0.0)

    def explode() -> None:
        raise RuntimeError("boom")

    notifier.remove_change_callback("all")
    notifier.on_change(explode)
    notifier.on_change(lambda: calls.append(None))
    notifier.notify_changed()

    assert calls == [None]
    assert "boom" in capsys.readouterr().err


def test_asyncio_loop_as_scheduler():
    async def main() -> int:
        calls = []
        notifier = UpdateNotifier(
            coalesce_window=0.01, scheduler=asyncio.get_running_loop()
        )
        notifier.on_change(lambda: calls.append(None))
        for _ in range(10):
            notifier.notify_changed()
        assert len(calls) == 1
        await asyncio.sleep(0.1)
        return len(calls)

    assert asyncio.run(main()) == 2


def test_threading_scheduler_flushes_trailing_signal():
    trailing = threading.Event()
    calls = []

    def callback() -> None:
        calls.append(None)
        if len(calls) == 2:
            trailing.set()

    notifier = UpdateNotifier(coalesce_window=0.01, scheduler=ThreadingScheduler())
    notifier.on_change(callback)
    notifier.notify_changed()
    notifier.notify_changed()
    assert trailing.wait(timeout=5.0)
    notifier.close()
