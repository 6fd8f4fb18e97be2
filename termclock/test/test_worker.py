import threading
from datetime import datetime

import pytest

from ..timecell import DisplayTime, TimeCell
from ..worker import (
    ClockQueryFailure,
    RedrawWatcher,
    TimeKeeper,
    interpretTime,
    localNow,
    runUntilQuit,
)


def test_interpret_time():
    t, remainder = interpretTime(datetime(2024, 3, 1, 10, 30, 45, 250000))
    assert t == DisplayTime(10, 30, 45)
    assert remainder == pytest.approx(0.25)


def test_local_now_is_timezone_aware():
    assert localNow().utcoffset() is not None


def test_tick_waits_for_the_next_whole_second():
    cell = TimeCell()
    keeper = TimeKeeper(cell, clock=lambda: datetime(2024, 1, 1, 10, 30, 45, 300000))

    assert keeper.tick() == pytest.approx(0.7)
    assert cell.readSnapshot() == DisplayTime(10, 30, 45)


def test_run_sleeps_the_remainder():
    """successive waits follow the fractional part of each reading"""
    readings = iter(
        [
            datetime(2024, 1, 1, 23, 59, 58, 300000),
            datetime(2024, 1, 1, 23, 59, 59, 10000),
            datetime(2024, 1, 2, 0, 0, 0, 900000),
        ]
    )
    cell = TimeCell()
    waits = []
    seen = []

    def sleep(seconds):
        waits.append(seconds)
        seen.append(cell.readSnapshot())
        if len(waits) == 3:
            keeper.stop()

    keeper = TimeKeeper(cell, clock=lambda: next(readings), sleep=sleep)
    keeper.run()

    assert waits == [pytest.approx(0.7), pytest.approx(0.99), pytest.approx(0.1)]
    assert seen == [
        DisplayTime(23, 59, 58),
        DisplayTime(23, 59, 59),
        DisplayTime(0, 0, 0),
    ]


def test_clock_failure_is_fatal():
    def broken():
        raise OSError("no clock")

    keeper = TimeKeeper(TimeCell(), clock=broken, sleep=lambda s: None)
    with pytest.raises(ClockQueryFailure):
        keeper.run()


def test_time_keeper_keeps_up_with_real_time():
    cell = TimeCell()
    keeper = TimeKeeper(cell)
    thread = threading.Thread(target=keeper.run, daemon=True)
    thread.start()
    try:
        first = cell.waitUntilChanged(None, timeout=2)
        second = cell.waitUntilChanged(first, timeout=2)
    finally:
        keeper.stop()
        thread.join(2)

    def asSeconds(t):
        return t.hour * 3600 + t.minute * 60 + t.second

    # allow for midnight
    assert (asSeconds(second) - asSeconds(first)) % 86400 in (1, 2)


class RedrawCounter:
    def __init__(self) -> None:
        self.count = 0
        self.event = threading.Event()

    def __call__(self) -> None:
        self.count += 1
        self.event.set()


@pytest.fixture
def watched():
    cell = TimeCell()
    counter = RedrawCounter()
    watcher = RedrawWatcher(cell, counter, poll=0.05)
    thread = threading.Thread(target=watcher.run, daemon=True)
    thread.start()
    yield cell, counter
    watcher.stop()
    thread.join(2)


def test_watcher_redraws_once_for_equal_writes(watched):
    cell, counter = watched

    cell.write(DisplayTime(10, 30, 45))
    assert counter.event.wait(2)
    counter.event.clear()

    cell.write(DisplayTime(10, 30, 45))
    assert not counter.event.wait(0.3)
    assert counter.count == 1


def test_watcher_redraws_on_each_change(watched):
    cell, counter = watched

    for second in range(3):
        counter.event.clear()
        cell.write(DisplayTime(10, 30, second))
        assert counter.event.wait(2)

    assert counter.count == 3


def test_watcher_is_silent_without_writes(watched):
    cell, counter = watched
    assert not counter.event.wait(0.2)
    assert counter.count == 0


def test_supervisor_reports_crash():
    reasons = []

    def crash():
        raise ClockQueryFailure("no clock")

    thread = runUntilQuit("TimeKeeper", crash, reasons.append)
    assert thread.daemon
    thread.start()
    thread.join(2)

    assert len(reasons) == 1
    assert reasons[0].startswith("TimeKeeper crashed")
    assert "no clock" in reasons[0]


def test_supervisor_reports_normal_exit():
    reasons = []
    thread = runUntilQuit("RedrawWatcher", lambda: None, reasons.append)
    thread.start()
    thread.join(2)

    assert reasons == [None]


def test_watcher_coalesces_writes_made_while_busy():
    """several writes during a slow repaint produce one more repaint, for the latest value"""
    cell = TimeCell()
    entered = threading.Event()
    release = threading.Event()
    second_call = threading.Event()
    seen = []

    def requestRedraw():
        seen.append(cell.readSnapshot())
        if len(seen) == 1:
            entered.set()
            release.wait(2)
        else:
            second_call.set()

    watcher = RedrawWatcher(cell, requestRedraw, poll=0.05)
    thread = threading.Thread(target=watcher.run, daemon=True)
    thread.start()
    try:
        cell.write(DisplayTime(10, 30, 45))
        assert entered.wait(2)

        cell.write(DisplayTime(10, 30, 46))
        cell.write(DisplayTime(10, 30, 47))
        cell.write(DisplayTime(10, 30, 48))
        release.set()

        assert second_call.wait(2)
        second_call.clear()
        assert not second_call.wait(0.3)
    finally:
        watcher.stop()
        thread.join(2)

    assert seen == [DisplayTime(10, 30, 45), DisplayTime(10, 30, 48)]
