import logging
from datetime import datetime, timezone
from threading import Event, Thread
from typing import Callable, Optional, Tuple

from .settings import WATCH_STOP_POLL
from .timecell import DisplayTime, TimeCell

log = logging.getLogger(__name__)


class ClockQueryFailure(Exception):
    """the system clock or the local timezone couldn't be read"""


def localNow() -> datetime:
    """
    current wall clock time in the local timezone.

    The offset is resolved again on every call so DST or timezone changes
    are picked up without a restart.
    """
    return datetime.now(timezone.utc).astimezone()


def interpretTime(now: datetime) -> Tuple[DisplayTime, float]:
    """split a timestamp into the displayed value and the fraction of the current second"""
    return DisplayTime.fromTime(now), now.microsecond / 10**6


class TimeKeeper:
    """
    keep a TimeCell equal to the current local time.

    Args:
        cell(TimeCell): where the time gets published
        clock(callable): returns the current local datetime
        sleep(callable): blocks for the given amount of seconds,
            defaults to waiting on the stop event
    """

    def __init__(
        self,
        cell: TimeCell,
        clock: Callable[[], datetime] = localNow,
        sleep: Optional[Callable[[float], object]] = None,
    ) -> None:
        self.cell = cell
        self.clock = clock
        self.stopped = Event()
        self.sleep = sleep if sleep is not None else self.stopped.wait

    def getLocalTime(self) -> datetime:
        try:
            return self.clock()
        except (OSError, OverflowError, ValueError) as e:
            raise ClockQueryFailure(f"can't read the local time: {e}") from e

    def tick(self) -> float:
        """publish the current time, return the seconds left until the next whole second"""
        display_time, remainder = interpretTime(self.getLocalTime())
        self.cell.write(display_time)
        return 1 - remainder

    def run(self) -> None:
        while not self.stopped.is_set():
            self.sleep(self.tick())

    def stop(self) -> None:
        self.stopped.set()


class RedrawWatcher:
    """
    ask for a repaint every time the value in a TimeCell changes.

    Equal writes never trigger a repaint, several writes between two
    wake-ups produce a single repaint for the latest value.

    Args:
        cell(TimeCell): the cell to watch
        requestRedraw(callable): must be safe to call from a non UI thread
    """

    def __init__(
        self,
        cell: TimeCell,
        requestRedraw: Callable[[], None],
        poll: float = WATCH_STOP_POLL,
    ) -> None:
        self.cell = cell
        self.requestRedraw = requestRedraw
        self.poll = poll
        self.last_seen: Optional[DisplayTime] = None
        self.stopped = Event()

    def run(self) -> None:
        while not self.stopped.is_set():
            try:
                value = self.cell.waitUntilChanged(self.last_seen, timeout=self.poll)
            except TimeoutError:
                continue
            self.requestRedraw()
            self.last_seen = value

    def stop(self) -> None:
        self.stopped.set()


def runUntilQuit(
    name: str, target: Callable[[], None], onExit: Callable[[Optional[str]], None]
) -> Thread:
    """
    return a daemon thread running target.

    Whatever way target ends, onExit gets called with the reason so the
    app never keeps running next to a dead worker. A normal return passes
    None as the reason.
    """

    def supervised() -> None:
        reason = None
        try:
            target()
            log.info("%s finished", name)
        except Exception as e:
            log.exception("%s crashed", name)
            reason = f"{name} crashed: {e}"
        finally:
            onExit(reason)

    return Thread(target=supervised, name=name, daemon=True)
