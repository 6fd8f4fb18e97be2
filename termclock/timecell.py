from dataclasses import dataclass
from datetime import datetime, time
from threading import Condition
from typing import Optional, Union


@dataclass(frozen=True)
class DisplayTime:
    """hour, minute and whole second as shown on the clock face"""

    hour: int
    minute: int
    second: int

    @classmethod
    def fromTime(cls, t: Union[time, datetime]) -> "DisplayTime":
        return cls(hour=t.hour, minute=t.minute, second=t.second)


def twoDigits(x: int) -> str:
    """zero pad to two digits, anything else (too wide, negative, empty) becomes '??'"""
    s = str(x)
    if not s.isdigit():
        return "??"
    if len(s) == 1:
        return "0" + s
    if len(s) == 2:
        return s
    return "??"


def showDisplayTime(t: DisplayTime) -> str:
    return f"{twoDigits(t.hour)}:{twoDigits(t.minute)}:{twoDigits(t.second)}"


class TimeCell:
    """
    single slot holding the latest DisplayTime.

    One writer (the TimeKeeper thread), any number of readers. Readers may
    block until the value differs from the one they saw last.
    """

    def __init__(self) -> None:
        self._value: Optional[DisplayTime] = None
        self._changed = Condition()

    def write(self, value: DisplayTime) -> None:
        if value is None:
            raise ValueError("the time cell can't be emptied once written")

        with self._changed:
            if value == self._value:
                return
            self._value = value
            self._changed.notify_all()

    def readSnapshot(self) -> Optional[DisplayTime]:
        with self._changed:
            return self._value

    def waitUntilChanged(
        self, last_seen: Optional[DisplayTime], timeout: Optional[float] = None
    ) -> DisplayTime:
        """
        block until the stored value is different from last_seen and return it.

        Intermediate values written before the caller wakes are skipped,
        only the latest one is returned.

        Raises:
            TimeoutError: nothing changed within timeout seconds
        """
        with self._changed:
            if not self._changed.wait_for(lambda: self._value != last_seen, timeout):
                raise TimeoutError(f"time cell unchanged after {timeout}s")
            return self._value
