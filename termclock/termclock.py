import asyncio
import logging
from datetime import datetime
from typing import Callable, List, Optional, Union

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container

from .clockFace import ClockFace
from .settings import FRAME_TITLE, TITLE
from .timecell import TimeCell
from .utils import ShutdownMsg, quitOnInterrupt, setupLogging
from .worker import RedrawWatcher, TimeKeeper, localNow, runUntilQuit

log = logging.getLogger(__name__)


class Termclock(App[Union[str, None]]):

    CSS_PATH = "termclock.tcss"
    TITLE = TITLE
    BINDINGS = [
        ("q", "quit", "Quit"),
        Binding("ctrl+c", "quit", "Quit", show=False, priority=True),
    ]

    def __init__(
        self,
        cell: Optional[TimeCell] = None,
        time_source: Callable[[], datetime] = localNow,
    ) -> None:
        super().__init__()
        self.cell = cell if cell is not None else TimeCell()
        self.time_source = time_source
        self.ui_loop: Optional[asyncio.AbstractEventLoop] = None
        self.pending_shutdown = False
        self.pending_reason: Optional[str] = None
        self.shutting_down = False
        self.clock_workers: List[Union[TimeKeeper, RedrawWatcher]] = []

    def compose(self) -> ComposeResult:
        frame = Container(ClockFace(self.cell, id="face"), id="frame")
        frame.border_subtitle = FRAME_TITLE
        yield frame

    def on_mount(self) -> None:
        self.ui_loop = asyncio.get_running_loop()
        if self.pending_shutdown:
            log.info("shutdown requested before startup finished")
            self.post_message(ShutdownMsg(self.pending_reason))
            return

        keeper = TimeKeeper(self.cell, self.time_source)
        watcher = RedrawWatcher(self.cell, self.query_one(ClockFace).requestRedraw)
        self.clock_workers = [keeper, watcher]

        runUntilQuit("TimeKeeper", keeper.run, self.requestShutdown).start()
        runUntilQuit("RedrawWatcher", watcher.run, self.requestShutdown).start()
        log.info("clock workers started")

    def requestShutdown(self, reason: Optional[str] = None) -> None:
        """
        ask the UI thread to shut down, callable from any thread or a signal handler.
        before the event loop is up the request is kept and honoured on mount
        """
        if self.ui_loop is None:
            self.pending_shutdown = True
            self.pending_reason = reason
            return
        try:
            self.ui_loop.call_soon_threadsafe(self.post_message, ShutdownMsg(reason))
        except RuntimeError:
            # the loop already closed, the app is gone
            log.debug("shutdown request after the event loop closed: %s", reason)

    async def action_quit(self) -> None:
        self.post_message(ShutdownMsg())

    def on_shutdown_msg(self, message: ShutdownMsg) -> None:
        if self.shutting_down:
            return
        self.shutting_down = True
        log.info("shutting down: %s", message.exit_msg or "quit")

        for worker in self.clock_workers:
            worker.stop()
        self.exit(message.exit_msg)


def run():
    setupLogging()
    app = Termclock()
    quitOnInterrupt(app)
    exit_msg = app.run()
    if exit_msg:
        print(exit_msg)
