import logging
import signal
from typing import Union

from textual.logging import TextualHandler
from textual.message import Message

from .settings import LOG_LEVEL


class ShutdownMsg(Message):
    """shutdown message"""

    def __init__(self, exit_msg: Union[None, str] = None) -> None:
        self.exit_msg = exit_msg
        super().__init__()


def setupLogging(level: str = LOG_LEVEL) -> None:
    """
    send log records to the textual devtools console,
    writing them to the terminal would scribble over the screen
    """
    logging.basicConfig(level=level, handlers=[TextualHandler()], force=True)


def quitOnInterrupt(app) -> None:
    """
    install a SIGINT handler that asks app to shut down.

    The handler may fire before the event loop runs, it never touches the
    UI directly and only hands the request over to app.requestShutdown()
    """

    def handler(signum, frame) -> None:
        app.requestShutdown("Interrupted")

    signal.signal(signal.SIGINT, handler)
