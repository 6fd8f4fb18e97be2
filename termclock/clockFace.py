from math import floor
from typing import Tuple

from rich.cells import cell_len
from rich.text import Text
from textual.geometry import Region, Size
from textual.message import Message
from textual.widget import Widget

from .timecell import TimeCell, showDisplayTime


def timeText(cell: TimeCell) -> str:
    """text to draw for the current cell content, empty before the first tick"""
    t = cell.readSnapshot()
    return "" if t is None else showDisplayTime(t)


def centerOffset(surface: Size, box: Region) -> Tuple[float, float]:
    """translation that puts the center of box on the center of surface"""
    return (
        surface.width / 2 - (box.x + box.width / 2),
        surface.height / 2 - (box.y + box.height / 2),
    )


class ClockFace(Widget):
    """
    drawing surface showing the time stored in a TimeCell.
    repaints are requested through the Redraw message, which may be posted from any thread
    """

    class Redraw(Message, bubble=False):
        """the time changed, paint again"""

    def __init__(self, cell: TimeCell, **kwargs) -> None:
        super().__init__(**kwargs)
        self.cell = cell

    def requestRedraw(self) -> None:
        self.post_message(self.Redraw())

    def on_clock_face_redraw(self, message: Redraw) -> None:
        self.refresh()

    def render(self) -> Text:
        text = timeText(self.cell)
        x, y = centerOffset(self.size, Region(0, 0, cell_len(text), 1))
        col, row = max(0, floor(x)), max(0, floor(y))
        return Text("\n" * row + " " * col + text, no_wrap=True, end="")
