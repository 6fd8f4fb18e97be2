from .termclock import Termclock, run

__all__ = ["Termclock", "run"]
