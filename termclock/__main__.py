from .termclock import run

run()
