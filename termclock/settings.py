import os

###### Window

TITLE = "Clock"
FRAME_TITLE = "What time is it"

###### Workers

# how often the RedrawWatcher wakes up to check whether it was told to stop
WATCH_STOP_POLL = 0.5

###### Logging

LOG_LEVEL = os.environ.get("TERMCLOCK_LOG_LEVEL", "INFO").upper()
