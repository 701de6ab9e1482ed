"""Background watcher that signals a rotation when the local date changes."""

import logging
import threading
from datetime import datetime

logger = logging.getLogger(__name__)

FINE_INTERVAL = 1.0
COARSE_INTERVAL = 60.0


def near_end_of_hour(now: datetime) -> bool:
    """True during the last minute of any hour, where midnight may be close."""
    return now.minute >= 59


class ClockWatcher:
    """Polls the wall clock and sets *rotate_event* on calendar-day rollover.

    Also mirrors the "near end of day" condition into *near_end_event* so the
    relay can switch to line-granular reads before the date turns over.
    """

    def __init__(
        self,
        rotate_event: threading.Event,
        near_end_event: threading.Event,
        time_func=None,
        stop_event: threading.Event | None = None,
        fine_interval: float = FINE_INTERVAL,
        coarse_interval: float = COARSE_INTERVAL,
    ):
        self._rotate = rotate_event
        self._near_end = near_end_event
        self._time_func = time_func or datetime.now
        self._stop = stop_event or threading.Event()
        self._fine_interval = fine_interval
        self._coarse_interval = coarse_interval
        self._last_date = self._time_func().date()

    @property
    def last_date(self):
        return self._last_date

    def check(self) -> float:
        """Run one poll. Returns the number of seconds to wait before the next."""
        now = self._time_func()
        today = now.date()
        if today != self._last_date:
            logger.info("Date changed %s -> %s, rotation due", self._last_date, today)
            self._last_date = today
            self._rotate.set()

        if near_end_of_hour(now):
            self._near_end.set()
            return self._fine_interval
        self._near_end.clear()
        return self._coarse_interval

    def run(self):
        """Poll until the stop event is set. Blocks."""
        try:
            interval = self.check()
            while not self._stop.wait(interval):
                interval = self.check()
        except Exception:
            logger.exception("Clock watcher stopped; no further date-based rotation")

    def start(self) -> threading.Thread:
        thread = threading.Thread(target=self.run, name="clock-watcher", daemon=True)
        thread.start()
        return thread
