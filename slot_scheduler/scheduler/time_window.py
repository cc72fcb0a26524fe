"""
Assembly time windows per weekday
"""
from datetime import date, datetime, time, timedelta
from typing import Dict, Optional, Tuple

MONDAY = 0
FRIDAY = 4


def _parse_clock(value: str) -> time:
    hour, minute = value.split(":")
    return time(int(hour), int(minute))


class TimeWindowPolicy:
    """
    Answers whether a block may start at a given weekday and clock time.

    Monday and Tuesday-Friday each have one window, start inclusive and end
    exclusive. Weekends have none. Only a block's start is checked, so the
    last block of a run may end after the window closes.
    """

    def __init__(self, config):
        self.config = config
        monday = tuple(_parse_clock(value) for value in config.MONDAY_WINDOW)
        tue_fri = tuple(_parse_clock(value) for value in config.TUE_FRI_WINDOW)
        self._windows: Dict[int, Tuple[time, time]] = {MONDAY: monday}
        for weekday in range(MONDAY + 1, FRIDAY + 1):
            self._windows[weekday] = tue_fri

    def window_for(self, day: date) -> Optional[Tuple[time, time]]:
        """Get the (start, end) window for a date, None on weekends"""
        return self._windows.get(day.weekday())

    def is_within_window(self, weekday: int, clock_time: time) -> bool:
        window = self._windows.get(weekday)
        if window is None:
            return False
        window_start, window_end = window
        current = (clock_time.hour, clock_time.minute)
        return (window_start.hour, window_start.minute) <= current < (window_end.hour, window_end.minute)

    def allows(self, block_start: datetime) -> bool:
        """Check a parsed block start against its own weekday's window"""
        return self.is_within_window(block_start.weekday(), block_start.time())

    def reporting_time(self, day: date) -> Optional[datetime]:
        """Time the requester should report on ``day``, None on weekends"""
        window = self.window_for(day)
        if window is None:
            return None
        window_start = datetime.combine(day, window[0])
        return window_start - timedelta(minutes=self.config.REPORTING_LEAD_MINUTES)
