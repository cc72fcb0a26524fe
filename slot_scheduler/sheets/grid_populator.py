"""
Bulk creation of Empty schedule rows for upcoming assembly days
"""
import logging
from datetime import date, datetime, timedelta
from typing import Any, List

from slot_scheduler.scheduler.slot_parser import format_time_slot
from slot_scheduler.sheets.cells import coerce_date
from slot_scheduler.sheets.schedule_grid import FIRST_DATA_ROW, HEADER, Column

logger = logging.getLogger(__name__)


def rows_for_day(day: date, policy, config) -> List[List[Any]]:
    """One Empty row per quantum whose start lies inside the day's window"""
    window = policy.window_for(day)
    if window is None:
        return []

    step = timedelta(minutes=config.SLOT_DURATION)
    current = datetime.combine(day, window[0])
    window_end = datetime.combine(day, window[1])
    rows = []
    while current < window_end:
        row = [""] * len(Column)
        row[Column.DATE - 1] = day.strftime(config.SHEET_DATE_FORMAT)
        row[Column.TIME_SLOT - 1] = format_time_slot(current, current + step)
        row[Column.DURATION - 1] = config.SLOT_DURATION
        row[Column.ACTIVITY_TYPE - 1] = config.EMPTY_ACTIVITY
        rows.append(row)
        current += step
    return rows


def populate_schedule(store, policy, config, start: date, days: int) -> int:
    """
    Append Empty rows for each windowed day in [start, start + days) that has
    no rows yet. Writes the header first when the sheet is empty.

    Returns the number of data rows appended.
    """
    existing_rows = store.read_rows()
    existing_dates = {
        coerce_date(row[Column.DATE - 1])
        for index, row in enumerate(existing_rows)
        if index + 1 >= FIRST_DATA_ROW and row
    }

    new_rows: List[List[Any]] = []
    if not existing_rows:
        new_rows.append(list(HEADER))

    appended = 0
    for offset in range(days):
        day = start + timedelta(days=offset)
        if day in existing_dates:
            logger.debug(f"Skipping {day}: already in the schedule")
            continue
        day_rows = rows_for_day(day, policy, config)
        if day_rows:
            logger.info(f"➕ Adding {len(day_rows)} Empty rows for {day} ({day:%A})")
        new_rows.extend(day_rows)
        appended += len(day_rows)

    if new_rows:
        store.append_rows(new_rows)
    logger.info(f"✅ Populated {appended} rows over {days} days from {start}")
    return appended
