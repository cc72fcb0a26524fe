"""
Parsing of the combined "HHMM-HHMM" time slot column
"""
import logging
import re
from datetime import date, datetime, time, timedelta
from typing import Tuple

from slot_scheduler.scheduler.errors import SlotParseError

logger = logging.getLogger(__name__)

TIME_SLOT_PATTERN = re.compile(r'^(\d{2})(\d{2})-(\d{2})(\d{2})$')


def parse_time_slot(token, anchor_date: date) -> Tuple[datetime, datetime]:
    """
    Parse a time slot token into start/end datetimes on ``anchor_date``.

    An end that is earlier in the day than the start is an overnight slot and
    lands on the following date; an end equal to the start is rejected.
    """
    if not isinstance(token, str):
        raise SlotParseError(token, SlotParseError.INVALID_FORMAT)

    match = TIME_SLOT_PATTERN.match(token.strip())
    if not match:
        raise SlotParseError(token, SlotParseError.INVALID_FORMAT)

    start_hour, start_minute, end_hour, end_minute = (int(part) for part in match.groups())
    if start_hour > 23 or end_hour > 23 or start_minute > 59 or end_minute > 59:
        raise SlotParseError(token, SlotParseError.INVALID_DIGITS)

    start = datetime.combine(anchor_date, time(start_hour, start_minute))
    end = datetime.combine(anchor_date, time(end_hour, end_minute))

    if end <= start:
        if end_hour * 60 + end_minute < start_hour * 60 + start_minute:
            end += timedelta(days=1)
            logger.debug(f"Overnight slot {token!r}, end moved to {end.date()}")
        else:
            raise SlotParseError(token, SlotParseError.NON_POSITIVE_DURATION)

    return start, end


def format_time_slot(start: time, end: time) -> str:
    """Format a start/end pair back into a time slot token"""
    return f"{start.strftime('%H%M')}-{end.strftime('%H%M')}"
