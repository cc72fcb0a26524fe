"""
Exceptions raised by the slot allocation and reconciliation engine.
Raised in the scheduler modules and caught by SlotScheduler / the API layer.
"""
from typing import List


class SlotSchedulerError(Exception):
    """Base exception for all scheduler errors."""
    pass


class ValidationError(SlotSchedulerError):
    """Raised when a submission is missing required requester data."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Invalid submission")


class SlotParseError(SlotSchedulerError):
    """Raised when a time slot token cannot be parsed."""

    INVALID_FORMAT = "invalid_format"
    INVALID_DIGITS = "invalid_digits"
    NON_POSITIVE_DURATION = "non_positive_duration"

    def __init__(self, token, reason: str):
        self.token = token
        self.reason = reason
        super().__init__(f"Cannot parse time slot {token!r}: {reason}")


class SlotNotFoundError(SlotSchedulerError):
    """Raised when no run of consecutive free blocks is long enough."""

    def __init__(self, blocks_needed: int, date_filter=None):
        self.blocks_needed = blocks_needed
        self.date_filter = date_filter
        scope = f"on {date_filter.isoformat()}" if date_filter else "in the schedule"
        super().__init__(f"No {blocks_needed} consecutive free blocks {scope}")


class WriteError(SlotSchedulerError):
    """Raised when a batched write to the schedule store fails."""
    pass


class ScheduleStoreError(SlotSchedulerError):
    """Raised when the schedule store cannot be read."""
    pass


class MissingCriticalDataError(SlotSchedulerError):
    """Raised when a displaced booking has no email or name to notify."""

    def __init__(self, booking_id: str):
        self.booking_id = booking_id
        super().__init__(f"Booking {booking_id} is missing the requester's email or name")
