"""
Per-booking notification flags (Confirmation Sent / Reminder Sent)
"""
import logging
from enum import Enum

from slot_scheduler.scheduler.errors import ScheduleStoreError, WriteError
from slot_scheduler.scheduler.models import NotificationStatus
from slot_scheduler.sheets.schedule_grid import Column

logger = logging.getLogger(__name__)


class LedgerField(Enum):
    CONFIRMATION = Column.CONFIRMATION_SENT
    REMINDER = Column.REMINDER_SENT


class NotificationLedger:
    """Records notification outcomes on every row of a booking"""

    def __init__(self, grid):
        self.grid = grid

    def status(self, booking_id: str, ledger_field: LedgerField) -> NotificationStatus:
        blocks = self.grid.bookings().get(booking_id)
        if not blocks:
            return NotificationStatus.PENDING
        if ledger_field is LedgerField.CONFIRMATION:
            return blocks[0].confirmation_sent
        return blocks[0].reminder_sent

    def mark(self, booking_id: str, ledger_field: LedgerField, status: NotificationStatus) -> bool:
        """
        Set a flag on all rows of a booking and flush.

        Returns False when the booking has no rows or the write fails; a
        failed ledger write never aborts the caller.
        """
        if not booking_id:
            logger.warning("Ledger update requested without a booking id")
            return False

        blocks = self.grid.bookings().get(booking_id, [])
        if not blocks:
            logger.warning(f"No rows carry booking id {booking_id}; {ledger_field.name} not recorded")
            return False

        for block in blocks:
            self.grid.stage(block.row, ledger_field.value, [[status.value]])
        try:
            self.grid.flush()
        except (WriteError, ScheduleStoreError) as e:
            logger.error(f"Failed to record {ledger_field.name}={status.value} for {booking_id}: {e}")
            return False

        logger.info(f"📝 {ledger_field.name} for {booking_id} set to {status.value}")
        return True

    def record_delivery(self, booking_id: str, ledger_field: LedgerField, delivered: bool) -> bool:
        status = NotificationStatus.SENT if delivered else NotificationStatus.ERROR
        return self.mark(booking_id, ledger_field, status)
