"""
Daily reconciliation: displaced booking recovery and day-before reminders
"""
import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

from slot_scheduler.notifications.messages import MessageBuilder
from slot_scheduler.scheduler.errors import (
    MissingCriticalDataError,
    ScheduleStoreError,
    SlotNotFoundError,
    SlotSchedulerError,
    WriteError,
)
from slot_scheduler.scheduler.ledger import LedgerField
from slot_scheduler.scheduler.models import Booking, NotificationStatus, Requester
from slot_scheduler.sheets.schedule_grid import Column
from utils.booking_logger import BookingLogger

logger = logging.getLogger(__name__)

# Columns Student Name through Form Timestamp are cleared on a displaced row
CLEARED_COLUMNS = Column.FORM_TIMESTAMP - Column.ACTIVITY_TYPE


@dataclass
class DisplacedBooking:
    booking_id: str
    requester: Optional[Requester]
    original_date: Optional[date]
    original_start: Optional[datetime]
    rows: List[int]


@dataclass
class ReconciliationReport:
    displaced: List[str] = field(default_factory=list)
    rescheduled: Dict[str, str] = field(default_factory=OrderedDict)
    cancelled: List[str] = field(default_factory=list)
    missing_data: List[str] = field(default_factory=list)
    reminders_sent: List[str] = field(default_factory=list)
    reminders_failed: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    writes: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "displaced": list(self.displaced),
            "rescheduled": dict(self.rescheduled),
            "cancelled": list(self.cancelled),
            "missing_data": list(self.missing_data),
            "reminders_sent": list(self.reminders_sent),
            "reminders_failed": list(self.reminders_failed),
            "errors": list(self.errors),
            "writes": self.writes,
        }


class DailyReconciler:
    """
    One reconciliation cycle over the schedule.

    A booking is displaced when any of its rows still carries the booking id
    but no longer carries the Booked label (an administrator overwrote the
    activity). Displaced bookings are cleared, rebooked on the same date if
    possible and anywhere otherwise, and the requester is told either way.
    Reminders run last so rebooked slots are covered. A store failure while
    handling one booking or one reminder is reported and the cycle moves on.
    """

    def __init__(self, grid, allocator, ledger, notifier, policy, config,
                 clock: Callable[[], datetime] = datetime.now):
        self.grid = grid
        self.allocator = allocator
        self.ledger = ledger
        self.notifier = notifier
        self.policy = policy
        self.config = config
        self.clock = clock
        self.messages = MessageBuilder(config)

    def run(self) -> ReconciliationReport:
        report = ReconciliationReport()
        writes_before = self.grid.write_count
        logger.info("🔄 Starting daily schedule check")

        self.grid.refresh()
        displaced = self.identify_displaced()
        report.displaced = [item.booking_id for item in displaced]

        if displaced:
            if self.clear(displaced):
                for item in displaced:
                    self._reassign(item, report)
            else:
                report.errors.append("Failed to clear displaced bookings; rebooking skipped")
                self._alert_admin(
                    "Error: Clearing Displaced Bookings Failed",
                    f"Could not clear displaced bookings {', '.join(report.displaced)}. "
                    f"Rebooking was skipped for this run.",
                )

        self.send_reminders(report)

        report.writes = self.grid.write_count - writes_before
        BookingLogger.log_reconciliation_report(report)
        return report

    # Identify

    def identify_displaced(self) -> List[DisplacedBooking]:
        """Collect each displaced booking id once, in sheet order"""
        index = self.grid.bookings()
        found: Dict[str, DisplacedBooking] = OrderedDict()
        for block in self.grid.scan():
            if not block.booking_id or block.booking_id in found:
                continue
            if block.activity is not None and block.activity.is_booked:
                continue
            blocks = index.get(block.booking_id, [block])
            booking = Booking.from_blocks(block.booking_id, blocks)
            label = block.activity.label if block.activity else "(blank)"
            logger.info(
                f"🔀 Displaced booking {block.booking_id} at row {block.row}: activity is now '{label}'"
            )
            found[block.booking_id] = DisplacedBooking(
                booking_id=block.booking_id,
                requester=block.requester,
                original_date=booking.date,
                original_start=booking.start,
                rows=booking.rows,
            )
        return list(found.values())

    # Clear

    def clear(self, displaced: List[DisplacedBooking]) -> bool:
        """Free every row of the displaced bookings in one batched write"""
        for item in displaced:
            for row in item.rows:
                block = self.grid.block_at_row(row)
                if block is None:
                    continue
                if block.activity is not None and block.activity.is_booked:
                    label = self.config.EMPTY_ACTIVITY
                else:
                    label = block.activity.label if block.activity else ""
                self.grid.stage(row, Column.ACTIVITY_TYPE, [[label] + [""] * CLEARED_COLUMNS])
        try:
            self.grid.flush()
        except WriteError as e:
            logger.error(f"❌ Failed to clear displaced bookings: {e}")
            return False
        logger.info(f"🧹 Cleared {len(displaced)} displaced bookings")
        return True

    # Reassign

    def _require_contact(self, item: DisplacedBooking) -> Requester:
        if item.requester is None or not item.requester.has_contact:
            raise MissingCriticalDataError(item.booking_id)
        return item.requester

    def _reassign(self, item: DisplacedBooking, report: ReconciliationReport):
        try:
            requester = self._require_contact(item)
        except MissingCriticalDataError as e:
            logger.warning(f"❓ {e}")
            report.missing_data.append(item.booking_id)
            self._alert_admin(
                "Alert: Missing Data for Displaced Booking",
                f"Booking {item.booking_id} was displaced but is missing the student's "
                f"email or name, so it was cleared without notifying the student.",
            )
            return

        try:
            booking = self.rebook(item)
        except (WriteError, ScheduleStoreError) as e:
            # Rows are already cleared; the original slot cannot be restored
            logger.error(f"❌ Rebooking {item.booking_id} failed: {e}")
            report.errors.append(f"{item.booking_id}: {e}")
            report.cancelled.append(item.booking_id)
            subject, body = self.messages.cancellation(requester, item.original_date, item.original_start)
            self.notifier.send([requester.email, self.config.ADMIN_EMAIL], subject, body)
            self._alert_admin(
                "Error: Rebooking Failed",
                f"Booking {item.booking_id} ({requester.email}) was cleared but could not be "
                f"rebooked: {e}. The student was sent a cancellation notice.",
            )
            return

        if booking is None:
            report.cancelled.append(item.booking_id)
            subject, body = self.messages.cancellation(requester, item.original_date, item.original_start)
            self.notifier.send([requester.email, self.config.ADMIN_EMAIL], subject, body)
            return

        report.rescheduled[item.booking_id] = booking.booking_id
        subject, body = self.messages.reschedule(requester, item.original_date, item.original_start, booking)
        delivered = self.notifier.send(requester.email, subject, body, bcc=self.config.ADMIN_EMAIL)
        self.ledger.record_delivery(booking.booking_id, LedgerField.CONFIRMATION, delivered)

    def rebook(self, item: DisplacedBooking) -> Optional[Booking]:
        """Try the original date first, then the whole grid"""
        suffix = self.config.REBOOK_ID_SUFFIX
        today = self.clock().date()

        if item.original_date is not None and item.original_date >= today:
            try:
                booking = self.allocator.find_slot(item.requester, item.original_date, suffix)
                logger.info(f"✅ Rebooked {item.booking_id} on its original date as {booking.booking_id}")
                return booking
            except SlotNotFoundError:
                logger.info(f"No same-day slot for {item.booking_id}, searching all dates")

        try:
            booking = self.allocator.find_slot(item.requester, None, suffix)
        except SlotNotFoundError:
            logger.warning(f"❌ No replacement slot for {item.booking_id}")
            return None
        logger.info(f"✅ Rebooked {item.booking_id} as {booking.booking_id} on {booking.date}")
        return booking

    # Reminders

    def send_reminders(self, report: ReconciliationReport):
        """Remind each booking whose first block is tomorrow, once"""
        tomorrow = self.clock().date() + timedelta(days=1)
        reporting_time = self.policy.reporting_time(tomorrow)
        if reporting_time is None:
            logger.info(f"No assembly window on {tomorrow:%A}; no reminders to send")
            return

        try:
            self.grid.refresh()
        except ScheduleStoreError as e:
            logger.error(f"❌ Could not read the schedule for reminders: {e}")
            report.errors.append(f"reminders: {e}")
            return

        for booking_id, blocks in self.grid.bookings().items():
            try:
                self._remind(booking_id, blocks, tomorrow, reporting_time, report)
            except SlotSchedulerError as e:
                logger.error(f"❌ Reminder for {booking_id} failed: {e}")
                report.reminders_failed.append(booking_id)
                report.errors.append(f"{booking_id}: {e}")

    def _remind(self, booking_id: str, blocks, tomorrow: date, reporting_time: datetime,
                report: ReconciliationReport):
        booking = Booking.from_blocks(booking_id, blocks)
        first = booking.blocks[0]
        if booking.date != tomorrow or first.activity is None or not first.activity.is_booked:
            return
        if booking.reminder_sent is not NotificationStatus.PENDING:
            return

        requester = booking.requester
        if requester is None or not requester.has_contact:
            logger.warning(f"Booking {booking_id} is missing email or name; reminder marked Error")
            self.ledger.mark(booking_id, LedgerField.REMINDER, NotificationStatus.ERROR)
            report.reminders_failed.append(booking_id)
            return

        subject, body = self.messages.reminder(requester, booking, reporting_time)
        delivered = self.notifier.send(requester.email, subject, body)
        self.ledger.record_delivery(booking_id, LedgerField.REMINDER, delivered)
        if delivered:
            report.reminders_sent.append(booking_id)
        else:
            report.reminders_failed.append(booking_id)

    def _alert_admin(self, title: str, details: str) -> bool:
        subject, body = self.messages.admin_alert(title, details)
        return self.notifier.send(self.config.ADMIN_EMAIL, subject, body)
