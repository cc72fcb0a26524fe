"""
Slot Scheduler - Main orchestrator for form submissions and the daily check
"""
import logging
from datetime import datetime
from typing import Any, Callable, Dict

from config.settings import Config
from slot_scheduler.notifications.mailer import GmailNotifier
from slot_scheduler.notifications.messages import MessageBuilder
from slot_scheduler.scheduler.allocator import SlotAllocator
from slot_scheduler.scheduler.errors import (
    ScheduleStoreError,
    SlotNotFoundError,
    ValidationError,
    WriteError,
)
from slot_scheduler.scheduler.ledger import LedgerField, NotificationLedger
from slot_scheduler.scheduler.models import BookingIdGenerator
from slot_scheduler.scheduler.reconciler import DailyReconciler, ReconciliationReport
from slot_scheduler.scheduler.submission import build_requester
from slot_scheduler.scheduler.time_window import TimeWindowPolicy
from slot_scheduler.sheets.schedule_grid import ScheduleGrid
from slot_scheduler.sheets.sheet_store import GoogleSheetStore
from utils.booking_logger import BookingLogger

logger = logging.getLogger(__name__)

SCHEDULED = "scheduled"
NOT_FOUND = "not_found"
INVALID = "invalid"
ERROR = "error"


class SlotScheduler:
    """
    Main coordinator: wires the grid, allocator, ledger and notifier together
    and runs one operation to completion per call.
    """

    def __init__(self, config: Config = None, store=None, notifier=None,
                 clock: Callable[[], datetime] = datetime.now,
                 id_generator: BookingIdGenerator = None):
        self.config = config or Config()
        self.clock = clock

        if store is None:
            store = GoogleSheetStore(self.config)
            logger.info("✅ Using Google Sheets schedule store")
        if notifier is None:
            notifier = GmailNotifier(self.config)
            logger.info("✅ Using Gmail notifier")

        self.store = store
        self.notifier = notifier
        self.policy = TimeWindowPolicy(self.config)
        self.grid = ScheduleGrid(store, self.config)
        self.ledger = NotificationLedger(self.grid)
        self.allocator = SlotAllocator(
            self.grid, self.policy, self.config,
            id_generator=id_generator, clock=clock,
        )
        self.reconciler = DailyReconciler(
            self.grid, self.allocator, self.ledger, self.notifier,
            self.policy, self.config, clock=clock,
        )
        self.messages = MessageBuilder(self.config)

        logger.info("SlotScheduler initialized")

    def process_submission(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Main entry point for a form submission.

        Returns a result dict whose ``status`` is one of scheduled, not_found,
        invalid or error. Requesters hear about scheduled and not_found
        outcomes; the admin hears about everything that is not scheduled.
        """
        start_time = self.clock()

        try:
            requester = build_requester(payload, self.config, clock=self.clock)
        except ValidationError as e:
            logger.error(f"❌ Invalid submission: {e}")
            self._alert_admin("Error: Invalid Form Submission", f"Submission rejected: {e}. Payload: {payload}")
            return {"status": INVALID, "errors": e.errors}

        logger.info(f"Processing submission from {requester.email} ({requester.time_requested} minutes)")

        try:
            booking = self.allocator.find_slot(requester)
        except SlotNotFoundError as e:
            logger.warning(f"⚠️ {e} for {requester.email}")
            subject, body = self.messages.not_found(requester)
            self.notifier.send([requester.email, self.config.ADMIN_EMAIL], subject, body)
            return {"status": NOT_FOUND, "requester": requester.to_dict(), "errors": [str(e)]}
        except (WriteError, ScheduleStoreError) as e:
            logger.error(f"❌ Could not schedule {requester.email}: {e}")
            self._alert_admin(
                "Error: Scheduling Write Failed",
                f"Could not schedule {requester.name} ({requester.email}): {e}",
            )
            return {"status": ERROR, "requester": requester.to_dict(), "errors": [str(e)]}

        subject, body = self.messages.confirmation(requester, booking)
        delivered = self.notifier.send(requester.email, subject, body)
        recorded = self.ledger.record_delivery(booking.booking_id, LedgerField.CONFIRMATION, delivered)

        processing_time = (self.clock() - start_time).total_seconds()
        logger.info(f"Submission processed in {processing_time:.2f} seconds")

        return {
            "status": SCHEDULED,
            "booking": booking.to_dict(),
            "requester": requester.to_dict(),
            "confirmation_sent": delivered,
            "ledger_updated": recorded,
            "processing_time": f"{processing_time:.2f}s",
        }

    def run_daily_check(self) -> ReconciliationReport:
        """Run one reconciliation cycle; store failures are reported to the admin"""
        try:
            return self.reconciler.run()
        except ScheduleStoreError as e:
            logger.error(f"❌ Daily check aborted: {e}")
            self._alert_admin("Error: Daily Check Failed", f"The schedule could not be read: {e}")
            report = ReconciliationReport()
            report.errors.append(str(e))
            return report

    def get_status(self) -> Dict[str, Any]:
        """Per-date block counts and the number of live bookings"""
        self.grid.refresh()
        return {
            "dates": BookingLogger.log_grid_summary(self.grid),
            "bookings": len(self.grid.bookings()),
            "rows": len(self.grid),
        }

    def _alert_admin(self, title: str, details: str) -> bool:
        subject, body = self.messages.admin_alert(title, details)
        return self.notifier.send(self.config.ADMIN_EMAIL, subject, body)
