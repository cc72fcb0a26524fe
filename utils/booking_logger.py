"""
Specialized logging for allocation decisions and reconciliation runs
"""
import logging
from collections import Counter, OrderedDict
from typing import Dict

logger = logging.getLogger(__name__)


class BookingLogger:
    """Structured log summaries for the scheduler"""

    @staticmethod
    def log_allocation_decision(booking, blocks_needed: int, scope: str):
        """Log where a booking landed"""
        logger.info(f"🎯 ALLOCATION DECISION:")
        logger.info(f"   🆔 Booking: {booking.booking_id}")
        logger.info(f"   📅 Date: {booking.date} ({booking.date:%A})")
        logger.info(f"   ⏰ Time: {booking.start:%H:%M} to {booking.end:%H:%M}")
        logger.info(f"   🧱 Blocks: {blocks_needed} (rows {booking.rows[0]}-{booking.rows[-1]})")
        logger.info(f"   🔎 Search scope: {scope}")

    @staticmethod
    def log_grid_summary(grid) -> Dict[str, Dict[str, int]]:
        """Log Empty/Booked/Other counts per date and return them"""
        per_date: Dict[str, Counter] = OrderedDict()
        inert = 0
        for block in grid:
            if block.is_inert:
                inert += 1
                continue
            kind = block.activity.kind.value if block.activity else "missing"
            per_date.setdefault(block.date.isoformat(), Counter())[kind] += 1

        logger.info(f"📊 GRID SUMMARY: {len(grid)} rows, {len(per_date)} dates, {inert} inert")
        for day, counts in per_date.items():
            logger.info(
                f"   {day}: {counts.get('empty', 0)} empty, "
                f"{counts.get('booked', 0)} booked, {counts.get('other', 0)} other"
            )
        return {day: dict(counts) for day, counts in per_date.items()}

    @staticmethod
    def log_reconciliation_report(report):
        """Log the outcome of a daily reconciliation run"""
        logger.info(f"📋 DAILY CHECK SUMMARY")
        logger.info(f"   🔀 Displaced bookings: {len(report.displaced)}")
        for old_id, new_id in report.rescheduled.items():
            logger.info(f"      ✅ {old_id} -> {new_id}")
        for booking_id in report.cancelled:
            logger.info(f"      ❌ {booking_id} cancelled (no replacement slot)")
        for booking_id in report.missing_data:
            logger.info(f"      ❓ {booking_id} missing requester email/name")
        logger.info(f"   🔔 Reminders sent: {len(report.reminders_sent)}, failed: {len(report.reminders_failed)}")
        if report.errors:
            for error in report.errors:
                logger.error(f"   ❌ {error}")
        logger.info("=" * 60)
