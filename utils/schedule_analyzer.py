"""
Schedule Analyzer - Utility to summarize the assembly schedule
Shows bookings, other activities and free capacity per date for operators
"""
import logging
from datetime import date, timedelta
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


class ScheduleAnalyzer:
    """Read-only analysis of the schedule grid"""

    def __init__(self, grid, policy, config):
        self.grid = grid
        self.policy = policy
        self.config = config

    def analyze(self, start: date, days_ahead: int = 7) -> Dict[str, Any]:
        """
        Break down each date in [start, start + days_ahead] into bookings,
        other activities and the longest run of free blocks.
        """
        self.grid.refresh()
        end = start + timedelta(days=days_ahead)

        per_date: Dict[date, List] = {}
        for block in self.grid.scan():
            if start <= block.date <= end:
                per_date.setdefault(block.date, []).append(block)

        dates = []
        for day in sorted(per_date):
            blocks = per_date[day]
            bookings = []
            seen = set()
            for block in blocks:
                if block.booking_id and block.booking_id not in seen:
                    seen.add(block.booking_id)
                    bookings.append({
                        "booking_id": block.booking_id,
                        "name": block.requester.name if block.requester else "",
                        "start": block.start.strftime("%H:%M"),
                    })
            others = sorted({
                block.activity.label for block in blocks
                if block.activity is not None and not block.activity.is_empty and not block.activity.is_booked
            })
            free_blocks = sum(1 for block in blocks if block.is_bookable and self.policy.allows(block.start))
            dates.append({
                "date": day.isoformat(),
                "day_of_week": day.strftime("%A"),
                "rows": len(blocks),
                "free_blocks": free_blocks,
                "longest_free_minutes": self._longest_free_run(blocks) * self.config.SLOT_DURATION,
                "bookings": bookings,
                "other_activities": others,
            })

        return {
            "analysis_period": {"start": start.isoformat(), "end": end.isoformat(), "days": days_ahead},
            "dates": dates,
            "total_bookings": sum(len(entry["bookings"]) for entry in dates),
        }

    def _longest_free_run(self, blocks) -> int:
        longest = current = 0
        previous = None
        for block in blocks:
            usable = block.is_bookable and self.policy.allows(block.start)
            if usable and previous is not None and current and block.follows(previous):
                current += 1
            elif usable:
                current = 1
            else:
                current = 0
            longest = max(longest, current)
            previous = block
        return longest

    def display(self, analysis: Dict[str, Any]):
        """Print an analysis to stdout"""
        period = analysis["analysis_period"]
        print(f"\n🔍 SCHEDULE ANALYSIS: {period['start']} to {period['end']}")
        print("=" * 60)
        if not analysis["dates"]:
            print("📭 No schedule rows in this period")
            return
        for entry in analysis["dates"]:
            print(f"\n📅 {entry['day_of_week']}, {entry['date']}: {entry['rows']} rows")
            print(f"   🟢 Free blocks: {entry['free_blocks']} (longest run {entry['longest_free_minutes']} min)")
            for booking in entry["bookings"]:
                print(f"   🎤 {booking['start']} {booking['name']} [{booking['booking_id']}]")
            for label in entry["other_activities"]:
                print(f"   📌 {label}")
        print(f"\n📊 Total bookings: {analysis['total_bookings']}")
