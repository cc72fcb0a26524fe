"""
First-fit consecutive block allocator
"""
import logging
from datetime import date, datetime
from typing import Callable, List, Optional

from slot_scheduler.scheduler.errors import SlotNotFoundError
from slot_scheduler.scheduler.models import (
    Block,
    Booking,
    BookingIdGenerator,
    NotificationStatus,
    Requester,
)
from slot_scheduler.sheets.schedule_grid import Column
from utils.booking_logger import BookingLogger

logger = logging.getLogger(__name__)


class SlotAllocator:
    """
    Finds the earliest run of consecutive Empty blocks long enough for a
    request and assigns it in one batched write.
    """

    def __init__(self, grid, policy, config, id_generator: BookingIdGenerator = None,
                 clock: Callable[[], datetime] = datetime.now):
        self.grid = grid
        self.policy = policy
        self.config = config
        self.ids = id_generator or BookingIdGenerator(prefix=config.BOOKING_ID_PREFIX)
        self.clock = clock

    def _today(self) -> date:
        return self.clock().date()

    def _can_start(self, block: Block) -> bool:
        return (
            not block.is_inert
            and block.activity is not None
            and block.activity.is_empty
            and self.policy.allows(block.start)
        )

    def _extend_run(self, index: int, blocks_needed: int) -> List[Block]:
        """Collect up to ``blocks_needed`` usable, adjacent blocks from ``index``"""
        first = self.grid[index]
        run: List[Block] = []
        for position in range(index, min(index + blocks_needed, len(self.grid))):
            candidate = self.grid[position]
            if not self._can_start(candidate) or candidate.date != first.date:
                break
            if run and not candidate.follows(run[-1]):
                logger.debug(
                    f"Non-consecutive gap before row {candidate.row}: expected "
                    f"{run[-1].end:%H:%M}, got {candidate.start:%H:%M}"
                )
                break
            run.append(candidate)
        return run

    def search(self, blocks_needed: int, date_filter: Optional[date] = None) -> Optional[List[Block]]:
        """
        Scan the current snapshot for the first sufficient run.

        Without a date filter, rows dated before today are ignored. After a
        run of k blocks falls short, scanning resumes at the row that broke
        it: every run starting inside the failed one breaks at that same row.
        """
        today = self._today()
        index = 0
        while index < len(self.grid):
            block = self.grid[index]
            if block.is_inert or block.activity is None:
                index += 1
                continue
            if date_filter is not None:
                if block.date != date_filter:
                    index += 1
                    continue
            elif block.date < today:
                index += 1
                continue
            if not self._can_start(block):
                index += 1
                continue

            run = self._extend_run(index, blocks_needed)
            if len(run) >= blocks_needed:
                logger.info(f"Found suitable slot starting at row {block.row} for {blocks_needed} blocks")
                return run
            index += max(len(run), 1)
        return None

    def _assignment_row(self, requester: Requester, booking_id: str) -> list:
        submitted_at = requester.submitted_at or self.clock()
        return [
            self.config.BOOKED_ACTIVITY,
            requester.name,
            requester.class_name,
            requester.phone,
            requester.subject,
            requester.slides_link,
            requester.email,
            requester.time_requested,
            NotificationStatus.PENDING.value,
            NotificationStatus.PENDING.value,
            booking_id,
            self.grid.format_timestamp(submitted_at),
        ]

    def find_slot(self, requester: Requester, date_filter: Optional[date] = None,
                  id_suffix: str = "") -> Booking:
        """
        Find and assign the first sufficient run for ``requester``.

        Raises SlotNotFoundError when no run exists, ScheduleStoreError when
        the schedule cannot be read and WriteError when the assignment cannot
        be written. A failed re-read after the write does not undo the booking.
        """
        blocks_needed = requester.blocks_needed(self.config.SLOT_DURATION)
        scope = date_filter.isoformat() if date_filter else "all dates"
        logger.info(f"🔍 Searching for {blocks_needed} consecutive blocks for {requester.email} ({scope})")

        self.grid.refresh()
        run = self.search(blocks_needed, date_filter)
        if run is None:
            logger.info(f"Search complete. No suitable {blocks_needed}-block slot for {requester.email} ({scope})")
            raise SlotNotFoundError(blocks_needed, date_filter)

        run = run[:blocks_needed]
        booking_id = self.ids.new_id(requester.email, id_suffix)
        values = [self._assignment_row(requester, booking_id) for _ in run]
        self.grid.stage(run[0].row, Column.ACTIVITY_TYPE, values)
        self.grid.flush()

        assigned = self.grid.bookings().get(booking_id) or run
        booking = Booking.from_blocks(booking_id, assigned)
        booking.requester = requester
        BookingLogger.log_allocation_decision(booking, blocks_needed, scope)
        return booking
