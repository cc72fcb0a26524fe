"""
Snapshot view of the schedule sheet with batched writes
"""
import logging
from collections import OrderedDict
from datetime import datetime
from enum import IntEnum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from slot_scheduler.scheduler.errors import ScheduleStoreError, SlotParseError, WriteError
from slot_scheduler.scheduler.models import (
    Activity,
    Block,
    NotificationStatus,
    Requester,
)
from slot_scheduler.scheduler.slot_parser import parse_time_slot
from slot_scheduler.sheets.cells import cell_text, coerce_date, coerce_datetime, coerce_int

logger = logging.getLogger(__name__)


class Column(IntEnum):
    """1-based schedule columns"""

    DATE = 1
    TIME_SLOT = 2
    DURATION = 3
    ACTIVITY_TYPE = 4
    STUDENT_NAME = 5
    CLASS = 6
    PHONE = 7
    SUBJECT = 8
    SLIDES = 9
    EMAIL = 10
    TIME_REQUESTED = 11
    CONFIRMATION_SENT = 12
    REMINDER_SENT = 13
    ASSIGNED_SLOT_ID = 14
    FORM_TIMESTAMP = 15


HEADER = [
    "Date", "Time Slot", "Duration", "Activity Type", "Student Name", "Class",
    "Phone", "Subject", "Slides Link", "Email", "Time Requested",
    "Confirmation Sent", "Reminder Sent", "Assigned Slot ID", "Form Timestamp",
]

FIRST_DATA_ROW = 2


class ScheduleGrid:
    """
    Ordered blocks parsed from one read of the schedule store.

    Every logical operation starts with ``refresh()``. Writes are queued with
    ``stage()`` and sent together by ``flush()``, which re-reads the store so
    later reads in the same operation see them. When that re-read fails the
    written values are applied to the current snapshot instead.
    """

    def __init__(self, store, config):
        self.store = store
        self.config = config
        self._values: List[List[Any]] = []
        self._blocks: List[Block] = []
        self._pending: List[Tuple[int, int, List[List[Any]]]] = []
        self.write_count = 0

    # Reads

    def refresh(self) -> "ScheduleGrid":
        self._load(self.store.read_rows())
        return self

    def _load(self, values: List[List[Any]]):
        self._values = values
        self._blocks = [
            self._parse_row(index + 1, row)
            for index, row in enumerate(values)
            if index + 1 >= FIRST_DATA_ROW
        ]
        inert = sum(1 for block in self._blocks if block.is_inert)
        logger.debug(f"Grid snapshot: {len(self._blocks)} rows ({inert} inert)")

    def _parse_row(self, row_number: int, cells: List[Any]) -> Block:
        def cell(column: Column):
            index = column - 1
            return cells[index] if index < len(cells) else ""

        row_date = coerce_date(cell(Column.DATE))
        token = cell(Column.TIME_SLOT)
        start = end = None
        if row_date is not None:
            try:
                start, end = parse_time_slot(token, row_date)
            except SlotParseError as e:
                if cell_text(token):
                    logger.debug(f"Row {row_number} is inert: {e}")

        booking_id = cell_text(cell(Column.ASSIGNED_SLOT_ID))
        requester = None
        if booking_id:
            requester = Requester(
                email=cell_text(cell(Column.EMAIL)),
                name=cell_text(cell(Column.STUDENT_NAME)),
                class_name=cell_text(cell(Column.CLASS)),
                phone=cell_text(cell(Column.PHONE)),
                subject=cell_text(cell(Column.SUBJECT)),
                slides_link=cell_text(cell(Column.SLIDES)),
                time_requested=coerce_int(cell(Column.TIME_REQUESTED), self.config.SLOT_DURATION),
                submitted_at=coerce_datetime(cell(Column.FORM_TIMESTAMP)),
            )

        return Block(
            row=row_number,
            date=row_date,
            token=token,
            start=start,
            end=end,
            activity=Activity.from_cell(cell(Column.ACTIVITY_TYPE), self.config),
            booking_id=booking_id,
            requester=requester,
            confirmation_sent=NotificationStatus.from_cell(cell(Column.CONFIRMATION_SENT)),
            reminder_sent=NotificationStatus.from_cell(cell(Column.REMINDER_SENT)),
        )

    def __len__(self) -> int:
        return len(self._blocks)

    def __getitem__(self, index: int) -> Block:
        return self._blocks[index]

    def __iter__(self) -> Iterator[Block]:
        return iter(self._blocks)

    def block_at_row(self, row: int) -> Optional[Block]:
        index = row - FIRST_DATA_ROW
        if 0 <= index < len(self._blocks):
            return self._blocks[index]
        return None

    def scan(self) -> Iterator[Block]:
        """Iterate over blocks that have a usable date and time slot"""
        return (block for block in self._blocks if not block.is_inert)

    def bookings(self) -> Dict[str, List[Block]]:
        """Index of booking id -> blocks carrying it, in sheet order"""
        index: Dict[str, List[Block]] = OrderedDict()
        for block in self.scan():
            if block.booking_id:
                index.setdefault(block.booking_id, []).append(block)
        return index

    # Writes

    def stage(self, row: int, column: Column, values: List[List[Any]]):
        """Queue values for contiguous rows starting at (row, column)"""
        self._pending.append((row, int(column), values))

    @property
    def has_pending(self) -> bool:
        return bool(self._pending)

    def flush(self):
        """Send all staged ranges as one batched write, then re-read"""
        if not self._pending:
            return
        pending, self._pending = self._pending, []
        try:
            self.store.write_ranges(pending)
        except WriteError:
            logger.error(f"❌ Batched write of {len(pending)} ranges failed")
            raise
        except Exception as e:
            logger.error(f"❌ Batched write of {len(pending)} ranges failed: {e}")
            raise WriteError(str(e)) from e
        self.write_count += 1
        try:
            self.refresh()
        except ScheduleStoreError as e:
            # The write already landed; keep working from the patched snapshot
            logger.warning(f"⚠️ Re-read after write failed, patching snapshot with {len(pending)} ranges: {e}")
            self._apply_locally(pending)

    def _apply_locally(self, updates: List[Tuple[int, int, List[List[Any]]]]):
        values = [list(row) for row in self._values]
        for row, column, rows in updates:
            for offset, row_values in enumerate(rows):
                index = row - 1 + offset
                while len(values) <= index:
                    values.append([])
                target = values[index]
                last = column - 1 + len(row_values)
                if len(target) < last:
                    target.extend([""] * (last - len(target)))
                target[column - 1:last] = row_values
        self._load(values)

    def format_timestamp(self, value: Optional[datetime]) -> str:
        return value.strftime(self.config.SHEET_TIMESTAMP_FORMAT) if value else ""
