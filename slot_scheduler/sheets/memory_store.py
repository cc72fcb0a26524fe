"""
In-memory schedule store for tests and local runs without Google dependencies
"""
import copy
import logging
from typing import Any, List, Sequence, Set, Tuple

from slot_scheduler.scheduler.errors import ScheduleStoreError, WriteError

logger = logging.getLogger(__name__)


class InMemorySheetStore:
    """List-of-rows store with the same contract as GoogleSheetStore"""

    def __init__(self, rows: List[List[Any]] = None, width: int = 15):
        self.width = width
        self.rows = [self._pad(row) for row in (rows or [])]
        self.read_calls = 0
        self.write_calls = 0
        self.fail_writes = False
        # 1-based read_rows call numbers that raise ScheduleStoreError
        self.fail_reads: Set[int] = set()

    def _pad(self, row: Sequence[Any]) -> List[Any]:
        row = list(row)
        return row + [""] * (self.width - len(row))

    def read_rows(self) -> List[List[Any]]:
        self.read_calls += 1
        if self.read_calls in self.fail_reads:
            raise ScheduleStoreError(f"In-memory store failed read #{self.read_calls}")
        logger.debug(f"📋 MEMORY: Reading {len(self.rows)} rows")
        return copy.deepcopy(self.rows)

    def write_ranges(self, updates: List[Tuple[int, int, List[List[Any]]]]):
        """Apply (row, column, values) updates; row and column are 1-based"""
        if self.fail_writes:
            raise WriteError("In-memory store is configured to fail writes")
        self.write_calls += 1
        for row, column, values in updates:
            for offset, row_values in enumerate(values):
                target = self.rows[row - 1 + offset]
                for column_offset, value in enumerate(row_values):
                    target[column - 1 + column_offset] = value
        logger.debug(f"📝 MEMORY: Applied {len(updates)} range updates")

    def append_rows(self, values: List[List[Any]]):
        if self.fail_writes:
            raise WriteError("In-memory store is configured to fail writes")
        self.write_calls += 1
        self.rows.extend(self._pad(row) for row in values)
