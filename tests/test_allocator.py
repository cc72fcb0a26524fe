import random
from datetime import datetime

import pytest

from slot_scheduler.scheduler.allocator import SlotAllocator
from slot_scheduler.scheduler.errors import SlotNotFoundError
from slot_scheduler.scheduler.models import BookingIdGenerator, Requester
from slot_scheduler.sheets.memory_store import InMemorySheetStore
from slot_scheduler.sheets.schedule_grid import Column, ScheduleGrid

from conftest import NOW
from schedule_rows import (
    FRIDAY_BEFORE,
    MONDAY,
    MONDAY_TOKENS,
    SATURDAY,
    TUESDAY,
    WEDNESDAY,
    day_rows,
    row,
    sheet,
)


def make_allocator(rows, config, policy, clock, ids=None):
    store = InMemorySheetStore(sheet(*rows))
    grid = ScheduleGrid(store, config)
    return SlotAllocator(grid, policy, config, id_generator=ids, clock=clock), store


def requester(minutes=5, email="ada@school.test"):
    return Requester(email=email, name="Ada", class_name="4A", subject="Robots", time_requested=minutes,
                     submitted_at=datetime(2026, 10, 18, 14, 30))


class TestFindSlot:
    def test_assigns_earliest_run(self, config, policy, clock):
        allocator, store = make_allocator(day_rows(MONDAY) + day_rows(TUESDAY), config, policy, clock)
        booking = allocator.find_slot(requester(10))

        assert booking.rows == [2, 3]
        assert booking.date == MONDAY
        assert booking.start == datetime(2026, 10, 19, 9, 5)
        assert booking.end == datetime(2026, 10, 19, 9, 15)
        assert store.write_calls == 1

    def test_partial_minutes_round_up_to_whole_blocks(self, config, policy, clock):
        allocator, _ = make_allocator(day_rows(MONDAY), config, policy, clock)
        booking = allocator.find_slot(requester(7))
        assert len(booking.blocks) == 2

    def test_assigned_rows_read_back_as_booked(self, config, policy, clock):
        allocator, store = make_allocator(day_rows(TUESDAY), config, policy, clock)
        booking = allocator.find_slot(requester(10))

        grid = ScheduleGrid(store, config).refresh()
        for row_number in booking.rows:
            block = grid.block_at_row(row_number)
            assert block.activity.is_booked
            assert block.booking_id == booking.booking_id
            assert block.requester.email == "ada@school.test"
        assert grid.block_at_row(4).activity.is_empty

    def test_assignment_writes_requester_payload_and_pending_flags(self, config, policy, clock):
        allocator, store = make_allocator(day_rows(TUESDAY), config, policy, clock)
        booking = allocator.find_slot(requester(5))

        written = store.rows[1]
        assert written[Column.ACTIVITY_TYPE - 1] == "Personal Voice"
        assert written[Column.STUDENT_NAME - 1] == "Ada"
        assert written[Column.EMAIL - 1] == "ada@school.test"
        assert written[Column.TIME_REQUESTED - 1] == 5
        assert written[Column.CONFIRMATION_SENT - 1] == "No"
        assert written[Column.REMINDER_SENT - 1] == "No"
        assert written[Column.ASSIGNED_SLOT_ID - 1] == booking.booking_id
        assert written[Column.FORM_TIMESTAMP - 1] == "2026-10-18 14:30:00"
        assert booking.booking_id.startswith("PV_ada@school.test_")

    def test_monday_with_only_last_row_free_cannot_fit_ten_minutes(self, config, policy, clock):
        rows = [row(MONDAY, token, "Assembly") for token in MONDAY_TOKENS[:-1]]
        rows.append(row(MONDAY, MONDAY_TOKENS[-1]))
        allocator, store = make_allocator(rows, config, policy, clock)

        with pytest.raises(SlotNotFoundError) as excinfo:
            allocator.find_slot(requester(10))
        assert excinfo.value.blocks_needed == 2
        assert store.write_calls == 0

    def test_never_starts_outside_window(self, config, policy, clock):
        rows = [
            row(TUESDAY, "0755-0800"),
            row(TUESDAY, "0800-0805"),
            row(TUESDAY, "0805-0810"),
        ]
        allocator, _ = make_allocator(rows, config, policy, clock)
        booking = allocator.find_slot(requester(5))
        assert booking.rows == [4]

    def test_every_block_of_a_run_must_start_in_window(self, config, policy, clock):
        rows = [row(TUESDAY, "0815-0820"), row(TUESDAY, "0820-0825")]
        allocator, _ = make_allocator(rows, config, policy, clock)
        with pytest.raises(SlotNotFoundError):
            allocator.find_slot(requester(10))

    def test_weekend_rows_are_never_assigned(self, config, policy, clock):
        allocator, _ = make_allocator(day_rows(SATURDAY, ["0805-0810", "0810-0815"]), config, policy, clock)
        with pytest.raises(SlotNotFoundError):
            allocator.find_slot(requester(5))

    def test_run_does_not_span_a_gap(self, config, policy, clock):
        rows = [row(MONDAY, "0905-0910"), row(MONDAY, "0915-0920"), row(MONDAY, "0920-0925")]
        allocator, _ = make_allocator(rows, config, policy, clock)
        booking = allocator.find_slot(requester(10))
        assert booking.rows == [3, 4]

    def test_run_does_not_span_dates(self, config, policy, clock):
        rows = [row(MONDAY, "0935-0940"), row(TUESDAY, "0805-0810"), row(TUESDAY, "0810-0815")]
        allocator, _ = make_allocator(rows, config, policy, clock)
        booking = allocator.find_slot(requester(10))
        assert booking.rows == [3, 4]
        assert booking.date == TUESDAY

    def test_past_dates_skipped_without_filter(self, config, policy, clock):
        rows = day_rows(FRIDAY_BEFORE) + day_rows(TUESDAY)
        allocator, _ = make_allocator(rows, config, policy, clock)
        booking = allocator.find_slot(requester(5))
        assert booking.date == TUESDAY

    def test_date_filter_limits_search(self, config, policy, clock):
        allocator, _ = make_allocator(day_rows(TUESDAY) + day_rows(WEDNESDAY), config, policy, clock)
        booking = allocator.find_slot(requester(5), date_filter=WEDNESDAY)
        assert booking.date == WEDNESDAY
        assert booking.rows == [5]

    def test_date_filter_without_capacity_is_not_found(self, config, policy, clock):
        allocator, _ = make_allocator(day_rows(TUESDAY), config, policy, clock)
        with pytest.raises(SlotNotFoundError) as excinfo:
            allocator.find_slot(requester(20), date_filter=TUESDAY)
        assert excinfo.value.date_filter == TUESDAY

    def test_id_suffix_is_appended(self, config, policy, clock):
        allocator, _ = make_allocator(day_rows(TUESDAY), config, policy, clock)
        booking = allocator.find_slot(requester(5), id_suffix="_R")
        assert booking.booking_id.endswith("_R")

    def test_identical_requests_in_same_tick_get_distinct_ids(self, config, policy, clock):
        ids = BookingIdGenerator(clock=lambda: 1_700_000_000_000_000_000)
        allocator, _ = make_allocator(day_rows(TUESDAY), config, policy, clock, ids=ids)

        first = allocator.find_slot(requester(5))
        second = allocator.find_slot(requester(5))

        assert first.booking_id != second.booking_id
        assert first.rows == [2]
        assert second.rows == [3]


class TestBookingIdGenerator:
    def test_ids_strictly_increase_with_frozen_clock(self):
        ids = BookingIdGenerator(prefix="PV", clock=lambda: 42)
        minted = [ids.new_id("ada@school.test") for _ in range(3)]
        assert len(set(minted)) == 3
        assert minted[0] == "PV_ada@school.test_42"

    def test_whitespace_removed_from_email(self):
        ids = BookingIdGenerator(clock=lambda: 1)
        assert ids.new_id(" ada @school.test ") == "PV_ada@school.test_1"


# Exhaustive comparison of the skip-ahead scan

TOKENS = [
    "0750-0755", "0800-0805", "0805-0810", "0810-0815", "0815-0820", "0820-0825",
    "0905-0910", "0910-0915", "0915-0920", "0930-0935", "0935-0940", "bad",
]
DATES = [FRIDAY_BEFORE, MONDAY, TUESDAY, WEDNESDAY, SATURDAY]
ACTIVITIES = ["Empty", "Empty", "Empty", "Assembly", "Personal Voice", ""]


def random_rows(rng, count):
    rows = []
    day = rng.choice(DATES)
    for _ in range(count):
        if rng.random() < 0.2:
            day = rng.choice(DATES)
        rows.append(row(day, rng.choice(TOKENS), rng.choice(ACTIVITIES)))
    return rows


def exhaustive_search(grid, policy, today, blocks_needed):
    """Try every start row; no skipping"""
    def usable(block):
        return (not block.is_inert and block.activity is not None
                and block.activity.is_empty and policy.allows(block.start))

    blocks = list(grid)
    for i, first in enumerate(blocks):
        if not usable(first) or first.date < today:
            continue
        run = [first]
        for candidate in blocks[i + 1:i + blocks_needed]:
            if not usable(candidate) or candidate.date != first.date or candidate.start != run[-1].end:
                break
            run.append(candidate)
        if len(run) >= blocks_needed:
            return [block.row for block in run]
    return None


@pytest.mark.parametrize("seed", range(40))
def test_skip_ahead_matches_exhaustive_search(seed, config, policy, clock):
    rng = random.Random(seed)
    allocator, _ = make_allocator(random_rows(rng, rng.randint(5, 40)), config, policy, clock)
    allocator.grid.refresh()

    for blocks_needed in range(1, 5):
        run = allocator.search(blocks_needed)
        found = [block.row for block in run] if run is not None else None
        assert found == exhaustive_search(allocator.grid, policy, NOW.date(), blocks_needed)
