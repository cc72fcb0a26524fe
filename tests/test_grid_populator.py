from datetime import date

from slot_scheduler.sheets.grid_populator import populate_schedule, rows_for_day
from slot_scheduler.sheets.memory_store import InMemorySheetStore
from slot_scheduler.sheets.schedule_grid import HEADER, ScheduleGrid

from schedule_rows import MONDAY, SATURDAY, TUESDAY, day_rows, sheet


def test_rows_for_day_follow_the_window(config, policy):
    monday = rows_for_day(MONDAY, policy, config)
    assert [r[1] for r in monday] == [
        "0905-0910", "0910-0915", "0915-0920", "0920-0925", "0925-0930", "0930-0935", "0935-0940",
    ]
    assert all(r[3] == "Empty" and r[2] == 5 for r in monday)
    assert [r[1] for r in rows_for_day(TUESDAY, policy, config)] == ["0805-0810", "0810-0815", "0815-0820"]
    assert rows_for_day(SATURDAY, policy, config) == []


def test_populates_empty_sheet_with_header(config, policy):
    store = InMemorySheetStore()
    # Monday 19th through Sunday 25th: one Monday and four weekdays
    appended = populate_schedule(store, policy, config, MONDAY, 7)

    assert appended == 7 + 4 * 3
    assert store.rows[0] == HEADER
    assert len(store.rows) == 1 + appended
    assert store.write_calls == 1


def test_skips_dates_already_present(config, policy):
    store = InMemorySheetStore(sheet(*day_rows(TUESDAY)))
    appended = populate_schedule(store, policy, config, TUESDAY, 2)

    assert appended == 3
    grid = ScheduleGrid(store, config).refresh()
    assert [block.date for block in grid].count(TUESDAY) == 3
    assert [block.date for block in grid].count(date(2026, 10, 21)) == 3


def test_populated_rows_are_bookable(config, policy, clock):
    from slot_scheduler.scheduler.allocator import SlotAllocator
    from slot_scheduler.scheduler.models import Requester

    store = InMemorySheetStore()
    populate_schedule(store, policy, config, MONDAY, 2)
    allocator = SlotAllocator(ScheduleGrid(store, config), policy, config, clock=clock)
    booking = allocator.find_slot(Requester(email="ada@school.test", name="Ada", time_requested=35))
    assert booking.date == MONDAY
    assert len(booking.blocks) == 7
