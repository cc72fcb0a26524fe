from datetime import date, datetime

import pytest

from slot_scheduler.scheduler.errors import SlotParseError
from slot_scheduler.scheduler.slot_parser import format_time_slot, parse_time_slot

DAY = date(2026, 10, 20)


class TestParseTimeSlot:
    def test_parses_simple_slot(self):
        start, end = parse_time_slot("0805-0810", DAY)
        assert start == datetime(2026, 10, 20, 8, 5)
        assert end == datetime(2026, 10, 20, 8, 10)

    def test_strips_whitespace(self):
        start, end = parse_time_slot("  0905-0910 ", DAY)
        assert (start.hour, start.minute, end.minute) == (9, 5, 10)

    def test_overnight_slot_ends_next_day(self):
        start, end = parse_time_slot("2355-0005", DAY)
        assert start == datetime(2026, 10, 20, 23, 55)
        assert end == datetime(2026, 10, 21, 0, 5)

    def test_slot_ending_at_midnight_ends_next_day(self):
        start, end = parse_time_slot("2355-0000", DAY)
        assert end == datetime(2026, 10, 21, 0, 0)
        assert (end - start).total_seconds() == 300

    @pytest.mark.parametrize("token", ["805-810", "0805–0810", "08:05-08:10", "", "abcd-efgh", "0805-08100"])
    def test_invalid_format(self, token):
        with pytest.raises(SlotParseError) as excinfo:
            parse_time_slot(token, DAY)
        assert excinfo.value.reason == SlotParseError.INVALID_FORMAT

    @pytest.mark.parametrize("token", [None, 805, 8.05])
    def test_non_string_cells_are_invalid_format(self, token):
        with pytest.raises(SlotParseError) as excinfo:
            parse_time_slot(token, DAY)
        assert excinfo.value.reason == SlotParseError.INVALID_FORMAT

    @pytest.mark.parametrize("token", ["2405-2410", "0860-0905", "0805-0899"])
    def test_out_of_range_digits(self, token):
        with pytest.raises(SlotParseError) as excinfo:
            parse_time_slot(token, DAY)
        assert excinfo.value.reason == SlotParseError.INVALID_DIGITS

    def test_zero_length_slot_is_rejected(self):
        with pytest.raises(SlotParseError) as excinfo:
            parse_time_slot("0905-0905", DAY)
        assert excinfo.value.reason == SlotParseError.NON_POSITIVE_DURATION


def test_format_time_slot():
    assert format_time_slot(datetime(2026, 10, 20, 8, 5), datetime(2026, 10, 20, 8, 10)) == "0805-0810"
