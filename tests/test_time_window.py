from datetime import date, datetime, time

import pytest

from config.settings import Config
from slot_scheduler.scheduler.time_window import TimeWindowPolicy


@pytest.fixture
def policy():
    return TimeWindowPolicy(Config())


class TestIsWithinWindow:
    @pytest.mark.parametrize("clock_time,expected", [
        (time(9, 0), False),
        (time(9, 5), True),
        (time(9, 35), True),
        (time(9, 40), False),
    ])
    def test_monday_window(self, policy, clock_time, expected):
        assert policy.is_within_window(0, clock_time) is expected

    @pytest.mark.parametrize("weekday", [1, 2, 3, 4])
    def test_tuesday_to_friday_window(self, policy, weekday):
        assert policy.is_within_window(weekday, time(8, 5))
        assert policy.is_within_window(weekday, time(8, 15))
        assert not policy.is_within_window(weekday, time(8, 20))
        assert not policy.is_within_window(weekday, time(8, 0))
        assert not policy.is_within_window(weekday, time(9, 5))

    @pytest.mark.parametrize("weekday", [5, 6])
    def test_weekends_have_no_window(self, policy, weekday):
        assert not policy.is_within_window(weekday, time(8, 5))
        assert not policy.is_within_window(weekday, time(9, 5))

    def test_custom_windows(self):
        policy = TimeWindowPolicy(Config(MONDAY_WINDOW=("10:00", "10:30"), TUE_FRI_WINDOW=("07:30", "07:45")))
        assert policy.is_within_window(0, time(10, 25))
        assert not policy.is_within_window(0, time(9, 5))
        assert policy.is_within_window(3, time(7, 30))


class TestPolicyHelpers:
    def test_allows_uses_block_weekday(self, policy):
        assert policy.allows(datetime(2026, 10, 19, 9, 5))
        assert not policy.allows(datetime(2026, 10, 20, 9, 5))

    def test_window_for_weekend_is_none(self, policy):
        assert policy.window_for(date(2026, 10, 24)) is None
        assert policy.window_for(date(2026, 10, 19)) == (time(9, 5), time(9, 40))

    def test_reporting_time_is_twenty_minutes_before_window(self, policy):
        assert policy.reporting_time(date(2026, 10, 19)) == datetime(2026, 10, 19, 8, 45)
        assert policy.reporting_time(date(2026, 10, 20)) == datetime(2026, 10, 20, 7, 45)
        assert policy.reporting_time(date(2026, 10, 25)) is None
