"""
Shared fixtures: in-memory sheet, recording notifier and a fixed clock
"""
from datetime import datetime

import pytest

from config.settings import Config
from slot_scheduler.notifications.mailer import RecordingNotifier
from slot_scheduler.scheduler.slot_scheduler import SlotScheduler
from slot_scheduler.scheduler.time_window import TimeWindowPolicy
from slot_scheduler.sheets.memory_store import InMemorySheetStore

from schedule_rows import MONDAY, TUESDAY, WEDNESDAY, day_rows, sheet

# Monday morning, before the assembly window opens
NOW = datetime(2026, 10, 19, 7, 0)
ADMIN = "admin@school.test"


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def config():
    return Config(ADMIN_EMAIL=ADMIN, SPREADSHEET_ID="test-sheet")


@pytest.fixture
def policy(config):
    return TimeWindowPolicy(config)


@pytest.fixture
def store():
    return InMemorySheetStore(sheet(*day_rows(MONDAY), *day_rows(TUESDAY), *day_rows(WEDNESDAY)))


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def make_scheduler(config, notifier, clock):
    def factory(store):
        return SlotScheduler(config, store=store, notifier=notifier, clock=clock)
    return factory


@pytest.fixture
def scheduler(make_scheduler, store):
    return make_scheduler(store)
