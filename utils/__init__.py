"""
Utility modules for the Assembly Slot Scheduler
"""

from .logger import SlotSchedulerLogger
from .validators import SubmissionValidator, DataSanitizer
from .booking_logger import BookingLogger
from .schedule_analyzer import ScheduleAnalyzer

__all__ = ['SlotSchedulerLogger', 'SubmissionValidator', 'DataSanitizer', 'BookingLogger', 'ScheduleAnalyzer']
