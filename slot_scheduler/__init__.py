"""
Assembly Slot Scheduler - Personal Voice booking for school assemblies

This package provides a slot allocation and recovery engine that:
- Assigns form submissions to consecutive free blocks of a Google Sheets schedule
- Honors per-weekday assembly time windows
- Detects bookings displaced by manual schedule edits and rebooks them
- Sends confirmations, reminders and reschedule notices through Gmail
"""

__version__ = "1.0.0"
__author__ = "Assembly Slot Scheduler Team"
