"""
Configuration settings for the Assembly Slot Scheduler
"""
import os
from typing import Dict, Tuple


class Config:
    # Google Sheets schedule store
    SPREADSHEET_ID = ""
    SCHEDULE_SHEET_NAME = "Assembly Schedule"
    SCHEDULE_LAST_COLUMN = 15  # Date through Form Timestamp
    GOOGLE_TOKEN_PATH = "tokens/scheduler.token"
    GOOGLE_SCOPES = [
        "https://www.googleapis.com/auth/spreadsheets",
        "https://www.googleapis.com/auth/gmail.send",
    ]

    # Notifications
    ADMIN_EMAIL = "assembly-admin@example.org"
    SENDER_EMAIL = "me"  # Gmail API alias for the authorized account
    REPORTING_LOCATION = "the School Hall"
    REPORTING_LEAD_MINUTES = 20

    # Activity labels as they appear in the sheet
    EMPTY_ACTIVITY = "Empty"
    BOOKED_ACTIVITY = "Personal Voice"

    # Assembly time rules (start inclusive, end exclusive, local time)
    MONDAY_WINDOW = ("09:05", "09:40")
    TUE_FRI_WINDOW = ("08:05", "08:20")
    SLOT_DURATION = 5  # minutes per row/block
    TIMEZONE = "Asia/Singapore"

    # Booking ids
    BOOKING_ID_PREFIX = "PV"
    REBOOK_ID_SUFFIX = "_R"

    # Form question titles (Google Form namedValues keys)
    FORM_KEYS = {
        "email": "Email Address",
        "timestamp": "Timestamp",
        "name": "Name",
        "class_name": "Class",
        "phone": "Phone Number",
        "subject": "Subject of Personal Voice Sharing",
        "slides_link": "Slides Link",
        "time_requested": "Time Required (5min blocks)",
    }
    FORM_TIMESTAMP_FORMATS = [
        "%m/%d/%Y %H:%M:%S",
        "%d/%m/%Y %H:%M:%S",
        "%Y-%m-%d %H:%M:%S",
        "%Y-%m-%dT%H:%M:%S",
    ]

    # API Configuration
    API_HOST = "0.0.0.0"
    API_PORT = 5000

    # Date/Time Formats
    SHEET_DATE_FORMAT = "%Y-%m-%d"
    SHEET_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
    DISPLAY_DATE_FORMAT = "%A, %B %d, %Y"
    DISPLAY_TIME_FORMAT = "%I:%M %p"

    # Environment overrides: variable name -> (attribute, converter)
    ENV_OVERRIDES = {
        "SLOT_SCHEDULER_SPREADSHEET_ID": ("SPREADSHEET_ID", str),
        "SLOT_SCHEDULER_SHEET_NAME": ("SCHEDULE_SHEET_NAME", str),
        "SLOT_SCHEDULER_TOKEN_PATH": ("GOOGLE_TOKEN_PATH", str),
        "SLOT_SCHEDULER_ADMIN_EMAIL": ("ADMIN_EMAIL", str),
        "SLOT_SCHEDULER_SENDER_EMAIL": ("SENDER_EMAIL", str),
        "SLOT_SCHEDULER_SLOT_DURATION": ("SLOT_DURATION", int),
        "SLOT_SCHEDULER_API_HOST": ("API_HOST", str),
        "SLOT_SCHEDULER_API_PORT": ("API_PORT", int),
    }

    def __init__(self, **overrides):
        for key, value in overrides.items():
            if not hasattr(type(self), key) or not key.isupper():
                raise ValueError(f"Unknown configuration key: {key}")
            setattr(self, key, value)

    @classmethod
    def from_env(cls, environ: Dict[str, str] = None, **overrides) -> "Config":
        """Build a configuration from SLOT_SCHEDULER_* environment variables"""
        environ = os.environ if environ is None else environ
        values = {}
        for variable, (attribute, convert) in cls.ENV_OVERRIDES.items():
            if environ.get(variable):
                values[attribute] = convert(environ[variable])
        values.update(overrides)
        return cls(**values)

    def get_windows(self) -> Dict[str, Tuple[str, str]]:
        """Get the configured window for each weekday class"""
        return {
            "monday": self.MONDAY_WINDOW,
            "tue_fri": self.TUE_FRI_WINDOW,
        }

    def get_token_path(self) -> str:
        """Get the OAuth token file used for Sheets and Gmail"""
        token_path = self.GOOGLE_TOKEN_PATH
        if not os.path.exists(token_path):
            raise FileNotFoundError(f"Token file not found: {token_path}")
        return token_path
