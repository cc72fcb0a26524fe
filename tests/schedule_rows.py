"""
Row builders for schedule sheet test fixtures
"""
from datetime import date

from slot_scheduler.sheets.schedule_grid import HEADER

MONDAY = date(2026, 10, 19)
TUESDAY = date(2026, 10, 20)
WEDNESDAY = date(2026, 10, 21)
FRIDAY_BEFORE = date(2026, 10, 16)
SATURDAY = date(2026, 10, 24)

MONDAY_TOKENS = ["0905-0910", "0910-0915", "0915-0920", "0920-0925", "0925-0930", "0930-0935", "0935-0940"]
TUE_FRI_TOKENS = ["0805-0810", "0810-0815", "0815-0820"]


def row(day, token, activity="Empty", **fields):
    """A 15-column schedule row; keyword fields fill the requester columns"""
    return [
        day.isoformat() if isinstance(day, date) else day,
        token,
        5,
        activity,
        fields.get("name", ""),
        fields.get("class_name", ""),
        fields.get("phone", ""),
        fields.get("subject", ""),
        fields.get("slides_link", ""),
        fields.get("email", ""),
        fields.get("time_requested", ""),
        fields.get("confirmation", ""),
        fields.get("reminder", ""),
        fields.get("booking_id", ""),
        fields.get("form_timestamp", ""),
    ]


def booked_row(day, token, booking_id, email="ada@school.test", name="Ada",
               confirmation="Yes", reminder="No", activity="Personal Voice", **fields):
    return row(
        day, token, activity,
        name=name, email=email, booking_id=booking_id,
        confirmation=confirmation, reminder=reminder,
        subject=fields.get("subject", "Robots"), time_requested=fields.get("time_requested", 5),
        class_name=fields.get("class_name", "4A"),
    )


def day_rows(day, tokens=None, activity="Empty"):
    if tokens is None:
        tokens = MONDAY_TOKENS if day.weekday() == 0 else TUE_FRI_TOKENS
    return [row(day, token, activity) for token in tokens]


def sheet(*rows):
    return [list(HEADER)] + list(rows)


def submission(email="ada@school.test", name="Ada", minutes="5 minutes", **extra):
    payload = {
        "Email Address": [email],
        "Name": [name],
        "Class": ["4A"],
        "Phone Number": ["91234567"],
        "Subject of Personal Voice Sharing": ["Robots"],
        "Slides Link": ["https://slides.test/robots"],
        "Time Required (5min blocks)": [minutes],
        "Timestamp": ["10/18/2026 14:30:00"],
    }
    payload.update(extra)
    return {"namedValues": payload}
