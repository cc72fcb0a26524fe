"""
Helpers for reading and addressing spreadsheet cells
"""
from datetime import date, datetime, timedelta
from typing import Optional

# Google Sheets serial dates count days from this epoch
SHEETS_EPOCH = datetime(1899, 12, 30)


def column_letter(column: int) -> str:
    """Convert a 1-based column index to its A1 letter(s)"""
    letters = ""
    while column > 0:
        column, remainder = divmod(column - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def a1_range(sheet_name: str, row: int, column: int, num_rows: int, num_columns: int) -> str:
    """Build an A1 range such as 'Assembly Schedule'!D5:O7"""
    first = f"{column_letter(column)}{row}"
    last = f"{column_letter(column + num_columns - 1)}{row + num_rows - 1}"
    return f"'{sheet_name}'!{first}:{last}"


def coerce_date(value) -> Optional[date]:
    """Read a date cell: date objects, serial numbers or ISO strings"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if value <= 0:
            return None
        return (SHEETS_EPOCH + timedelta(days=int(value))).date()
    if isinstance(value, str) and value.strip():
        try:
            return datetime.strptime(value.strip()[:10], "%Y-%m-%d").date()
        except ValueError:
            return None
    return None


def coerce_datetime(value) -> Optional[datetime]:
    """Read a timestamp cell: datetime objects, serial numbers or ISO strings"""
    if isinstance(value, datetime):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)) and value > 0:
        return SHEETS_EPOCH + timedelta(days=float(value))
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def coerce_int(value, default: Optional[int] = None) -> Optional[int]:
    """Read a positive whole number of minutes"""
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)) and value > 0:
        return int(value)
    if isinstance(value, str) and value.strip().isdigit() and int(value.strip()) > 0:
        return int(value.strip())
    return default


def cell_text(value) -> str:
    if value is None:
        return ""
    return str(value).strip()
