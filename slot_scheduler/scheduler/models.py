"""
Data model for schedule blocks, bookings and requesters
"""
import math
import re
import threading
import time
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class ActivityKind(Enum):
    EMPTY = "empty"
    BOOKED = "booked"
    OTHER = "other"


@dataclass(frozen=True)
class Activity:
    """Activity Type cell: Empty, Booked, or Other(label)"""

    kind: ActivityKind
    label: str

    @classmethod
    def from_cell(cls, value, config) -> Optional["Activity"]:
        """Parse an Activity Type cell, None when the cell is blank"""
        if value is None:
            return None
        label = str(value).strip()
        if not label:
            return None
        if label == config.EMPTY_ACTIVITY:
            return cls(ActivityKind.EMPTY, label)
        if label == config.BOOKED_ACTIVITY:
            return cls(ActivityKind.BOOKED, label)
        return cls(ActivityKind.OTHER, label)

    @property
    def is_empty(self) -> bool:
        return self.kind is ActivityKind.EMPTY

    @property
    def is_booked(self) -> bool:
        return self.kind is ActivityKind.BOOKED


class NotificationStatus(Enum):
    PENDING = "No"
    SENT = "Yes"
    ERROR = "Error"

    @classmethod
    def from_cell(cls, value) -> "NotificationStatus":
        text = str(value).strip() if value is not None else ""
        for status in cls:
            if status.value == text:
                return status
        return cls.PENDING

    @property
    def is_final(self) -> bool:
        return self is not NotificationStatus.PENDING


@dataclass
class Requester:
    """Opaque requester payload, passed through to the sheet untouched"""

    email: str
    name: str = ""
    class_name: str = ""
    phone: str = ""
    subject: str = ""
    slides_link: str = ""
    time_requested: int = 5
    submitted_at: Optional[datetime] = None

    def blocks_needed(self, quantum: int) -> int:
        return max(1, math.ceil(self.time_requested / quantum))

    @property
    def has_contact(self) -> bool:
        return bool(self.email) and bool(self.name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "email": self.email,
            "name": self.name,
            "class": self.class_name,
            "phone": self.phone,
            "subject": self.subject,
            "slides_link": self.slides_link,
            "time_requested": self.time_requested,
            "submitted_at": self.submitted_at.isoformat() if self.submitted_at else None,
        }


@dataclass
class Block:
    """One schedule row"""

    row: int
    date: Optional[date]
    token: Any
    start: Optional[datetime]
    end: Optional[datetime]
    activity: Optional[Activity]
    booking_id: str = ""
    requester: Optional[Requester] = None
    confirmation_sent: NotificationStatus = NotificationStatus.PENDING
    reminder_sent: NotificationStatus = NotificationStatus.PENDING

    @property
    def is_inert(self) -> bool:
        """Rows without a usable date or time slot take part in nothing"""
        return self.date is None or self.start is None

    @property
    def is_bookable(self) -> bool:
        return not self.is_inert and self.activity is not None and self.activity.is_empty

    def follows(self, previous: "Block") -> bool:
        """True when this block starts exactly where ``previous`` ends"""
        return self.start == previous.end


@dataclass
class Booking:
    """
    A requester's reservation: a derived view over contiguous blocks that
    share one booking id. Nothing is stored apart from the blocks themselves.
    """

    booking_id: str
    blocks: List[Block]
    requester: Optional[Requester] = None
    confirmation_sent: NotificationStatus = NotificationStatus.PENDING
    reminder_sent: NotificationStatus = NotificationStatus.PENDING

    @classmethod
    def from_blocks(cls, booking_id: str, blocks: List[Block]) -> "Booking":
        ordered = sorted(blocks, key=lambda block: block.row)
        first = ordered[0]
        return cls(
            booking_id=booking_id,
            blocks=ordered,
            requester=first.requester,
            confirmation_sent=first.confirmation_sent,
            reminder_sent=first.reminder_sent,
        )

    @property
    def date(self) -> Optional[date]:
        return self.blocks[0].date

    @property
    def start(self) -> Optional[datetime]:
        return self.blocks[0].start

    @property
    def end(self) -> Optional[datetime]:
        return self.blocks[-1].end

    @property
    def rows(self) -> List[int]:
        return [block.row for block in self.blocks]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "booking_id": self.booking_id,
            "date": self.date.isoformat() if self.date else None,
            "start": self.start.isoformat() if self.start else None,
            "end": self.end.isoformat() if self.end else None,
            "rows": self.rows,
        }


class BookingIdGenerator:
    """
    Mints ``<prefix>_<email>_<ns timestamp><suffix>`` ids.

    Timestamps are forced to be strictly increasing within the process, so
    two ids minted in the same clock tick never collide.
    """

    def __init__(self, prefix: str = "PV", clock=time.time_ns):
        self.prefix = prefix
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def _next_timestamp(self) -> int:
        with self._lock:
            stamp = max(self._clock(), self._last + 1)
            self._last = stamp
            return stamp

    def new_id(self, email: str, suffix: str = "") -> str:
        identity = re.sub(r'\s+', '', email or "unknown")
        return f"{self.prefix}_{identity}_{self._next_timestamp()}{suffix}"
