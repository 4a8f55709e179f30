"""Decides whether a requested date can be booked at all before slots are built."""

from datetime import date
from enum import Enum
from typing import Protocol


class AvailabilityWindow(Protocol):
    start_time: str
    end_time: str
    max_concurrent: int
    is_available: bool


class ClosureReason(str, Enum):
    blocked = 'blocked'
    closed = 'closed'


CLOSURE_MESSAGES = {
    ClosureReason.blocked: 'This date is unavailable',
    ClosureReason.closed: 'Closed on this day',
}


def day_of_week(value: date) -> int:
    """Weekday index as stored on availability windows: 0 = Sunday ... 6 = Saturday."""
    return value.isoweekday() % 7


def resolve_closure(is_blocked: bool, window: AvailabilityWindow | None) -> ClosureReason | None:
    # A blocked date wins over whatever the weekly hours say.
    if is_blocked:
        return ClosureReason.blocked
    if window is None or not window.is_available:
        return ClosureReason.closed
    return None
