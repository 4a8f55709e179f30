"""
Service appointment slot calculator.

Turns a weekday's open window and the day's active bookings into the list of
start times a customer may pick, each flagged available or full. Pure logic:
no database access and no timezone handling, every value is a naive local
wall-clock time.
"""

from datetime import date, datetime, timedelta
from typing import Iterable, Protocol

from pydantic import BaseModel

SLOT_INCREMENT_MINUTES = 30


class BookedInterval(Protocol):
    scheduled_start: datetime
    scheduled_end: datetime


class TimeSlot(BaseModel):
    time: str
    display: str
    available: bool


def parse_clock_time(value: str) -> int:
    """Return minutes since midnight for an ``"HH:MM"`` (or ``"HH:MM:SS"``) string."""
    hours, minutes = value.split(':')[:2]
    return int(hours) * 60 + int(minutes)


def format_clock_time(minutes: int) -> str:
    return f'{minutes // 60:02d}:{minutes % 60:02d}'


def format_display_time(minutes: int) -> str:
    hour, minute = divmod(minutes, 60)
    suffix = 'PM' if hour >= 12 else 'AM'
    if hour > 12:
        display_hour = hour - 12
    elif hour == 0:
        display_hour = 12
    else:
        display_hour = hour
    return f'{display_hour}:{minute:02d} {suffix}'


def count_overlapping(
    slot_start: datetime,
    slot_end: datetime,
    appointments: Iterable[BookedInterval],
) -> int:
    # Half-open intervals: touching endpoints do not overlap.
    return sum(
        1
        for appointment in appointments
        if slot_start < appointment.scheduled_end and slot_end > appointment.scheduled_start
    )


def generate_slots(
    start_time: str,
    end_time: str,
    duration_minutes: int,
    existing_appointments: Iterable[BookedInterval],
    max_concurrent: int,
    slot_date: date,
) -> list[TimeSlot]:
    """
    Build the candidate slots for one day.

    Slots start at ``start_time`` and step by 30 minutes. A slot is emitted
    only while ``start + duration_minutes <= end_time``, so a slot that ends
    exactly at closing is kept and no short slot is ever produced. A slot is
    available when fewer than ``max_concurrent`` existing appointments
    overlap it.
    """
    appointments = list(existing_appointments)
    start_minutes = parse_clock_time(start_time)
    end_minutes = parse_clock_time(end_time)
    day_start = datetime.combine(slot_date, datetime.min.time())

    slots: list[TimeSlot] = []
    minute = start_minutes
    while minute + duration_minutes <= end_minutes:
        slot_start = day_start + timedelta(minutes=minute)
        slot_end = slot_start + timedelta(minutes=duration_minutes)
        overlapping = count_overlapping(slot_start, slot_end, appointments)

        slots.append(
            TimeSlot(
                time=format_clock_time(minute),
                display=format_display_time(minute),
                available=overlapping < max_concurrent,
            )
        )
        minute += SLOT_INCREMENT_MINUTES

    return slots
