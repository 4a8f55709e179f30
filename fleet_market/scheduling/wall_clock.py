"""Naive local-time helpers for appointment timestamps.

Dealer hours are plain wall-clock values; nothing here converts between
zones.
"""

from datetime import date, datetime, timedelta

from fleet_market.scheduling.slots import parse_clock_time


def to_wall_clock(value: datetime) -> datetime:
    """Drop tzinfo while keeping the written clock reading as-is."""
    return value.replace(tzinfo=None, second=0, microsecond=0)


def combine_wall_clock(day: date, clock_time: str) -> datetime:
    return datetime.combine(day, datetime.min.time()) + timedelta(minutes=parse_clock_time(clock_time))


def compute_scheduled_end(scheduled_start: datetime, duration_minutes: int) -> datetime:
    return to_wall_clock(scheduled_start) + timedelta(minutes=duration_minutes)
