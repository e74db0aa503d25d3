"""Enumeration of bookable weekend slot units over a date range."""

from __future__ import annotations

from datetime import date

import pandas as pd

from backend.domain.constraints import SchedulingConfig, validate_scheduling_config
from backend.domain.models import DateRange, SlotUnit
from backend.utils.logger import get_logger


logger = get_logger(__name__)


def qualifying_dates(date_range: DateRange, qualifying_weekdays: frozenset[int]) -> list[date]:
    """Dates in the inclusive range whose weekday may host fixtures, ascending."""
    if date_range.is_empty:
        return []
    calendar_days = pd.date_range(start=date_range.start, end=date_range.end, freq="D")
    return [
        timestamp.date()
        for timestamp in calendar_days
        if timestamp.weekday() in qualifying_weekdays
    ]


def enumerate_slots(date_range: DateRange, config: SchedulingConfig) -> list[SlotUnit]:
    """Build the ordered slot sequence: date, then label order, then repeats."""
    validate_scheduling_config(config)
    dates = qualifying_dates(date_range, config.qualifying_weekdays)

    slots: list[SlotUnit] = []
    for slot_date in dates:
        for time_label in config.time_labels:
            slots.extend(
                SlotUnit(date=slot_date, time_label=time_label)
                for _ in range(config.slot_capacity)
            )

    logger.info(
        "Slots enumerated | start=%s | end=%s | dates=%s | slots=%s",
        date_range.start.isoformat(),
        date_range.end.isoformat(),
        len(dates),
        len(slots),
    )
    return slots
