"""Proportional-stride distribution of pairings onto slot units."""

from __future__ import annotations

import math
from datetime import date
from typing import Sequence

from backend.domain.models import Pairing, Schedule, ScheduledFixture, SlotUnit
from backend.utils.logger import get_logger


logger = get_logger(__name__)


class CapacityExhaustedError(Exception):
    """Raised when pairings exist but the date range offers no slot units."""

    def __init__(self, pairing_count: int) -> None:
        super().__init__(
            f"No available slots for {pairing_count} pairings; "
            "the date range contains no qualifying weekdays"
        )
        self.pairing_count = pairing_count


def compute_slot_indices(pairing_count: int, slot_count: int) -> list[int]:
    """Map each pairing position to a slot index using a real-valued stride.

    The cursor starts at 0 and advances by ``slot_count / pairing_count``;
    each index is ``floor(cursor)`` clamped to the last slot. Indices are
    non-decreasing in pairing order.
    """
    if pairing_count == 0:
        return []
    if slot_count == 0:
        raise CapacityExhaustedError(pairing_count)

    step = slot_count / pairing_count
    cursor = 0.0
    indices: list[int] = []
    for _ in range(pairing_count):
        slot_index = math.floor(cursor)
        if slot_index >= slot_count:
            slot_index = slot_count - 1
        indices.append(slot_index)
        cursor += step
    return indices


def distribute_pairings(
    pairings: Sequence[Pairing],
    slots: Sequence[SlotUnit],
    time_labels: Sequence[str],
) -> Schedule:
    """Bind every pairing to one slot unit and group the result by date.

    Within a date, fixtures are ordered by position of their time label in
    ``time_labels``; fixtures sharing a label keep assignment order.
    """
    if not pairings:
        logger.info("Distribution skipped | pairings=0 | slots=%s", len(slots))
        return Schedule()
    if not slots:
        logger.warning(
            "Distribution failed | pairings=%s | slots=0",
            len(pairings),
        )
        raise CapacityExhaustedError(len(pairings))

    indices = compute_slot_indices(len(pairings), len(slots))

    grouped: dict[date, list[ScheduledFixture]] = {}
    for pairing, slot_index in zip(pairings, indices):
        slot = slots[slot_index]
        grouped.setdefault(slot.date, []).append(
            ScheduledFixture(date=slot.date, time_label=slot.time_label, pairing=pairing)
        )

    label_rank = {label: rank for rank, label in enumerate(time_labels)}
    days = {
        day: tuple(
            sorted(
                fixtures,
                key=lambda fixture: label_rank.get(fixture.time_label, len(label_rank)),
            )
        )
        for day, fixtures in grouped.items()
    }

    used_slots = len(set(indices))
    if len(pairings) > len(slots):
        logger.info(
            "Slot units shared | pairings=%s | slots=%s",
            len(pairings),
            len(slots),
        )
    logger.info(
        "Distribution completed | pairings=%s | slots=%s | step=%.4f | used_slots=%s | dates=%s",
        len(pairings),
        len(slots),
        len(slots) / len(pairings),
        used_slots,
        len(days),
    )
    return Schedule(days=days)
